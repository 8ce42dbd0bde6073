"""
Tests for configuration loading.
"""

from datetime import date
from decimal import Decimal

import pendulum
import pytest

from roomfinder.config import AppConfig
from roomfinder.domain.exceptions import InvalidPeriodError, ValidationError


def _write(tmp_path, text: str):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults():
    config = AppConfig()

    assert config.defaults.check_in_hour == 15
    assert config.defaults.check_out_hour == 11
    assert config.cancellation_policy().penalty_percent == 50
    assert set(config.available_room_types()) == {"single", "double", "suite"}


def test_load_from_yaml(tmp_path):
    path = _write(
        tmp_path,
        """
timezone: Europe/Madrid
data_file: data/hotel.json
cancellation:
  free_cancellation_hours: 24
  penalty_percent: 30
room_types:
  - name: Family
    capacity: 5
    base_price: 220
    cleaning_hours: 2.5
""",
    )

    config = AppConfig.load_from_yaml(path)

    assert config.data_file == tmp_path / "data" / "hotel.json"
    assert config.cancellation_policy().free_cancellation_hours == 24
    family = config.resolve_room_type("FAMILY")
    assert family.capacity == 5
    assert family.base_price == Decimal("220")
    assert family.cleaning_hours == 2.5


def test_configured_type_overrides_preset(tmp_path):
    path = _write(
        tmp_path,
        """
room_types:
  - name: suite
    capacity: 6
    base_price: 400
    cleaning_hours: 3
""",
    )

    config = AppConfig.load_from_yaml(path)

    assert config.resolve_room_type("suite").cleaning_hours == 3


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load_from_yaml(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = _write(tmp_path, "timezone: [unclosed")

    with pytest.raises(ValueError, match="Invalid YAML"):
        AppConfig.load_from_yaml(path)


def test_root_must_be_mapping(tmp_path):
    path = _write(tmp_path, "- just\n- a list\n")

    with pytest.raises(ValueError, match="mapping"):
        AppConfig.load_from_yaml(path)


@pytest.mark.parametrize(
    "data",
    [
        {"defaults": {"check_in_hour": 24}},
        {"defaults": {"nights": 0}},
        {"cancellation": {"penalty_percent": 120}},
        {"timezone": "Mars/Olympus_Mons"},
        {"room_types": [{"name": "a", "capacity": 1, "base_price": 10}, {"name": "A", "capacity": 2, "base_price": 20}]},
        {"room_types": [{"name": "broken", "capacity": 0, "base_price": 10}]},
    ],
)
def test_invalid_values(data):
    with pytest.raises(ValueError):
        AppConfig(**data)


def test_unknown_room_type():
    with pytest.raises(ValidationError, match="Unknown room type"):
        AppConfig().resolve_room_type("castle")


def test_build_period_uses_configured_hours():
    config = AppConfig(timezone="Europe/Madrid")

    period = config.build_period(date(2024, 1, 10), date(2024, 1, 12))

    assert period.check_in == pendulum.datetime(2024, 1, 10, 15, tz="Europe/Madrid")
    assert period.check_out == pendulum.datetime(2024, 1, 12, 11, tz="Europe/Madrid")
    assert period.duration_nights() == 2


def test_build_period_rejects_reversed_dates():
    with pytest.raises(InvalidPeriodError):
        AppConfig().build_period(date(2024, 1, 12), date(2024, 1, 10))
