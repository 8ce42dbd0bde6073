"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Dict, List

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import ValidationError
from .domain.models import Period, RoomType, preset_room_types
from .domain.pricing import CancellationPolicy


class DefaultsConfig(BaseModel):
    """Default settings for searches and bookings."""
    check_in_hour: int = 15
    check_out_hour: int = 11
    nights: int = 1

    @field_validator("nights")
    @classmethod
    def validate_nights(cls, value: int) -> int:
        """Ensure the default stay is at least one night."""
        if value <= 0:
            raise ValueError("nights must be greater than zero")
        return value

    @field_validator("check_in_hour", "check_out_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v


class CancellationConfig(BaseModel):
    """Cancellation penalty settings."""
    free_cancellation_hours: int = 48
    penalty_percent: int = 50

    @field_validator("free_cancellation_hours")
    @classmethod
    def validate_hours(cls, value: int) -> int:
        if value < 0:
            raise ValueError("free_cancellation_hours cannot be negative")
        return value

    @field_validator("penalty_percent")
    @classmethod
    def validate_percent(cls, value: int) -> int:
        if not 0 <= value <= 100:
            raise ValueError(f"penalty_percent must be between 0 and 100, got {value}")
        return value


class RoomTypeConfig(BaseModel):
    """Room type definition; overrides a preset with the same name."""
    name: str
    capacity: int
    base_price: Decimal
    cleaning_hours: float = 1.0
    amenities: List[str] = Field(default_factory=list)

    def to_room_type(self) -> RoomType:
        return RoomType(
            name=self.name.lower(),
            capacity=self.capacity,
            base_price=self.base_price,
            amenities=tuple(self.amenities),
            cleaning_hours=self.cleaning_hours,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Madrid"
    data_file: Path = Path("hotel_data.json")
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    cancellation: CancellationConfig = Field(default_factory=CancellationConfig)
    room_types: List[RoomTypeConfig] = Field(default_factory=list)

    @field_validator("room_types")
    @classmethod
    def validate_room_types(cls, value: List[RoomTypeConfig]) -> List[RoomTypeConfig]:
        """Ensure room type names are unique and the definitions are valid."""
        seen: set[str] = set()
        for room_type in value:
            key = room_type.name.lower()
            if key in seen:
                raise ValueError(f"Duplicate room type detected: {room_type.name}")
            seen.add(key)
            room_type.to_room_type()
        return value

    @model_validator(mode="after")
    def validate_timezone(self) -> "AppConfig":
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(self.timezone)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {self.timezone}") from exc
        return self

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Relative ``data_file`` paths are resolved against the config file's
        directory.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file
        return config

    def available_room_types(self) -> Dict[str, RoomType]:
        """Presets merged with the configured room types."""
        room_types = preset_room_types()
        for room_type in self.room_types:
            converted = room_type.to_room_type()
            room_types[converted.name] = converted
        return room_types

    def resolve_room_type(self, name: str) -> RoomType:
        """
        Resolve a room type by name (case-insensitive).

        Raises:
            ValidationError: If no room type has that name
        """
        room_types = self.available_room_types()
        room_type = room_types.get(name.lower())
        if room_type is None:
            raise ValidationError(
                f"Unknown room type: '{name}'. "
                f"Valid types: {', '.join(sorted(room_types))}"
            )
        return room_type

    def cancellation_policy(self) -> CancellationPolicy:
        return CancellationPolicy(
            free_cancellation_hours=self.cancellation.free_cancellation_hours,
            penalty_percent=self.cancellation.penalty_percent,
        )

    def build_period(self, check_in_date: date, check_out_date: date) -> Period:
        """
        Build a stay from two calendar dates using the configured check-in
        and check-out hours in the configured timezone.
        """
        check_in = pendulum.datetime(
            check_in_date.year, check_in_date.month, check_in_date.day,
            self.defaults.check_in_hour, tz=self.timezone,
        )
        check_out = pendulum.datetime(
            check_out_date.year, check_out_date.month, check_out_date.day,
            self.defaults.check_out_hour, tz=self.timezone,
        )
        return Period(check_in=check_in, check_out=check_out)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of roomfinder/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
