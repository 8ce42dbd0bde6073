"""
Tests for stay pricing and cancellation penalties.
"""

from datetime import datetime
from decimal import Decimal

import pendulum
import pytest

from roomfinder.domain.models import Period, Reservation, RoomType
from roomfinder.domain.pricing import (
    CancellationPolicy,
    cancellation_penalty,
    long_stay_discount,
    quote_stay,
    season_factor,
)


def _dt(text: str):
    return pendulum.parse(text, tz="Europe/Madrid")


def _period(check_in: str, check_out: str) -> Period:
    return Period(check_in=_dt(check_in), check_out=_dt(check_out))


@pytest.mark.parametrize(
    "check_in, expected",
    [
        ("2024-01-10 15:00", Decimal("1.5")),
        ("2024-07-10 15:00", Decimal("1.5")),
        ("2024-04-10 15:00", Decimal("1.2")),
        ("2024-10-10 15:00", Decimal("1.2")),
        ("2024-06-10 15:00", Decimal("1.0")),
        ("2024-11-10 15:00", Decimal("1.0")),
    ],
)
def test_season_factor(check_in, expected):
    check_out = _dt(check_in).add(days=1).to_datetime_string()
    assert season_factor(_period(check_in, check_out)) == expected


@pytest.mark.parametrize("nights, expected", [(1, 0), (2, 0), (3, 5), (6, 5), (7, 15), (30, 15)])
def test_long_stay_discount(nights, expected):
    assert long_stay_discount(nights) == expected


class TestQuoteStay:
    """Tests for stay quotes."""

    def test_low_season_short_stay(self):
        quote = quote_stay(RoomType.double(), _period("2024-06-10 15:00", "2024-06-12 11:00"))

        assert quote.nights == 2
        assert quote.nightly_rate == Decimal("150.00")
        assert quote.subtotal == Decimal("300.00")
        assert quote.discount_percent == 0
        assert quote.total == Decimal("300.00")

    def test_high_season_long_stay(self):
        quote = quote_stay(RoomType.single(), _period("2024-01-10 15:00", "2024-01-17 11:00"))

        assert quote.nights == 7
        assert quote.nightly_rate == Decimal("150.00")
        assert quote.subtotal == Decimal("1050.00")
        assert quote.discount_percent == 15
        assert quote.total == Decimal("892.50")

    def test_same_day_stay_is_billed_one_night(self):
        quote = quote_stay(RoomType.double(), _period("2024-06-10 09:00", "2024-06-10 18:00"))

        assert quote.nights == 1
        assert quote.total == Decimal("150.00")


class TestCancellationPenalty:
    """Tests for cancellation penalties."""

    def _reservation(self) -> Reservation:
        return Reservation(
            id="res-1",
            room_id="room-1",
            guest_id="guest-1",
            period=_period("2024-06-10 15:00", "2024-06-12 11:00"),
            total_price=Decimal("300.00"),
        )

    def test_early_cancellation_is_free(self):
        penalty = cancellation_penalty(self._reservation(), CancellationPolicy(), _dt("2024-06-07 15:00"))

        assert penalty == Decimal("0")

    def test_cancellation_at_deadline_is_free(self):
        penalty = cancellation_penalty(self._reservation(), CancellationPolicy(), _dt("2024-06-08 15:00"))

        assert penalty == Decimal("0")

    def test_late_cancellation_is_penalised(self):
        penalty = cancellation_penalty(self._reservation(), CancellationPolicy(), _dt("2024-06-09 15:00"))

        assert penalty == Decimal("150.00")

    def test_custom_policy(self):
        policy = CancellationPolicy(free_cancellation_hours=24, penalty_percent=20)

        assert cancellation_penalty(self._reservation(), policy, _dt("2024-06-09 15:00")) == Decimal("0")
        assert cancellation_penalty(self._reservation(), policy, _dt("2024-06-10 09:00")) == Decimal("60.00")

    def test_period_built_from_plain_datetimes(self):
        reservation = Reservation(
            id="res-2",
            room_id="room-1",
            guest_id="guest-1",
            period=Period(check_in=datetime(2024, 6, 10, 13), check_out=datetime(2024, 6, 12, 9)),
            total_price=Decimal("300.00"),
        )

        assert cancellation_penalty(reservation, CancellationPolicy(), _dt("2024-06-09 15:00")) == Decimal("150.00")
