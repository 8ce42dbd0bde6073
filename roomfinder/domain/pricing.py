"""
Stay pricing and cancellation penalties.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from pendulum import DateTime

from .models import Period, Reservation, RoomType

CENT = Decimal("0.01")

# Check-in month -> price factor
HIGH_SEASON_MONTHS = (12, 1, 2, 7, 8)
MID_SEASON_MONTHS = (3, 4, 5, 9, 10)


def _to_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def season_factor(period: Period) -> Decimal:
    """Return the price factor for the season the stay starts in."""
    month = period.check_in.month
    if month in HIGH_SEASON_MONTHS:
        return Decimal("1.5")
    if month in MID_SEASON_MONTHS:
        return Decimal("1.2")
    return Decimal("1.0")


def long_stay_discount(nights: int) -> int:
    """Return the discount percentage granted for a stay of ``nights`` nights."""
    if nights >= 7:
        return 15
    if nights >= 3:
        return 5
    return 0


@dataclass(frozen=True)
class StayQuote:
    """Price breakdown for one stay."""
    nights: int
    nightly_rate: Decimal
    subtotal: Decimal
    discount_percent: int
    total: Decimal


def quote_stay(room_type: RoomType, period: Period) -> StayQuote:
    """
    Price a stay of the given room type.

    Same-day stays are billed as one night.
    """
    nights = max(period.duration_nights(), 1)
    nightly_rate = _to_money(room_type.base_price * season_factor(period))
    subtotal = nightly_rate * nights
    discount_percent = long_stay_discount(nights)
    total = _to_money(subtotal * (Decimal(100 - discount_percent) / Decimal(100)))

    return StayQuote(
        nights=nights,
        nightly_rate=nightly_rate,
        subtotal=subtotal,
        discount_percent=discount_percent,
        total=total,
    )


@dataclass(frozen=True)
class CancellationPolicy:
    """
    Cancelling at least ``free_cancellation_hours`` before check-in is free;
    later cancellations forfeit ``penalty_percent`` of the total price.
    """
    free_cancellation_hours: int = 48
    penalty_percent: int = 50


def cancellation_penalty(reservation: Reservation, policy: CancellationPolicy, now: DateTime) -> Decimal:
    """Return the amount withheld when ``reservation`` is cancelled at ``now``."""
    deadline = reservation.period.check_in.subtract(hours=policy.free_cancellation_hours)
    if now <= deadline:
        return Decimal("0.00")
    return _to_money(reservation.total_price * Decimal(policy.penalty_percent) / Decimal(100))
