"""
Domain models for periods, rooms and reservations.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Tuple

import pendulum
from pendulum import DateTime

from .exceptions import InvalidPeriodError, InvalidReservationStateError, ValidationError


@dataclass(frozen=True)
class Period:
    """
    Represents an immutable stay from check-in to check-out.

    Invariant: check_in must be before check_out. Two periods compare equal
    when both endpoints denote the same instants. Plain datetimes are
    converted to pendulum; naive ones are taken as UTC.
    """
    check_in: DateTime
    check_out: DateTime

    def __post_init__(self):
        for name in ("check_in", "check_out"):
            value = getattr(self, name)
            if not isinstance(value, datetime):
                raise InvalidPeriodError(f"{name} must be a datetime, got {value!r}")
            object.__setattr__(self, name, pendulum.instance(value))
        if self.check_out <= self.check_in:
            raise InvalidPeriodError(
                f"Check-in {self.check_in} must be before check-out {self.check_out}"
            )

    @classmethod
    def create(cls, check_in: datetime, check_out: datetime, tz: str = "UTC") -> "Period":
        """
        Build a period from any datetimes.

        Naive datetimes are interpreted in ``tz``; aware ones keep their zone.
        """
        return cls(
            check_in=pendulum.instance(check_in, tz=tz),
            check_out=pendulum.instance(check_out, tz=tz),
        )

    @classmethod
    def parse(cls, check_in: str, check_out: str, tz: str = "UTC") -> "Period":
        """Build a period from two ISO-8601 strings."""
        return cls(
            check_in=pendulum.parse(check_in, tz=tz),
            check_out=pendulum.parse(check_out, tz=tz),
        )

    def duration_nights(self) -> int:
        """Return the number of calendar nights between check-in and check-out."""
        check_out = self.check_out.astimezone(self.check_in.tzinfo)
        return (check_out.date() - self.check_in.date()).days

    def overlaps(self, other: "Period") -> bool:
        """Check if this stay overlaps another; touching endpoints do not overlap."""
        return self.check_in < other.check_out and other.check_in < self.check_out

    def is_future(self, now: Optional[DateTime] = None) -> bool:
        """Check if the stay starts after ``now`` (defaults to the current time)."""
        reference = now if now is not None else pendulum.now("UTC")
        return self.check_in > reference

    def expanded(self, hours: float) -> "Period":
        """Return the period widened by ``hours`` on both sides."""
        margin = pendulum.duration(hours=hours)
        return Period(check_in=self.check_in - margin, check_out=self.check_out + margin)

    def __str__(self) -> str:
        return f"{self.check_in.format('YYYY-MM-DD HH:mm')} - {self.check_out.format('YYYY-MM-DD HH:mm')}"


@dataclass(frozen=True, eq=False)
class RoomType:
    """
    Classification of a room: who it fits, what it costs per night and how
    long housekeeping needs between two stays.
    """
    name: str
    capacity: int
    base_price: Decimal
    amenities: Tuple[str, ...] = ()
    cleaning_hours: float = 1.0

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValidationError("Room type must have a name")
        if self.capacity <= 0:
            raise ValidationError(f"Capacity must be greater than zero, got {self.capacity}")
        if Decimal(self.base_price) <= 0:
            raise ValidationError(f"Base price must be greater than zero, got {self.base_price}")
        if self.cleaning_hours < 0:
            raise ValidationError(f"Cleaning hours cannot be negative, got {self.cleaning_hours}")
        object.__setattr__(self, "base_price", Decimal(self.base_price))
        object.__setattr__(self, "amenities", tuple(self.amenities))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RoomType):
            return NotImplemented
        return self.name.lower() == other.name.lower()

    def __hash__(self) -> int:
        return hash(self.name.lower())

    def can_host(self, guests: int) -> bool:
        return 0 < guests <= self.capacity

    def has_amenity(self, amenity: str) -> bool:
        return amenity.lower() in (a.lower() for a in self.amenities)

    @classmethod
    def single(cls) -> "RoomType":
        return cls("single", 1, Decimal("100"), ("WiFi", "TV"), cleaning_hours=1.0)

    @classmethod
    def double(cls) -> "RoomType":
        return cls("double", 2, Decimal("150"), ("WiFi", "TV", "Minibar"), cleaning_hours=1.5)

    @classmethod
    def suite(cls) -> "RoomType":
        return cls(
            "suite",
            4,
            Decimal("300"),
            ("WiFi", "TV", "Minibar", "Jacuzzi", "Sea view"),
            cleaning_hours=2.0,
        )


def preset_room_types() -> Dict[str, RoomType]:
    """Return the built-in room types keyed by name."""
    presets = (RoomType.single(), RoomType.double(), RoomType.suite())
    return {room_type.name: room_type for room_type in presets}


@dataclass(frozen=True)
class Room:
    """A bookable hotel room."""
    id: str
    number: str
    room_type: RoomType
    floor: int = 1
    active: bool = True

    def can_be_booked(self) -> bool:
        return self.active


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Reservation:
    """
    A booking of one room for one period.

    Lifecycle changes return new instances; a reservation is never mutated.
    """
    id: str
    room_id: str
    guest_id: str
    period: Period
    status: ReservationStatus = ReservationStatus.PENDING
    total_price: Decimal = Decimal("0")
    guests: int = 1
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: DateTime = field(default_factory=lambda: pendulum.now("UTC"))

    def __post_init__(self):
        try:
            status = ReservationStatus(self.status)
        except ValueError as exc:
            raise ValidationError(f"Unknown reservation status: {self.status!r}") from exc
        object.__setattr__(self, "status", status)

    def is_active(self) -> bool:
        """Check if the reservation still blocks its room."""
        return self.status != ReservationStatus.CANCELLED

    def can_be_cancelled(self) -> bool:
        return self.status in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)

    def confirm(self) -> "Reservation":
        if self.status != ReservationStatus.PENDING:
            raise InvalidReservationStateError(
                f"Reservation {self.id} cannot be confirmed while {self.status.value}"
            )
        return replace(self, status=ReservationStatus.CONFIRMED)

    def cancel(self, reason: str) -> "Reservation":
        if not self.can_be_cancelled():
            raise InvalidReservationStateError(
                f"Reservation {self.id} cannot be cancelled while {self.status.value}"
            )
        return replace(self, status=ReservationStatus.CANCELLED, cancellation_reason=reason)
