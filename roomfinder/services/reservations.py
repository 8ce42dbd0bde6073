"""
Application services for searching rooms and managing reservations.

The service fetches rooms and reservations through repository protocols and
delegates every availability decision to the pure functions in
``roomfinder.domain.availability``. Repositories are passed in explicitly,
so tests use the in-memory adapters and the CLI uses the JSON store.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Protocol

import pendulum
from pendulum import DateTime

from ..domain.availability import (
    find_available_rooms,
    is_available_with_cleaning,
    next_available_check_in,
)
from ..domain.exceptions import (
    ReservationNotFoundError,
    RoomNotAvailableError,
    RoomNotFoundError,
    ValidationError,
)
from ..domain.models import Period, Reservation, Room, RoomType
from ..domain.pricing import CancellationPolicy, StayQuote, cancellation_penalty, quote_stay

logger = logging.getLogger(__name__)

MIN_CANCELLATION_REASON_LENGTH = 10


class RoomRepositoryProtocol(Protocol):
    """Protocol describing the room storage needed by the service."""

    async def get(self, room_id: str) -> Optional[Room]:
        """Return the room or None."""

    async def list_rooms(self, active_only: bool = False) -> List[Room]:
        """Return all rooms in insertion order."""

    async def save(self, room: Room) -> None:
        """Insert or replace a room."""


class ReservationRepositoryProtocol(Protocol):
    """Protocol describing the reservation storage needed by the service."""

    async def get(self, reservation_id: str) -> Optional[Reservation]:
        """Return the reservation or None."""

    async def save(self, reservation: Reservation) -> None:
        """Insert or replace a reservation."""

    async def list_for_room(self, room_id: str) -> List[Reservation]:
        """Return every reservation of a room, whatever its status."""

    async def list_all(self) -> List[Reservation]:
        """Return every reservation."""


@dataclass(frozen=True)
class RoomOffer:
    room: Room
    quote: StayQuote


@dataclass(frozen=True)
class AvailabilityReport:
    """Result of an availability search."""
    period: Period
    nights: int
    offers: List[RoomOffer] = field(default_factory=list)

    @property
    def total_available(self) -> int:
        return len(self.offers)


@dataclass(frozen=True)
class CancellationReceipt:
    reservation: Reservation
    penalty: Decimal
    refund: Decimal
    penalty_percent: int
    cancelled_by: str
    cancelled_at: DateTime


class ReservationService:
    """
    Orchestrates repositories and availability rules for booking rooms.
    """

    def __init__(
        self,
        rooms: RoomRepositoryProtocol,
        reservations: ReservationRepositoryProtocol,
        cancellation_policy: Optional[CancellationPolicy] = None,
    ) -> None:
        self._rooms = rooms
        self._reservations = reservations
        self._cancellation_policy = cancellation_policy or CancellationPolicy()

    async def check_availability(
        self,
        period: Period,
        *,
        room_type: Optional[RoomType] = None,
        min_capacity: Optional[int] = None,
        max_price: Optional[Decimal] = None,
    ) -> AvailabilityReport:
        """
        Search bookable rooms for a period and price each of them.

        ``max_price`` caps the total price of the stay, not the nightly rate.
        """
        if min_capacity is not None and min_capacity <= 0:
            raise ValidationError("Minimum capacity must be greater than zero")
        if max_price is not None and max_price <= 0:
            raise ValidationError("Maximum price must be greater than zero")

        rooms = await self._rooms.list_rooms(active_only=True)
        reservations_by_room = await self._reservations_by_room(rooms)

        available = find_available_rooms(
            period=period,
            candidate_rooms=rooms,
            reservations_by_room=reservations_by_room,
            room_type=room_type,
        )

        offers: List[RoomOffer] = []
        for room in available:
            if min_capacity is not None and room.room_type.capacity < min_capacity:
                continue
            quote = quote_stay(room.room_type, period)
            if max_price is not None and quote.total > max_price:
                continue
            offers.append(RoomOffer(room=room, quote=quote))

        logger.debug(
            "Availability for %s: %d of %d active rooms offered",
            period, len(offers), len(rooms),
        )

        return AvailabilityReport(period=period, nights=period.duration_nights(), offers=offers)

    async def is_room_available(self, room_id: str, period: Period) -> bool:
        room = await self._get_room(room_id)
        if not room.can_be_booked():
            return False
        existing = await self._reservations.list_for_room(room_id)
        return is_available_with_cleaning(room, period, existing)

    async def create_reservation(
        self,
        *,
        room_id: str,
        guest_id: str,
        period: Period,
        guests: int,
        notes: Optional[str] = None,
        now: Optional[DateTime] = None,
    ) -> Reservation:
        """
        Book a room for a guest.

        Raises:
            ValidationError: Missing guest id, a stay starting in the past or a
                guest count the room cannot host
            RoomNotFoundError: Unknown room
            RoomNotAvailableError: Room inactive or taken for the period
        """
        if not guest_id or not guest_id.strip():
            raise ValidationError("Guest id is required")
        if guests <= 0:
            raise ValidationError("Number of guests must be greater than zero")
        if not period.is_future(now):
            raise ValidationError(f"Stay {period} must start in the future")

        room = await self._get_room(room_id)

        if not room.can_be_booked():
            raise RoomNotAvailableError(f"Room {room.number} is not open for reservations")

        if not room.room_type.can_host(guests):
            raise ValidationError(
                f"Room {room.number} can only host {room.room_type.capacity} guest(s)"
            )

        existing = await self._reservations.list_for_room(room_id)
        if not is_available_with_cleaning(room, period, existing):
            raise RoomNotAvailableError(f"Room {room.number} is not available for {period}")

        quote = quote_stay(room.room_type, period)
        reservation = Reservation(
            id=self._generate_id(),
            room_id=room.id,
            guest_id=guest_id,
            period=period,
            total_price=quote.total,
            guests=guests,
            notes=notes,
        )

        await self._reservations.save(reservation)
        logger.info(
            "Created reservation %s for room %s (%s, total %s)",
            reservation.id, room.number, period, quote.total,
        )
        return reservation

    async def confirm_reservation(self, reservation_id: str) -> Reservation:
        """
        Confirm a pending reservation after re-checking that its room is free.
        """
        reservation = await self._get_reservation(reservation_id)
        room = await self._get_room(reservation.room_id)

        others = [
            other for other in await self._reservations.list_for_room(room.id)
            if other.id != reservation.id
        ]
        if not room.can_be_booked() or not is_available_with_cleaning(room, reservation.period, others):
            raise RoomNotAvailableError(
                f"Room {room.number} is no longer available for {reservation.period}"
            )

        confirmed = reservation.confirm()
        await self._reservations.save(confirmed)
        logger.info("Confirmed reservation %s", confirmed.id)
        return confirmed

    async def cancel_reservation(
        self,
        reservation_id: str,
        *,
        reason: str,
        cancelled_by: str,
        now: Optional[DateTime] = None,
    ) -> CancellationReceipt:
        """
        Cancel a reservation and work out the penalty and refund.
        """
        if not reason or len(reason.strip()) < MIN_CANCELLATION_REASON_LENGTH:
            raise ValidationError(
                f"Cancellation reason must have at least {MIN_CANCELLATION_REASON_LENGTH} characters"
            )
        if not cancelled_by or not cancelled_by.strip():
            raise ValidationError("The cancelling user is required")

        reservation = await self._get_reservation(reservation_id)
        cancelled = reservation.cancel(reason.strip())

        cancelled_at = now if now is not None else pendulum.now("UTC")
        penalty = cancellation_penalty(cancelled, self._cancellation_policy, cancelled_at)
        refund = max(cancelled.total_price - penalty, Decimal("0.00"))
        penalty_percent = (
            int((penalty / cancelled.total_price * 100).to_integral_value())
            if cancelled.total_price else 0
        )

        await self._reservations.save(cancelled)
        logger.info(
            "Cancelled reservation %s by %s (penalty %s, refund %s)",
            cancelled.id, cancelled_by, penalty, refund,
        )

        return CancellationReceipt(
            reservation=cancelled,
            penalty=penalty,
            refund=refund,
            penalty_percent=penalty_percent,
            cancelled_by=cancelled_by,
            cancelled_at=cancelled_at,
        )

    async def find_next_available(self, room_id: str, nights: int, start: DateTime) -> Optional[DateTime]:
        """Return the earliest check-in from ``start`` for a stay of ``nights`` nights."""
        if nights <= 0:
            raise ValidationError("Number of nights must be greater than zero")
        room = await self._get_room(room_id)
        if not room.can_be_booked():
            return None
        existing = await self._reservations.list_for_room(room_id)
        return next_available_check_in(room, nights, existing, start)

    async def _get_room(self, room_id: str) -> Room:
        room = await self._rooms.get(room_id)
        if room is None:
            raise RoomNotFoundError(f"Room not found: {room_id}")
        return room

    async def _get_reservation(self, reservation_id: str) -> Reservation:
        reservation = await self._reservations.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(f"Reservation not found: {reservation_id}")
        return reservation

    async def _reservations_by_room(self, rooms: List[Room]) -> Dict[str, List[Reservation]]:
        by_room: Dict[str, List[Reservation]] = {}
        for room in rooms:
            by_room[room.id] = await self._reservations.list_for_room(room.id)
        return by_room

    @staticmethod
    def _generate_id() -> str:
        return f"res_{uuid.uuid4().hex[:12]}"
