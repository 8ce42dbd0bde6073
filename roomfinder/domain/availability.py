"""
Core business logic for deciding whether rooms can be booked.

Pure domain functions - no repositories, no I/O. Callers hand in a snapshot
of the reservations they care about and get a decision back. Malformed
periods never get this far because ``Period`` refuses to exist with them.
"""

from typing import Iterable, List, Mapping, Optional, Sequence

from pendulum import DateTime

from .models import Period, Reservation, Room, RoomType


def _blocking_reservations(room: Room, reservations: Iterable[Reservation]) -> List[Reservation]:
    """Active reservations that belong to ``room``."""
    return [
        reservation for reservation in reservations
        if reservation.room_id == room.id and reservation.is_active()
    ]


def is_available(room: Room, period: Period, existing_reservations: Iterable[Reservation]) -> bool:
    """Check that no active reservation of the room overlaps the period."""
    return not any(
        period.overlaps(reservation.period)
        for reservation in _blocking_reservations(room, existing_reservations)
    )


def cleaning_buffer_hours(room: Room) -> float:
    """Hours housekeeping needs between two stays in this room."""
    return room.room_type.cleaning_hours


def is_available_with_cleaning(
    room: Room,
    period: Period,
    existing_reservations: Iterable[Reservation],
) -> bool:
    """
    Like ``is_available`` but also keeps the cleaning buffer free.

    Each active reservation is widened by the buffer on both sides, so a
    candidate checking in less than the buffer after a checkout (or checking
    out less than the buffer before a check-in) is rejected. A gap exactly
    equal to the buffer is fine.
    """
    blocking = _blocking_reservations(room, existing_reservations)
    buffer_hours = cleaning_buffer_hours(room)

    for reservation in blocking:
        occupied = reservation.period
        if buffer_hours > 0:
            occupied = occupied.expanded(buffer_hours)
        if period.overlaps(occupied):
            return False

    return True


def find_available_rooms(
    period: Period,
    candidate_rooms: Sequence[Room],
    reservations_by_room: Mapping[str, Sequence[Reservation]],
    room_type: Optional[RoomType] = None,
) -> List[Room]:
    """
    Filter candidate rooms down to those bookable for the period.

    Input order is preserved. Rooms missing from ``reservations_by_room``
    are treated as having no reservations at all.
    """
    return [
        room for room in candidate_rooms
        if (room_type is None or room.room_type == room_type)
        and is_available_with_cleaning(room, period, reservations_by_room.get(room.id, ()))
    ]


def next_available_check_in(
    room: Room,
    nights: int,
    existing_reservations: Sequence[Reservation],
    start: DateTime,
    horizon_days: int = 365,
) -> Optional[DateTime]:
    """
    Find the first day, starting at ``start``, on which a stay of ``nights``
    nights fits into the room's calendar.

    Candidates keep the clock time of ``start`` and advance one day at a time.
    Returns None when nothing fits within ``horizon_days``.
    """
    if nights <= 0:
        return None

    for offset in range(horizon_days):
        check_in = start.add(days=offset)
        candidate = Period(check_in=check_in, check_out=check_in.add(days=nights))
        if is_available_with_cleaning(room, candidate, existing_reservations):
            return check_in

    return None
