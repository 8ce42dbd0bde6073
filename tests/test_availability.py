"""
Tests for the availability functions.
"""

from decimal import Decimal

import pendulum

from roomfinder.domain.availability import (
    cleaning_buffer_hours,
    find_available_rooms,
    is_available,
    is_available_with_cleaning,
    next_available_check_in,
)
from roomfinder.domain.models import Period, Reservation, ReservationStatus, Room, RoomType

STANDARD = RoomType("standard", 2, Decimal("100"), cleaning_hours=2.0)
NO_CLEANING = RoomType("capsule", 1, Decimal("40"), cleaning_hours=0)


def _dt(text: str):
    return pendulum.parse(text, tz="Europe/Madrid")


def _period(check_in: str, check_out: str) -> Period:
    return Period(check_in=_dt(check_in), check_out=_dt(check_out))


def _reservation(
    reservation_id: str,
    room: Room,
    period: Period,
    status: ReservationStatus = ReservationStatus.CONFIRMED,
) -> Reservation:
    return Reservation(
        id=reservation_id,
        room_id=room.id,
        guest_id="guest-1",
        period=period,
        status=status,
    )


ROOM = Room(id="room-1", number="101", room_type=STANDARD)
EXISTING = _period("2024-01-10 15:00", "2024-01-12 11:00")


class TestIsAvailable:
    """Tests for plain overlap checks."""

    def test_exact_match_is_unavailable(self):
        reservations = [_reservation("r1", ROOM, EXISTING)]

        assert not is_available(ROOM, EXISTING, reservations)

    def test_cancelled_reservations_are_ignored(self):
        reservations = [
            _reservation("r1", ROOM, EXISTING, ReservationStatus.CANCELLED),
            _reservation("r2", ROOM, EXISTING, ReservationStatus.CANCELLED),
        ]

        assert is_available(ROOM, EXISTING, reservations)

    def test_cancelled_status_given_as_text_is_ignored(self):
        reservations = [_reservation("r1", ROOM, EXISTING, "cancelled")]

        assert is_available(ROOM, EXISTING, reservations)
        assert is_available_with_cleaning(ROOM, EXISTING, reservations)

    def test_no_reservations(self):
        assert is_available(ROOM, EXISTING, [])

    def test_reservations_of_other_rooms_are_ignored(self):
        other_room = Room(id="room-2", number="102", room_type=STANDARD)
        reservations = [_reservation("r1", other_room, EXISTING)]

        assert is_available(ROOM, EXISTING, reservations)

    def test_partial_overlap_is_unavailable(self):
        reservations = [_reservation("r1", ROOM, EXISTING)]
        candidate = _period("2024-01-11 15:00", "2024-01-13 11:00")

        assert not is_available(ROOM, candidate, reservations)

    def test_check_in_at_checkout_is_available(self):
        reservations = [_reservation("r1", ROOM, EXISTING)]
        candidate = _period("2024-01-12 11:00", "2024-01-14 11:00")

        assert is_available(ROOM, candidate, reservations)


class TestCleaningBuffer:
    """Tests for availability including housekeeping time."""

    def test_buffer_comes_from_room_type(self):
        assert cleaning_buffer_hours(ROOM) == 2.0
        assert cleaning_buffer_hours(Room(id="s", number="301", room_type=RoomType.suite())) == 2.0
        assert cleaning_buffer_hours(Room(id="d", number="201", room_type=RoomType.double())) == 1.5

    def test_check_in_at_checkout_is_rejected(self):
        reservations = [_reservation("r1", ROOM, EXISTING)]
        candidate = _period("2024-01-12 11:00", "2024-01-14 11:00")

        assert not is_available_with_cleaning(ROOM, candidate, reservations)

    def test_one_hour_gap_is_rejected_three_hours_accepted(self):
        """Room needs 2h of cleaning after an 11:00 checkout."""
        reservations = [_reservation("r1", ROOM, EXISTING)]
        too_early = _period("2024-01-12 12:00", "2024-01-14 11:00")
        late_enough = _period("2024-01-12 14:00", "2024-01-14 11:00")

        assert not is_available_with_cleaning(ROOM, too_early, reservations)
        assert is_available_with_cleaning(ROOM, late_enough, reservations)

    def test_gap_equal_to_buffer_is_accepted(self):
        reservations = [_reservation("r1", ROOM, EXISTING)]
        candidate = _period("2024-01-12 13:00", "2024-01-14 11:00")

        assert is_available_with_cleaning(ROOM, candidate, reservations)

    def test_checkout_too_close_to_next_check_in_is_rejected(self):
        reservations = [_reservation("r1", ROOM, EXISTING)]
        too_late = _period("2024-01-08 15:00", "2024-01-10 14:00")
        early_enough = _period("2024-01-08 15:00", "2024-01-10 12:00")

        assert not is_available_with_cleaning(ROOM, too_late, reservations)
        assert is_available_with_cleaning(ROOM, early_enough, reservations)

    def test_cancelled_reservations_need_no_cleaning(self):
        reservations = [_reservation("r1", ROOM, EXISTING, ReservationStatus.CANCELLED)]
        candidate = _period("2024-01-12 11:00", "2024-01-14 11:00")

        assert is_available_with_cleaning(ROOM, candidate, reservations)

    def test_zero_buffer_behaves_like_plain_check(self):
        capsule = Room(id="cap-1", number="C1", room_type=NO_CLEANING)
        reservations = [_reservation("r1", capsule, EXISTING)]
        candidate = _period("2024-01-12 11:00", "2024-01-13 11:00")

        assert is_available_with_cleaning(capsule, candidate, reservations)
        assert not is_available_with_cleaning(capsule, EXISTING, reservations)


class TestFindAvailableRooms:
    """Tests for filtering candidate rooms."""

    def test_type_filter_returns_only_free_matching_room(self):
        suite = RoomType.suite()
        booked = Room(id="booked", number="301", room_type=suite)
        free = Room(id="free", number="302", room_type=suite)
        other_type = Room(id="other", number="201", room_type=RoomType.double())

        result = find_available_rooms(
            period=EXISTING,
            candidate_rooms=[booked, free, other_type],
            reservations_by_room={"booked": [_reservation("r1", booked, EXISTING)]},
            room_type=suite,
        )

        assert result == [free]

    def test_preserves_input_order(self):
        rooms = [
            Room(id="c", number="103", room_type=STANDARD),
            Room(id="a", number="101", room_type=STANDARD),
            Room(id="b", number="102", room_type=STANDARD),
        ]
        reservations_by_room = {"a": [_reservation("r1", rooms[1], EXISTING)]}

        result = find_available_rooms(EXISTING, rooms, reservations_by_room)

        assert [room.id for room in result] == ["c", "b"]

    def test_cleaning_buffer_applies(self):
        room = Room(id="a", number="101", room_type=STANDARD)
        candidate = _period("2024-01-12 12:00", "2024-01-13 11:00")

        result = find_available_rooms(candidate, [room], {"a": [_reservation("r1", room, EXISTING)]})

        assert result == []

    def test_no_candidates(self):
        assert find_available_rooms(EXISTING, [], {}) == []


class TestNextAvailableCheckIn:
    """Tests for searching the next free stay."""

    def test_skips_booked_days(self):
        reservations = [_reservation("r1", ROOM, EXISTING)]

        found = next_available_check_in(ROOM, 2, reservations, start=_dt("2024-01-09 15:00"))

        assert found == _dt("2024-01-12 15:00")

    def test_free_room_returns_start(self):
        start = _dt("2024-01-09 15:00")

        assert next_available_check_in(ROOM, 3, [], start=start) == start

    def test_returns_none_beyond_horizon(self):
        reservations = [_reservation("r1", ROOM, EXISTING)]

        found = next_available_check_in(
            ROOM, 2, reservations, start=_dt("2024-01-09 15:00"), horizon_days=2
        )

        assert found is None

    def test_non_positive_nights(self):
        assert next_available_check_in(ROOM, 0, [], start=_dt("2024-01-09 15:00")) is None
