"""
In-memory repositories for tests and the demo mode.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..domain.models import Reservation, Room, RoomType
from .records import HotelDataFile, decode_hotel_data

logger = logging.getLogger(__name__)

SAMPLE_DATA_FILE = Path(__file__).parent / "sample_hotel_data.json"


class InMemoryRoomRepository:
    """Rooms kept in a dict, in insertion order."""

    def __init__(self, rooms: Iterable[Room] = ()):
        self._rooms: Dict[str, Room] = {room.id: room for room in rooms}

    async def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    async def list_rooms(self, active_only: bool = False) -> List[Room]:
        return [room for room in self._rooms.values() if room.active or not active_only]

    async def save(self, room: Room) -> None:
        self._rooms[room.id] = room


class InMemoryReservationRepository:
    """Reservations kept in a dict, in insertion order."""

    def __init__(self, reservations: Iterable[Reservation] = ()):
        self._reservations: Dict[str, Reservation] = {r.id: r for r in reservations}

    async def get(self, reservation_id: str) -> Optional[Reservation]:
        return self._reservations.get(reservation_id)

    async def save(self, reservation: Reservation) -> None:
        self._reservations[reservation.id] = reservation

    async def list_for_room(self, room_id: str) -> List[Reservation]:
        return [r for r in self._reservations.values() if r.room_id == room_id]

    async def list_all(self) -> List[Reservation]:
        return list(self._reservations.values())


def load_sample_hotel(
    room_types: Optional[Mapping[str, RoomType]] = None,
) -> Tuple[InMemoryRoomRepository, InMemoryReservationRepository]:
    """
    Build in-memory repositories filled with the bundled sample hotel.

    Returns:
        (rooms, reservations) repositories
    """
    data = HotelDataFile.model_validate_json(SAMPLE_DATA_FILE.read_text(encoding="utf-8"))
    rooms, reservations = decode_hotel_data(data, room_types)
    logger.debug("Loaded sample hotel: %d rooms, %d reservations", len(rooms), len(reservations))
    return InMemoryRoomRepository(rooms), InMemoryReservationRepository(reservations)
