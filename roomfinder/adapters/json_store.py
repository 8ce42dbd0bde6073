"""
JSON file backed storage for rooms and reservations.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from ..domain.exceptions import RepositoryError
from ..domain.models import Reservation, Room, RoomType
from .records import HotelDataFile, decode_hotel_data, encode_hotel_data

logger = logging.getLogger(__name__)


class JsonHotelStore:
    """
    Keeps the whole hotel in one JSON file.

    The file is read once on construction and rewritten after every save.
    A missing file is an empty hotel; it is created on the first save.
    Use ``store.rooms`` and ``store.reservations`` as the repositories.
    """

    def __init__(self, path: Path, room_types: Optional[Mapping[str, RoomType]] = None):
        self.path = Path(path)
        self._room_types = room_types
        self._rooms: Dict[str, Room] = {}
        self._reservations: Dict[str, Reservation] = {}
        self._load()

        self.rooms = JsonRoomRepository(self)
        self.reservations = JsonReservationRepository(self)

    def _load(self) -> None:
        if not self.path.exists():
            logger.info("Hotel data file %s not found, starting empty", self.path)
            return

        try:
            data = HotelDataFile.model_validate_json(self.path.read_text(encoding="utf-8"))
        except PydanticValidationError as exc:
            raise RepositoryError(f"Invalid hotel data in {self.path}: {exc}") from exc
        except OSError as exc:
            raise RepositoryError(f"Cannot read hotel data from {self.path}: {exc}") from exc

        rooms, reservations = decode_hotel_data(data, self._room_types)
        self._rooms = {room.id: room for room in rooms}
        self._reservations = {r.id: r for r in reservations}
        logger.debug(
            "Loaded %d rooms and %d reservations from %s",
            len(self._rooms), len(self._reservations), self.path,
        )

    def flush(self) -> None:
        """Write the current state to disk, replacing the file atomically."""
        self._write(self._rooms, self._reservations)

    def _commit(
        self,
        rooms: Optional[Dict[str, Room]] = None,
        reservations: Optional[Dict[str, Reservation]] = None,
    ) -> None:
        """Write the new state and keep it in memory only once it is on disk."""
        rooms = self._rooms if rooms is None else rooms
        reservations = self._reservations if reservations is None else reservations
        self._write(rooms, reservations)
        self._rooms = rooms
        self._reservations = reservations

    def _write(self, rooms: Dict[str, Room], reservations: Dict[str, Reservation]) -> None:
        data = encode_hotel_data(list(rooms.values()), list(reservations.values()))
        payload = data.model_dump_json(indent=2)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise RepositoryError(f"Cannot write hotel data to {self.path}: {exc}") from exc


class JsonRoomRepository:
    def __init__(self, store: JsonHotelStore):
        self._store = store

    async def get(self, room_id: str) -> Optional[Room]:
        return self._store._rooms.get(room_id)

    async def list_rooms(self, active_only: bool = False) -> List[Room]:
        return [room for room in self._store._rooms.values() if room.active or not active_only]

    async def save(self, room: Room) -> None:
        rooms = dict(self._store._rooms)
        rooms[room.id] = room
        self._store._commit(rooms=rooms)


class JsonReservationRepository:
    def __init__(self, store: JsonHotelStore):
        self._store = store

    async def get(self, reservation_id: str) -> Optional[Reservation]:
        return self._store._reservations.get(reservation_id)

    async def save(self, reservation: Reservation) -> None:
        reservations = dict(self._store._reservations)
        reservations[reservation.id] = reservation
        self._store._commit(reservations=reservations)

    async def list_for_room(self, room_id: str) -> List[Reservation]:
        return [r for r in self._store._reservations.values() if r.room_id == room_id]

    async def list_all(self) -> List[Reservation]:
        return list(self._store._reservations.values())
