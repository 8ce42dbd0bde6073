"""
Pydantic records describing the stored hotel data, and their mapping to
domain models.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Tuple

import pendulum
from pydantic import BaseModel, Field

from ..domain.exceptions import RepositoryError
from ..domain.models import Period, Reservation, ReservationStatus, Room, RoomType, preset_room_types


class RoomTypeRecord(BaseModel):
    name: str
    capacity: int
    base_price: Decimal
    amenities: List[str] = Field(default_factory=list)
    cleaning_hours: float = 1.0

    def to_domain(self) -> RoomType:
        return RoomType(
            name=self.name,
            capacity=self.capacity,
            base_price=self.base_price,
            amenities=tuple(self.amenities),
            cleaning_hours=self.cleaning_hours,
        )

    @classmethod
    def from_domain(cls, room_type: RoomType) -> "RoomTypeRecord":
        return cls(
            name=room_type.name,
            capacity=room_type.capacity,
            base_price=room_type.base_price,
            amenities=list(room_type.amenities),
            cleaning_hours=room_type.cleaning_hours,
        )


class RoomRecord(BaseModel):
    id: str
    number: str
    room_type: str  # Name of a room type
    floor: int = 1
    active: bool = True


class ReservationRecord(BaseModel):
    id: str
    room_id: str
    guest_id: str
    check_in: datetime
    check_out: datetime
    status: ReservationStatus = ReservationStatus.PENDING
    total_price: Decimal = Decimal("0")
    guests: int = 1
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_domain(self) -> Reservation:
        created_at = pendulum.instance(self.created_at) if self.created_at else pendulum.now("UTC")
        return Reservation(
            id=self.id,
            room_id=self.room_id,
            guest_id=self.guest_id,
            period=Period.create(self.check_in, self.check_out),
            status=self.status,
            total_price=self.total_price,
            guests=self.guests,
            notes=self.notes,
            cancellation_reason=self.cancellation_reason,
            created_at=created_at,
        )

    @classmethod
    def from_domain(cls, reservation: Reservation) -> "ReservationRecord":
        return cls(
            id=reservation.id,
            room_id=reservation.room_id,
            guest_id=reservation.guest_id,
            check_in=reservation.period.check_in.to_iso8601_string(),
            check_out=reservation.period.check_out.to_iso8601_string(),
            status=reservation.status,
            total_price=reservation.total_price,
            guests=reservation.guests,
            notes=reservation.notes,
            cancellation_reason=reservation.cancellation_reason,
            created_at=reservation.created_at.to_iso8601_string(),
        )


class HotelDataFile(BaseModel):
    """Root of a hotel data file."""
    room_types: List[RoomTypeRecord] = Field(default_factory=list)
    rooms: List[RoomRecord] = Field(default_factory=list)
    reservations: List[ReservationRecord] = Field(default_factory=list)


def decode_hotel_data(
    data: HotelDataFile,
    room_types: Optional[Mapping[str, RoomType]] = None,
) -> Tuple[List[Room], List[Reservation]]:
    """
    Turn stored records into domain objects.

    ``room_types`` (usually the configured ones) win over the types
    declared in the file, which in turn win over the built-in presets.
    Names are matched case-insensitively.

    Raises:
        RepositoryError: If a room refers to an unknown room type or a
            stored period is invalid
    """
    known_types: Dict[str, RoomType] = dict(preset_room_types())
    try:
        for record in data.room_types:
            known_types[record.name.lower()] = record.to_domain()
    except ValueError as exc:
        raise RepositoryError(f"Invalid room type in hotel data: {exc}") from exc
    for name, room_type in (room_types or {}).items():
        known_types[name.lower()] = room_type

    rooms: List[Room] = []
    for record in data.rooms:
        room_type = known_types.get(record.room_type.lower())
        if room_type is None:
            raise RepositoryError(
                f"Room {record.number} refers to unknown room type '{record.room_type}'"
            )
        rooms.append(
            Room(
                id=record.id,
                number=record.number,
                room_type=room_type,
                floor=record.floor,
                active=record.active,
            )
        )

    try:
        reservations = [record.to_domain() for record in data.reservations]
    except ValueError as exc:
        raise RepositoryError(f"Invalid reservation in hotel data: {exc}") from exc

    return rooms, reservations


def encode_hotel_data(rooms: List[Room], reservations: List[Reservation]) -> HotelDataFile:
    """Turn domain objects into a storable hotel data file."""
    room_types: Dict[str, RoomType] = {}
    for room in rooms:
        room_types.setdefault(room.room_type.name.lower(), room.room_type)

    return HotelDataFile(
        room_types=[RoomTypeRecord.from_domain(rt) for rt in room_types.values()],
        rooms=[
            RoomRecord(
                id=room.id,
                number=room.number,
                room_type=room.room_type.name,
                floor=room.floor,
                active=room.active,
            )
            for room in rooms
        ],
        reservations=[ReservationRecord.from_domain(r) for r in reservations],
    )
