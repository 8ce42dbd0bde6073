"""
Adapters layer - Storage backends for rooms and reservations.
"""

from .json_store import JsonHotelStore
from .memory import InMemoryReservationRepository, InMemoryRoomRepository, load_sample_hotel

__all__ = [
    "JsonHotelStore",
    "InMemoryReservationRepository",
    "InMemoryRoomRepository",
    "load_sample_hotel",
]
