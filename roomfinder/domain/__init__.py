"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import (
    cleaning_buffer_hours,
    find_available_rooms,
    is_available,
    is_available_with_cleaning,
    next_available_check_in,
)
from .models import Period, Reservation, ReservationStatus, Room, RoomType
from .pricing import CancellationPolicy, StayQuote, quote_stay

__all__ = [
    "Period",
    "Reservation",
    "ReservationStatus",
    "Room",
    "RoomType",
    "CancellationPolicy",
    "StayQuote",
    "quote_stay",
    "cleaning_buffer_hours",
    "find_available_rooms",
    "is_available",
    "is_available_with_cleaning",
    "next_available_check_in",
]
