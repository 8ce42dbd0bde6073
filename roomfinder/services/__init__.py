"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .reservations import (
    AvailabilityReport,
    CancellationReceipt,
    ReservationRepositoryProtocol,
    ReservationService,
    RoomOffer,
    RoomRepositoryProtocol,
)

__all__ = [
    "AvailabilityReport",
    "CancellationReceipt",
    "ReservationRepositoryProtocol",
    "ReservationService",
    "RoomOffer",
    "RoomRepositoryProtocol",
]
