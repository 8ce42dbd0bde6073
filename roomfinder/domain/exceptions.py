"""
Domain-specific exception hierarchy for the roomfinder application.
"""


class RoomfinderError(Exception):
    """Base class for all application-level errors."""


class InvalidPeriodError(RoomfinderError, ValueError):
    """Raised when a period does not check in strictly before it checks out."""


class ValidationError(RoomfinderError, ValueError):
    """Raised when input values break a domain rule."""


class RoomNotFoundError(RoomfinderError):
    """Raised when a room id is unknown to the repository."""


class ReservationNotFoundError(RoomfinderError):
    """Raised when a reservation id is unknown to the repository."""


class RoomNotAvailableError(RoomfinderError):
    """Raised when a room cannot be booked for the requested period."""


class InvalidReservationStateError(RoomfinderError):
    """Raised when a reservation lifecycle transition is not allowed."""


class RepositoryError(RoomfinderError):
    """Raised when stored hotel data cannot be read or written."""
