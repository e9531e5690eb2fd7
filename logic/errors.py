"""
Reservation errors.

Every error carries the HTTP status it is rendered with; the Flask error
handler in app.py turns any of them into the standard response envelope.
"""


class ReservationError(Exception):
    """Base exception for reservation errors."""
    status_code = 500
    message = "Unexpected error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidInputError(ReservationError):
    """Missing or malformed request fields."""
    status_code = 400
    message = "Invalid input"


class PastDateError(ReservationError):
    """Reservation date is before today."""
    status_code = 400
    message = "Cannot make reservations for past dates"


class NotFoundError(ReservationError):
    """Referenced table or reservation does not exist."""
    status_code = 404
    message = "Resource not found"


class TableInactiveError(ReservationError):
    """Table has been deactivated."""
    status_code = 400
    message = "This table is not available for reservations"


class CapacityExceededError(ReservationError):
    """Party is larger than the table capacity."""
    status_code = 400

    def __init__(self, capacity):
        super().__init__(
            f"This table can only accommodate {capacity} guests. Please select a larger table."
        )
        self.capacity = capacity


class ConflictError(ReservationError):
    """Table already reserved for the day and slot."""
    status_code = 409
    message = "This table is already reserved for the selected date and time slot"


class DuplicateTableError(ReservationError):
    """Table number already in use."""
    status_code = 409
    message = "Table number already exists"


class ForbiddenError(ReservationError):
    """Caller lacks the role or ownership required."""
    status_code = 403
    message = "Not authorized to perform this action"


class AlreadyCancelledError(ReservationError):
    """Reservation was cancelled before."""
    status_code = 400
    message = "This reservation is already cancelled"


class AuthenticationError(ReservationError):
    """Bad credentials or unknown account."""
    status_code = 401
    message = "Invalid credentials"
