"""Error taxonomy shared by the API and the client store.

Every failure a booking flow can produce is one of these kinds. The server
maps them to HTTP statuses; the client maps statuses back to them, so callers
can catch a conflict specifically instead of a generic failure.
"""


class BookingError(Exception):
    status_code: int = 400
    default_message = "Booking request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConflictError(BookingError):
    """The (date, time) slot is already held by another appointment."""

    status_code = 409
    default_message = "This time slot is already taken"


class ValidationError(BookingError):
    """Missing field, past date, Sunday or a time outside the slot grid."""

    status_code = 422
    default_message = "Invalid booking data"


class PolicyViolation(BookingError):
    """Edit or cancel attempted inside the minimum lead time."""

    status_code = 403
    default_message = "This appointment can no longer be changed"


class NotFoundError(BookingError):
    status_code = 404
    default_message = "Appointment not found"


class AuthError(BookingError):
    """Admin session missing, expired or rejected."""

    status_code = 401
    default_message = "Admin session expired"


class TransportError(BookingError):
    """Network failure, timeout, malformed response or unexpected status."""

    status_code = 502
    default_message = "Could not reach the booking service"


def user_message(error: BookingError) -> str:
    """Text for the blocking acknowledgement shown after a failed action."""
    if isinstance(error, ConflictError):
        return "This time slot just became unavailable. Please pick another one."
    if isinstance(error, PolicyViolation):
        return error.message
    if isinstance(error, ValidationError):
        return error.message
    if isinstance(error, AuthError):
        return "Your admin session has expired. Please log in again."
    if isinstance(error, NotFoundError):
        return "That appointment no longer exists. It may have already been cancelled."
    return "Connection error. Please try again."
