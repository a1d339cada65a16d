"""
Error taxonomy shared by the auth and appointment services.
"""

from typing import Dict, Optional


class BookingClientError(Exception):
    """Base class for every error raised by the booking client"""
    pass


class ConfigurationError(BookingClientError):
    """Remote service settings are missing or unusable"""
    pass


class ValidationError(BookingClientError):
    """
    Credentials rejected locally, before any network call.

    ``errors`` maps field name to message for every failing field;
    ``field`` is the first of them in form order.
    """

    def __init__(self, field: str, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.field = field
        self.message = message
        self.errors = dict(errors) if errors else {field: message}

    @classmethod
    def from_errors(cls, errors: Dict[str, str]) -> 'ValidationError':
        field, message = next(iter(errors.items()))
        return cls(field, message, errors)


class AuthError(BookingClientError):
    """The identity service rejected a request; ``message`` is shown verbatim"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FetchError(BookingClientError):
    """Appointment retrieval failed (network, HTTP status or malformed payload)"""
    pass


class DecodeError(BookingClientError):
    """A single remote record could not be decoded"""

    def __init__(self, message: str, record_id: Optional[str] = None):
        super().__init__(message)
        self.record_id = record_id


class SubmissionInProgressError(BookingClientError):
    """A form was submitted again while its previous submission is in flight"""
    pass


class SessionExpiredError(FetchError):
    """The data service rejected the session token (401/403); the session is over"""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code
