"""
Account and authentication errors.

Services raise these; the HTTP layer maps each class to a status code and
renders the message in the response envelope.
"""

from typing import Optional


class MeetmaxError(Exception):
    """Base exception for every failure surfaced to API callers."""

    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MeetmaxError):
    """Missing or malformed input."""

    default_message = "Invalid request"


class MissingFields(ValidationError):
    default_message = "All fields are required"


class WeakPassword(ValidationError):
    default_message = "Password must be at least 8 characters"


class ConflictAlreadyRegistered(MeetmaxError):
    default_message = "User is already registered"


class EmailAlreadyTaken(MeetmaxError):
    default_message = "Email already taken"


class AccountNotFound(MeetmaxError):
    default_message = "User does not exist"


class AccountNotVerified(MeetmaxError):
    default_message = "User not verified"


class AlreadyVerified(MeetmaxError):
    default_message = "User already verified"


class InvalidCredentials(MeetmaxError):
    """Wrong password or unknown account; deliberately indistinguishable."""

    default_message = "Incorrect email or password"


class MissingToken(MeetmaxError):
    default_message = "Missing Token"


class InvalidToken(MeetmaxError):
    """Bad signature, malformed structure, wrong purpose or expired."""

    default_message = "Forbidden"


class Unauthorized(MeetmaxError):
    default_message = "Unauthorized"


class Forbidden(MeetmaxError):
    default_message = "Forbidden"


class DeliveryError(MeetmaxError):
    """The notification sink could not deliver a message."""

    default_message = "Unable to send email, please try again later"


class RateLimited(MeetmaxError):
    default_message = "Too many login attempts, please try again later"

    def __init__(self, retry_after: int, message: Optional[str] = None):
        super().__init__(message)
        self.retry_after = retry_after
