"""Input normalisation shared by the account and user directory services."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Union

from email_validator import EmailNotValidError, validate_email

from ...domain.exceptions import MissingFields, ValidationError, WeakPassword
from ...domain.models import Gender
from ...services.passwords import MAX_PASSWORD_BYTES, MIN_PASSWORD_LENGTH


def require_fields(*values: Any) -> None:
    if any(value is None or (isinstance(value, str) and not value.strip()) for value in values):
        raise MissingFields()


def normalize_email(email: Optional[str]) -> str:
    """Return the canonical, lower-cased form used as the uniqueness key."""
    if not email or not email.strip():
        raise MissingFields("Email field is required")
    try:
        validated = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError("Invalid email address") from exc
    return validated.normalized.lower()


def check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPassword()
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def parse_date_of_birth(value: Union[str, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip().replace("/", "-")
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError as exc:
        raise ValidationError("Invalid date of birth") from exc


def parse_gender(value: Union[str, Gender]) -> Gender:
    if isinstance(value, Gender):
        return value
    try:
        return Gender(value.strip().lower())
    except ValueError as exc:
        raise ValidationError("Invalid gender provided") from exc
