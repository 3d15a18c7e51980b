"""Domain models for the Meetmax application."""

from .user import AccountState, Gender, User

__all__ = [
    "AccountState",
    "Gender",
    "User",
]
