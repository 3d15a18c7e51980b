"""User domain model for account registration and authentication."""

from datetime import date, datetime
from enum import Enum
from typing import Optional


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class AccountState(str, Enum):
    PENDING_VERIFICATION = "pending_verification"
    VERIFIED = "verified"


class User:
    """
    User entity backing registration, verification and login.

    Attributes:
        id: Unique identifier assigned by the store
        email: Normalized email address (unique)
        firstname: Given name
        lastname: Family name
        password_hash: Salted bcrypt hash, never exposed through the API
        date_of_birth: Date of birth
        gender: One of the Gender values
        is_verified: Whether the email address has been confirmed
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    def __init__(
        self,
        id: Optional[int],
        email: str,
        firstname: str,
        lastname: str,
        password_hash: str,
        date_of_birth: date,
        gender: Gender,
        is_verified: bool = False,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.email = email
        self.firstname = firstname
        self.lastname = lastname
        self.password_hash = password_hash
        self.date_of_birth = date_of_birth
        self.gender = gender
        self.is_verified = is_verified
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    @property
    def state(self) -> AccountState:
        if self.is_verified:
            return AccountState.VERIFIED
        return AccountState.PENDING_VERIFICATION

    @property
    def full_name(self) -> str:
        return f"{self.lastname} {self.firstname}"

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} verified={self.is_verified}>"
