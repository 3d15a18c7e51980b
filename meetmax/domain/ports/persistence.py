from __future__ import annotations

from typing import List, Optional, Protocol

from ..models import User


class UserRepository(Protocol):
    """Abstract storage for user records.

    Implementations enforce email uniqueness: ``create`` raises
    ``ConflictAlreadyRegistered`` and ``save`` raises ``EmailAlreadyTaken``
    when another record already owns the normalized email.
    """

    def find_by_email(self, email: str) -> Optional[User]:
        ...

    def find_by_id(self, user_id: int) -> Optional[User]:
        ...

    def create(self, user: User) -> User:
        ...

    def save(self, user: User) -> User:
        ...

    def delete(self, user_id: int) -> bool:
        ...

    def list_all(self) -> List[User]:
        ...
