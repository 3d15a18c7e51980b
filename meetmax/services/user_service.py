"""Service for listing, updating and deleting user accounts."""

import logging
from datetime import date
from typing import List, Optional, Union

from meetmax.application.services.validation import (
    check_password,
    normalize_email,
    parse_date_of_birth,
    parse_gender,
    require_fields,
)
from meetmax.domain.exceptions import (
    AccountNotFound,
    AccountNotVerified,
    EmailAlreadyTaken,
    MissingFields,
)
from meetmax.domain.models.user import Gender, User
from meetmax.domain.ports.persistence import UserRepository
from meetmax.services.passwords import PasswordHasher

logger = logging.getLogger(__name__)


class UserService:
    """Profile management for authenticated callers."""

    def __init__(self, user_repository: UserRepository, hasher: PasswordHasher):
        self.user_repository = user_repository
        self.hasher = hasher

    def list_users(self) -> List[User]:
        """
        List every registered user.

        Raises:
            AccountNotFound: If the store holds no users
        """
        users = self.user_repository.list_all()
        if not users:
            raise AccountNotFound("No user(s) found")
        return users

    def get_profile(self, email: str) -> User:
        """Get the user behind an authenticated email."""
        user = self.user_repository.find_by_email(email)
        if not user:
            raise AccountNotFound()
        return user

    def update_user(
        self,
        user_id: Optional[int],
        email: Optional[str],
        firstname: Optional[str],
        lastname: Optional[str],
        date_of_birth: Optional[Union[str, date]],
        gender: Optional[Union[str, Gender]],
        password: Optional[str] = None,
    ) -> User:
        """
        Update a verified user's profile.

        Args:
            user_id: ID of the user to update
            email: New email, normalized before storage
            firstname: New first name
            lastname: New last name
            date_of_birth: New date of birth
            gender: New gender
            password: Optional new password, re-hashed when given

        Returns:
            The updated user

        Raises:
            MissingFields, ValidationError, WeakPassword: On invalid input
            AccountNotFound: If no user has this ID
            AccountNotVerified: If the account is still pending verification
            EmailAlreadyTaken: If another user owns the email
        """
        require_fields(user_id, email, firstname, lastname, date_of_birth, gender)
        if password:
            check_password(password)
        email_clean = normalize_email(email)
        dob = parse_date_of_birth(date_of_birth)
        gender_value = parse_gender(gender)

        user = self.user_repository.find_by_id(user_id)
        if not user:
            raise AccountNotFound()
        if not user.is_verified:
            raise AccountNotVerified()

        duplicate = self.user_repository.find_by_email(email_clean)
        if duplicate and duplicate.id != user.id:
            raise EmailAlreadyTaken()

        user.email = email_clean
        user.firstname = firstname.strip()
        user.lastname = lastname.strip()
        user.date_of_birth = dob
        user.gender = gender_value
        if password:
            user.password_hash = self.hasher.hash(password)

        updated = self.user_repository.save(user)
        logger.info("Updated account %s", updated.id)
        return updated

    def delete_user(self, user_id: Optional[int]) -> User:
        """Delete a user by ID, returning the removed record."""
        if not user_id:
            raise MissingFields("User ID required")

        user = self.user_repository.find_by_id(user_id)
        if not user:
            raise AccountNotFound()

        self.user_repository.delete(user.id)
        logger.info("Deleted account %s", user.id)
        return user
