from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from ...domain.exceptions import (
    AccountNotFound,
    AccountNotVerified,
    AlreadyVerified,
    ConflictAlreadyRegistered,
    Forbidden,
    InvalidCredentials,
    InvalidToken,
    MissingToken,
    Unauthorized,
)
from ...domain.models import Gender, User
from ...domain.ports.notification import NotificationSink
from ...domain.ports.persistence import UserRepository
from ...services.email_templates import (
    PASSWORD_RESET_SUBJECT,
    VERIFICATION_SUBJECT,
    render_password_reset_email,
    render_verification_email,
)
from ...services.passwords import PasswordHasher
from ...services.token_codec import TokenCodec, TokenPurpose
from .validation import (
    check_password,
    normalize_email,
    parse_date_of_birth,
    parse_gender,
    require_fields,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoginResult:
    access_token: str
    refresh_token: str
    user: User


@dataclass(slots=True)
class RefreshResult:
    access_token: str
    user: User


class AccountService:
    """Registration, email verification, password reset and session tokens.

    Accounts move from pending verification to verified exactly once. Email
    action tokens are not tracked as spent; the account state checks below
    are what make a second redemption fail.
    """

    def __init__(
        self,
        users: UserRepository,
        notifier: NotificationSink,
        tokens: TokenCodec,
        hasher: PasswordHasher,
        app_base_url: str,
    ) -> None:
        self._users = users
        self._notifier = notifier
        self._tokens = tokens
        self._hasher = hasher
        self._base_url = app_base_url.rstrip("/")
        self._dummy_hash: Optional[str] = None

    # ------------------------------------------------------------------
    async def register(
        self,
        email: Optional[str],
        firstname: Optional[str],
        lastname: Optional[str],
        password: Optional[str],
        date_of_birth: Optional[Union[str, date]],
        gender: Optional[Union[str, Gender]],
    ) -> User:
        require_fields(email, firstname, lastname, password, date_of_birth, gender)
        email_clean = normalize_email(email)
        check_password(password)
        dob = parse_date_of_birth(date_of_birth)
        gender_value = parse_gender(gender)

        existing = self._users.find_by_email(email_clean)
        if existing and existing.is_verified:
            raise ConflictAlreadyRegistered()

        password_hash = self._hasher.hash(password)
        if existing:
            existing.firstname = firstname.strip()
            existing.lastname = lastname.strip()
            existing.password_hash = password_hash
            existing.date_of_birth = dob
            existing.gender = gender_value
            user = self._users.save(existing)
            logger.info("Re-registration for unverified account %s", user.id)
        else:
            user = self._users.create(
                User(
                    id=None,
                    email=email_clean,
                    firstname=firstname.strip(),
                    lastname=lastname.strip(),
                    password_hash=password_hash,
                    date_of_birth=dob,
                    gender=gender_value,
                )
            )
            logger.info("Registered account %s", user.id)

        await self._send_verification(user)
        return user

    async def verify_email(self, token: Optional[str]) -> User:
        user = self._user_from_action_token(token)
        if user.is_verified:
            raise AlreadyVerified()
        user.is_verified = True
        self._users.save(user)
        logger.info("Verified account %s", user.id)
        return user

    async def forgot_password(self, email: Optional[str]) -> User:
        email_clean = normalize_email(email)
        user = self._users.find_by_email(email_clean)
        if not user:
            raise AccountNotFound()
        if not user.is_verified:
            raise AccountNotVerified()

        token = self._tokens.issue(str(user.id), TokenPurpose.EMAIL_ACTION)
        url = f"{self._base_url}/api/auth/new-password/{token}"
        body = render_password_reset_email(url, self._email_token_minutes())
        await self._notifier.deliver(user.email, PASSWORD_RESET_SUBJECT, body)
        logger.info("Password reset requested for account %s", user.id)
        return user

    async def set_new_password(self, token: Optional[str], new_password: Optional[str]) -> User:
        user = self._user_from_action_token(token)
        if not user.is_verified:
            raise AccountNotVerified()
        check_password(new_password or "")

        user.password_hash = self._hasher.hash(new_password)
        self._users.save(user)
        logger.info("Password changed for account %s", user.id)
        return user

    async def login(self, email: Optional[str], password: Optional[str]) -> LoginResult:
        require_fields(email, password)
        email_clean = normalize_email(email)
        check_password(password)

        user = self._users.find_by_email(email_clean)
        if not user:
            # equalise timing with the wrong-password branch
            self._hasher.verify(password, self._get_dummy_hash())
            raise InvalidCredentials()
        if not user.is_verified:
            raise AccountNotVerified()
        if not self._hasher.verify(password, user.password_hash):
            logger.info("Failed login for account %s", user.id)
            raise InvalidCredentials()

        access_token = self._tokens.issue(user.email, TokenPurpose.ACCESS)
        refresh_token = self._tokens.issue(user.email, TokenPurpose.REFRESH)
        logger.info("Account %s logged in", user.id)
        return LoginResult(access_token=access_token, refresh_token=refresh_token, user=user)

    async def refresh(self, refresh_token: Optional[str]) -> RefreshResult:
        if not refresh_token:
            raise Unauthorized()
        try:
            claims = self._tokens.parse(refresh_token, TokenPurpose.REFRESH)
        except InvalidToken as exc:
            raise Forbidden() from exc

        user = self._users.find_by_email(claims.subject)
        if not user:
            raise Unauthorized()
        if not user.is_verified:
            raise AccountNotVerified()

        access_token = self._tokens.issue(user.email, TokenPurpose.ACCESS)
        return RefreshResult(access_token=access_token, user=user)

    def logout(self, refresh_token: Optional[str]) -> bool:
        """Return whether a refresh cookie was present and must be cleared."""
        return bool(refresh_token)

    # ------------------------------------------------------------------
    def _user_from_action_token(self, token: Optional[str]) -> User:
        if not token:
            raise MissingToken()
        claims = self._tokens.parse(token, TokenPurpose.EMAIL_ACTION)
        try:
            user_id = int(claims.subject)
        except ValueError as exc:
            raise InvalidToken() from exc
        user = self._users.find_by_id(user_id)
        if not user:
            raise AccountNotFound()
        return user

    async def _send_verification(self, user: User) -> None:
        token = self._tokens.issue(str(user.id), TokenPurpose.EMAIL_ACTION)
        url = f"{self._base_url}/api/auth/verify/{token}"
        body = render_verification_email(url, self._email_token_minutes())
        await self._notifier.deliver(user.email, VERIFICATION_SUBJECT, body)

    def _email_token_minutes(self) -> int:
        return int(self._tokens.lifetime(TokenPurpose.EMAIL_ACTION).total_seconds() // 60)

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._hasher.hash("meetmax-unknown-account")
        return self._dummy_hash
