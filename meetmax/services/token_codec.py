"""Signed, expiring tokens for access, refresh and email actions."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Dict, Optional

import jwt

from meetmax.domain.exceptions import InvalidToken


class TokenPurpose(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"
    EMAIL_ACTION = "email_action"


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    purpose: TokenPurpose
    issued_at: datetime
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class TokenCodec:
    """
    Issues and parses HS256 JWTs with one secret and lifetime per purpose.

    Every token also carries a ``typ`` claim naming its purpose, so a token
    never parses under another purpose even if two secrets are configured
    with the same value. Expiry is checked against the injected clock, and
    every failure is reported as ``InvalidToken`` without saying why.
    """

    def __init__(
        self,
        secrets: Dict[TokenPurpose, str],
        lifetimes: Dict[TokenPurpose, timedelta],
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        missing = [purpose.value for purpose in TokenPurpose if not secrets.get(purpose)]
        if missing:
            raise RuntimeError(f"Token secret not configured for: {', '.join(missing)}")
        self._secrets = dict(secrets)
        self._lifetimes = dict(lifetimes)
        self._algorithm = algorithm
        self._clock = clock

    def lifetime(self, purpose: TokenPurpose) -> timedelta:
        return self._lifetimes[purpose]

    def issue(self, subject: str, purpose: TokenPurpose, ttl: Optional[timedelta] = None) -> str:
        now = self._clock()
        expire = now + (ttl if ttl is not None else self._lifetimes[purpose])
        payload = {
            "sub": str(subject),
            "typ": purpose.value,
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(payload, self._secrets[purpose], algorithm=self._algorithm)

    def parse(self, token: str, purpose: TokenPurpose) -> TokenClaims:
        if not token:
            raise InvalidToken()
        try:
            payload = jwt.decode(
                token,
                self._secrets[purpose],
                algorithms=[self._algorithm],
                options={"require": ["sub", "typ", "iat", "exp"], "verify_exp": False},
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidToken() from exc

        if payload.get("typ") != purpose.value:
            raise InvalidToken()
        try:
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidToken() from exc
        if expires_at <= self._clock():
            raise InvalidToken()

        return TokenClaims(
            subject=str(payload["sub"]),
            purpose=purpose,
            issued_at=issued_at,
            expires_at=expires_at,
        )
