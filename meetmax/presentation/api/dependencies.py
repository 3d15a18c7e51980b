from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...core.dependencies import get_login_rate_limiter, get_token_codec
from ...domain.exceptions import Forbidden, InvalidToken, Unauthorized
from ...domain.ports.notification import RequestGate
from ...services.token_codec import TokenCodec, TokenPurpose

_bearer_scheme = HTTPBearer(auto_error=False)


def authenticate_bearer(
    credentials: Optional[HTTPAuthorizationCredentials], codec: TokenCodec
) -> str:
    """Resolve a bearer credential to the email it was issued for.

    Performs no store lookup: a deleted or unverified account keeps access
    until its access token expires.
    """
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise Unauthorized()
    try:
        claims = codec.parse(credentials.credentials, TokenPurpose.ACCESS)
    except InvalidToken as exc:
        raise Forbidden() from exc
    return claims.subject


def require_authenticated_email(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    codec: TokenCodec = Depends(get_token_codec),
) -> str:
    email = authenticate_bearer(credentials, codec)
    request.state.email = email
    return email


def enforce_login_rate_limit(
    request: Request,
    limiter: RequestGate = Depends(get_login_rate_limiter),
) -> None:
    requester = request.client.host if request.client else "unknown"
    limiter.check(requester)
