from dataclasses import dataclass

from ..application.services.account_service import AccountService
from .config import Settings
from ..domain.ports.notification import NotificationSink
from ..domain.ports.persistence import UserRepository
from ..services.passwords import PasswordHasher
from ..services.rate_limiter import LoginRateLimiter
from ..services.token_codec import TokenCodec
from ..services.user_service import UserService


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    user_repository: UserRepository
    notification_sink: NotificationSink
    token_codec: TokenCodec
    password_hasher: PasswordHasher
    login_rate_limiter: LoginRateLimiter
    account_service: AccountService
    user_service: UserService
