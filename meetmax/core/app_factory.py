from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.account_service import AccountService
from ..domain.ports.notification import NotificationSink
from ..domain.ports.persistence import UserRepository
from ..infrastructure.repositories.user_repository import SQLiteUserRepository
from ..presentation.api.errors import register_exception_handlers
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import user_router
from ..services.email_service import build_email_service
from ..services.passwords import PasswordHasher
from ..services.rate_limiter import LoginRateLimiter
from ..services.token_codec import TokenCodec, TokenPurpose
from ..services.user_service import UserService

logger = logging.getLogger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    *,
    user_repository: Optional[UserRepository] = None,
    notification_sink: Optional[NotificationSink] = None,
) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(
        title="Meetmax Accounts",
        lifespan=_create_lifespan(settings, user_repository, notification_sink),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials="*" not in settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(auth_router.router)
    app.include_router(user_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def build_token_codec(settings: Settings) -> TokenCodec:
    return TokenCodec(
        secrets={
            TokenPurpose.ACCESS: settings.access_token_secret,
            TokenPurpose.REFRESH: settings.refresh_token_secret,
            TokenPurpose.EMAIL_ACTION: settings.email_token_secret,
        },
        lifetimes={
            TokenPurpose.ACCESS: timedelta(minutes=settings.access_token_exp_minutes),
            TokenPurpose.REFRESH: timedelta(days=settings.refresh_token_exp_days),
            TokenPurpose.EMAIL_ACTION: timedelta(minutes=settings.email_token_exp_minutes),
        },
    )


def _create_lifespan(
    settings: Settings,
    user_repository: Optional[UserRepository],
    notification_sink: Optional[NotificationSink],
):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        if settings.shared_secrets():
            logger.warning(
                "Token secrets are not distinct. Configure a separate secret per token purpose in production."
            )
        owns_repository = user_repository is None
        repository = user_repository or SQLiteUserRepository(settings.database_location)
        notifier = notification_sink or build_email_service(settings)
        token_codec = build_token_codec(settings)
        hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        limiter = LoginRateLimiter(settings.login_rate_limit, settings.login_rate_window_seconds)

        container = ApplicationContainer(
            settings=settings,
            user_repository=repository,
            notification_sink=notifier,
            token_codec=token_codec,
            password_hasher=hasher,
            login_rate_limiter=limiter,
            account_service=AccountService(
                users=repository,
                notifier=notifier,
                tokens=token_codec,
                hasher=hasher,
                app_base_url=settings.app_base_url,
            ),
            user_service=UserService(repository, hasher),
        )

        app.state.container = container  # type: ignore[attr-defined]
        logger.info("Meetmax accounts API started")

        try:
            yield
        finally:
            if owns_repository:
                repository.close()

    return lifespan
