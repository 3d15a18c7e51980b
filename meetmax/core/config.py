import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.access_token_secret = self._get("ACCESS_TOKEN_SECRET")
        self.refresh_token_secret = self._get("REFRESH_TOKEN_SECRET")
        self.email_token_secret = self._get("USER_VERIFICATION_TOKEN_SECRET")
        self.access_token_exp_minutes = self._get_int("ACCESS_TOKEN_EXP_MINUTES", default=15)
        self.refresh_token_exp_days = self._get_int("REFRESH_TOKEN_EXP_DAYS", default=7)
        self.email_token_exp_minutes = self._get_int("EMAIL_TOKEN_EXP_MINUTES", default=5)
        self.bcrypt_rounds = self._get_int("BCRYPT_ROUNDS", default=12)
        self.database_path = os.getenv("DATABASE_PATH", "data/meetmax.db")
        self.app_base_url = os.getenv("APP_BASE_URL", "http://localhost:3500").rstrip("/")
        self.refresh_cookie_name = os.getenv("REFRESH_COOKIE_NAME", "jwt")
        self.refresh_cookie_path = os.getenv("REFRESH_COOKIE_PATH", "/api/auth")
        self.login_rate_limit = self._get_int("LOGIN_RATE_LIMIT", default=5)
        self.login_rate_window_seconds = self._get_int("LOGIN_RATE_WINDOW_SECONDS", default=60)
        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = self._get_int("SMTP_PORT", default=587)
        self.smtp_username = os.getenv("SMTP_USERNAME", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from_email = os.getenv("SMTP_FROM_EMAIL", "")
        self.smtp_from_name = os.getenv("SMTP_FROM_NAME", "Meetmax")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    @property
    def database_location(self) -> str:
        if self.database_path == ":memory:":
            return self.database_path
        return str(Path(self.database_path).resolve())

    @property
    def refresh_cookie_max_age(self) -> int:
        return self.refresh_token_exp_days * 24 * 60 * 60

    def shared_secrets(self) -> bool:
        secrets = {self.access_token_secret, self.refresh_token_secret, self.email_token_secret}
        return len(secrets) < 3

    @staticmethod
    def _get(key: str) -> str:
        value = os.getenv(key)
        if not value:
            raise RuntimeError(f"Missing required environment variable: {key}")
        return value

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc
