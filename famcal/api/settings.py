import os
from contextlib import suppress
from datetime import timedelta
from typing import ClassVar

from famcal.domain.password_hash import PasswordHash
from famcal.domain.user import normalize_username

with suppress(ModuleNotFoundError):
    from dotenv import load_dotenv

    load_dotenv()


class MigrationSettings:
    default_admin_username: str
    default_admin_password: str

    def __init__(self) -> None:
        try:
            self.default_admin_username = normalize_username(
                os.getenv("FAMCAL_ADMIN_USERNAME", "admin")
            )

        except ValueError as ex:
            raise ValueError(
                "FAMCAL_ADMIN_USERNAME must be a valid username"
            ) from ex

        self.default_admin_password = os.getenv("FAMCAL_ADMIN_PW", "")

        if not self.default_admin_password:
            raise ValueError("FAMCAL_ADMIN_PW must be defined")

        if len(self.default_admin_password) < PasswordHash.MIN_PASSWORD_LEN:
            raise ValueError(
                f"FAMCAL_ADMIN_PW must be at least {PasswordHash.MIN_PASSWORD_LEN} characters"  # noqa: E501
            )


class DBSettings:
    db_url: str

    def __init__(self) -> None:
        self.db_url = os.getenv("DB_URL", "")

        if not self.db_url:
            raise ValueError("DB_URL must be defined")


class ServerSettings:
    environment: str
    host: str
    port: int
    app_origin: str
    frontend_dir: str

    AVAILABLE_ENVIRONMENTS: ClassVar[set[str]] = {
        "development",
        "test",
        "production",
    }

    def __init__(self) -> None:
        self.environment = os.getenv("FAMCAL_ENV", "development")

        if self.environment not in self.AVAILABLE_ENVIRONMENTS:
            envs = ", ".join(f'"{x}"' for x in sorted(self.AVAILABLE_ENVIRONMENTS))

            raise ValueError(f"FAMCAL_ENV must be one of: {envs}")

        self.host = os.getenv("FAMCAL_HOST", "0.0.0.0")  # noqa: S104

        if not self.host:
            raise ValueError("FAMCAL_HOST must be defined")

        try:
            self.port = int(os.getenv("FAMCAL_PORT", "3001"))

        except ValueError as ex:
            raise ValueError("FAMCAL_PORT must be an integer") from ex

        if not 1 <= self.port <= 65535:
            raise ValueError("FAMCAL_PORT must be between 1 and 65535")

        self.app_origin = os.getenv("FAMCAL_APP_ORIGIN", "http://localhost:5173")

        # Only served when running in production
        self.frontend_dir = os.getenv("FAMCAL_FRONTEND_DIR", "frontend/dist")

        if not self.frontend_dir:
            raise ValueError("FAMCAL_FRONTEND_DIR must be defined")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def secure_cookies(self) -> bool:
        # Browsers drop Secure cookies over plain http://localhost
        return self.environment not in {"development", "test"}


class SessionSettings:
    ttl: timedelta

    MIN_TTL_DAYS: ClassVar[int] = 1
    MAX_TTL_DAYS: ClassVar[int] = 365

    def __init__(self) -> None:
        try:
            days = int(os.getenv("FAMCAL_SESSION_TTL_DAYS", "30"))

        except ValueError as ex:
            raise ValueError("FAMCAL_SESSION_TTL_DAYS must be an integer") from ex

        if not self.MIN_TTL_DAYS <= days <= self.MAX_TTL_DAYS:
            raise ValueError(
                f"FAMCAL_SESSION_TTL_DAYS must be between {self.MIN_TTL_DAYS} and {self.MAX_TTL_DAYS}"  # noqa: E501
            )

        self.ttl = timedelta(days=days)


def verify_env_vars() -> None:
    """
    Eagerly load env vars to see if they are valid. The env vars are only valid
    at the time this function is called: if the env vars change, they may be
    reloaded and potentially invalid.
    """

    DBSettings()
    MigrationSettings()
    ServerSettings()
    SessionSettings()
