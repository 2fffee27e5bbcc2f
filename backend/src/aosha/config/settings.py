"""Environment-driven settings for the Aosha backend.

Values are read once at import (after ``load_dotenv``) into a frozen
``Settings`` instance. Tests and tools that need different values build their
own instance with ``Settings.from_env()`` or ``dataclasses.replace``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Union

from dotenv import load_dotenv

load_dotenv()

DEV_JWT_SECRET = "aosha-dev-secret-change-me-before-deploying"
DEFAULT_PARTY_ROOM = "aosha-party"


def _parse_origins(raw: str) -> Union[str, List[str]]:
    """Parse a comma-separated origin allowlist, defaulting to * for dev."""
    if not raw:
        return "*"
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration."""

    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///./aosha.sqlite"
    database_echo: bool = False
    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expires_hours: int = 12
    party_room_name: str = DEFAULT_PARTY_ROOM
    socketio_namespace: str = "/"
    uploads_url_prefix: str = "/uploads"
    cors_allowed_origins: Union[str, List[str]] = field(default="*")
    log_level: str = "INFO"
    seed_users_file: str = ""

    @property
    def is_production(self) -> bool:
        return self.environment in {"prod", "production"}

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            environment=os.getenv("ENVIRONMENT", "development").lower(),
            database_url=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./aosha.sqlite"),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            jwt_secret=os.getenv("JWT_SECRET", DEV_JWT_SECRET),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expires_hours=int(os.getenv("JWT_EXPIRES_HOURS", "12")),
            party_room_name=os.getenv("PARTY_ROOM_NAME", DEFAULT_PARTY_ROOM),
            socketio_namespace=os.getenv("SOCKETIO_NAMESPACE", "/"),
            uploads_url_prefix=os.getenv("UPLOADS_URL_PREFIX", "/uploads").rstrip("/"),
            cors_allowed_origins=_parse_origins(os.getenv("WS_ALLOWED_ORIGINS", "")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            seed_users_file=os.getenv("SEED_USERS_FILE", ""),
        )

    def validate(self) -> None:
        """Refuse unsafe production configuration."""
        if self.is_production and self.jwt_secret == DEV_JWT_SECRET:
            raise RuntimeError("JWT_SECRET must be set in production")


settings = Settings.from_env()
