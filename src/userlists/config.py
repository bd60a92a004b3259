"""Environment-driven settings.

All settings come from the process environment so the same build can run
against a managed SQL service or an embedded file store.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

BackendName = Literal["auto", "remote", "embedded"]

DEFAULT_DB_PATH = Path("data/userlists.db")
DEFAULT_PORT = 3001


class ConfigError(RuntimeError):
    """Raised when the environment describes an unusable setup."""


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


@dataclass(frozen=True)
class Settings:
    """Resolved runtime configuration."""

    backend: BackendName = "auto"
    database_url: str | None = None
    db_path: Path = DEFAULT_DB_PATH
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT

    @property
    def resolved_backend(self) -> Literal["remote", "embedded"]:
        """Backend actually used once "auto" is resolved.

        Raises:
            ConfigError: If the remote backend is requested without a URL.
        """
        if self.backend == "remote":
            if not self.database_url:
                raise ConfigError(
                    "USERLISTS_BACKEND=remote requires USERLISTS_DATABASE_URL or DATABASE_URL"
                )
            return "remote"
        if self.backend == "embedded":
            return "embedded"
        return "remote" if self.database_url else "embedded"


def load_settings() -> Settings:
    """Build Settings from the current environment.

    Raises:
        ConfigError: On an unknown backend name or a non-numeric port.
    """
    backend = _env("USERLISTS_BACKEND", "auto").lower()
    if backend not in ("auto", "remote", "embedded"):
        raise ConfigError(f"Unknown USERLISTS_BACKEND: {backend!r}")

    database_url = _env("USERLISTS_DATABASE_URL") or _env("DATABASE_URL") or None

    origins = [o.strip() for o in _env("USERLISTS_CORS_ORIGINS", "*").split(",") if o.strip()]

    port_raw = _env("PORT", str(DEFAULT_PORT))
    try:
        port = int(port_raw)
    except ValueError as e:
        raise ConfigError(f"PORT must be an integer, got {port_raw!r}") from e

    return Settings(
        backend=backend,  # type: ignore[arg-type]
        database_url=database_url,
        db_path=Path(_env("USERLISTS_DB_PATH") or DEFAULT_DB_PATH),
        cors_origins=origins or ["*"],
        log_level=_env("USERLISTS_LOG_LEVEL", "INFO").upper() or "INFO",
        host=_env("HOST", "127.0.0.1") or "127.0.0.1",
        port=port,
    )
