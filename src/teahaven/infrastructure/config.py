"""Runtime settings, read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

# When installed in editable mode the project root is the repo root.
_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class ConfigurationError(Exception):
    """An environment variable holds an unusable value."""


def _int(environ: Mapping[str, str], name: str, default: int | None) -> int | None:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    notify_workers: int = 4
    email_host: str | None = None
    email_port: int | None = None
    email_user: str | None = None
    email_pass: str | None = None
    email_from: str = "no-reply@teahaven.local"

    @property
    def smtp_configured(self) -> bool:
        return all((self.email_host, self.email_port, self.email_user, self.email_pass))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            database_url=env.get("TEAHAVEN_DATABASE_URL")
            or f"sqlite:///{_DATA_DIR / 'teahaven.db'}",
            log_level=(env.get("TEAHAVEN_LOG_LEVEL") or "INFO").upper(),
            notify_workers=_int(env, "TEAHAVEN_NOTIFY_WORKERS", 4),  # type: ignore[arg-type]
            email_host=env.get("EMAIL_HOST") or None,
            email_port=_int(env, "EMAIL_PORT", None),
            email_user=env.get("EMAIL_USER") or None,
            email_pass=env.get("EMAIL_PASS") or None,
            email_from=env.get("EMAIL_FROM") or "no-reply@teahaven.local",
        )
