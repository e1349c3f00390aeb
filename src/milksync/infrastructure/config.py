"""Runtime settings, read from the environment (and a local ``.env``)."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from milksync.domain.exceptions import ValidationError

DEFAULT_API_URL = "http://localhost:5000/api"


@dataclass(frozen=True)
class Settings:
    api_url: str
    token: str
    timeout_seconds: float | None
    actor_role: str
    actor_id: str
    actor_name: str
    log_level: str


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _timeout(raw: str) -> float | None:
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(f"MILKSYNC_TIMEOUT must be a number of seconds, got {raw!r}") from None
    if value <= 0:
        raise ValidationError("MILKSYNC_TIMEOUT must be positive")
    return value


def load_settings(*, dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True), override=False)
    return Settings(
        api_url=_getenv("MILKSYNC_API_URL", DEFAULT_API_URL).rstrip("/"),
        token=_getenv("MILKSYNC_TOKEN"),
        timeout_seconds=_timeout(_getenv("MILKSYNC_TIMEOUT")),
        actor_role=_getenv("MILKSYNC_ACTOR_ROLE", "staff").lower(),
        actor_id=_getenv("MILKSYNC_ACTOR_ID"),
        actor_name=_getenv("MILKSYNC_ACTOR_NAME"),
        log_level=_getenv("MILKSYNC_LOG_LEVEL", "WARNING").upper(),
    )
