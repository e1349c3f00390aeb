"""Composition root: builds the HTTP client and repositories from settings.

Each factory reads the settings afresh, so a changed environment is
picked up by the next command.
"""

from __future__ import annotations

import logging

from milksync.application.context import SessionContext
from milksync.domain.exceptions import ValidationError
from milksync.domain.model.value_objects import Actor
from milksync.infrastructure.config import Settings, load_settings
from milksync.infrastructure.http.api_client import ApiClient
from milksync.infrastructure.http.http_order_repository import HttpOrderRepository
from milksync.infrastructure.http.http_product_repository import HttpProductRepository

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def settings() -> Settings:
    return load_settings()


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else settings().log_level
    logging.basicConfig(level=level, format=LOG_FORMAT)


def api_client() -> ApiClient:
    s = settings()
    return ApiClient(s.api_url, s.token, timeout_seconds=s.timeout_seconds)


def order_repository() -> HttpOrderRepository:
    return HttpOrderRepository(api_client())


def product_repository() -> HttpProductRepository:
    return HttpProductRepository(api_client())


def session_context() -> SessionContext:
    s = settings()
    if not s.actor_id:
        raise ValidationError("Set MILKSYNC_ACTOR_ID to the id of the acting admin or staff user")
    return SessionContext(
        token=s.token,
        actor=Actor.create(role=s.actor_role, id=s.actor_id, name=s.actor_name or None),
    )
