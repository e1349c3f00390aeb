"""Thin JSON-over-HTTP client for the MilkSync backend.

Every request carries the bearer token. Failures are translated into the
domain exceptions so callers never see ``requests`` types:

- no response at all          -> TransportError (retry is up to the user)
- 404                         -> EntityNotFoundError
- 409, or a 400/403 reporting a locked order or a concurrent change
                              -> ConflictError
- any other non-2xx status    -> RepositoryError

The server's ``error`` (or ``message``) field is passed through verbatim.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import requests

from milksync.domain.exceptions import (
    ConflictError,
    DataShapeError,
    EntityNotFoundError,
    RepositoryError,
    TransportError,
)

logger = logging.getLogger(__name__)

_CONFLICT_PATTERN = re.compile(
    r"\b(locked|already delivered|already marked as delivered|modified by another process)\b",
    re.I,
)


class ApiClient:

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout_seconds: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    # --- Verbs ----------------------------------------------------------------

    def get(self, path: str) -> Any:
        return self.request("GET", path)

    def post(self, path: str, body: dict[str, Any]) -> Any:
        return self.request("POST", path, body)

    def put(self, path: str, body: dict[str, Any]) -> Any:
        return self.request("PUT", path, body)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def request(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        url = self._base_url + path
        logger.debug("%s %s", method, url)
        try:
            resp = self._session.request(method, url, json=body, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(
                "Could not reach the MilkSync server. Check your connection and try again."
            ) from exc

        logger.debug("%s %s -> %d", method, url, resp.status_code)
        if not resp.ok:
            raise self._error_for(resp)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise DataShapeError(f"Invalid JSON from server ({method} {path})") from exc

    # --- Error mapping --------------------------------------------------------

    @staticmethod
    def _error_for(resp: requests.Response) -> RepositoryError | EntityNotFoundError:
        message = ApiClient._error_message(resp)
        status = resp.status_code
        if status == 404:
            return EntityNotFoundError(message)
        if status == 409 or (status in (400, 403) and _CONFLICT_PATTERN.search(message)):
            return ConflictError(message, status)
        return RepositoryError(message, status)

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("error", "message"):
                value = body.get(key)
                if isinstance(value, str) and value.strip():
                    return value
        return f"HTTP error! status: {resp.status_code}"
