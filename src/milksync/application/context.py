"""Session context passed explicitly into the use-case handlers."""

from __future__ import annotations

from dataclasses import dataclass

from milksync.domain.model.value_objects import Actor


@dataclass(frozen=True)
class SessionContext:
    """Bearer token plus the identity stamped on every change as ``updatedBy``."""

    token: str
    actor: Actor

    def __repr__(self) -> str:
        return f"SessionContext(actor={self.actor!r})"
