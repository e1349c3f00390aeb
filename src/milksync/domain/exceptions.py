"""Domain-level exceptions.

All business rule violations and backend rejections are expressed as
subclasses of DomainException so the CLI layer can catch them uniformly
and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated (refused locally)."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class DataShapeError(DomainException):
    """A backend payload is missing required fields or carries bad values."""


class RepositoryError(DomainException):
    """The backend rejected a request.

    The message is the one reported by the server, unchanged.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConflictError(RepositoryError):
    """The order was already delivered or locked on the server."""


class TransportError(DomainException):
    """The backend could not be reached. Safe for the user to retry."""
