"""
Domain-level exceptions used within the service layer.

These exceptions are framework-agnostic: they never depend on Flask or HTTP.
They are the stable contract between repositories, payload validators and
application services. ``fitcoach.core.errors`` renders them as RFC 7807
problems.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name in the message. SQLite only
    reports the offending columns, so callers may pass a column list such as
    ``"client_programs.client_id, client_programs.program_id"`` instead.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    These are *not* HTTP errors; the API layer translates them.
    """


@dataclass(eq=False)
class ValidationFailedError(ServiceError):
    """
    Raised when a payload is malformed or incomplete.

    :param errors: Mapping of field path to messages, one entry per failing field.
    :type errors: Mapping[str, Sequence[str]]
    """

    errors: Mapping[str, Sequence[str]] = field(default_factory=dict)

    def __str__(self) -> str:
        fields = ", ".join(sorted(self.errors)) or "payload"
        return f"Invalid fields: {fields}"


@dataclass(eq=False)
class NotFoundError(ServiceError):
    """
    Raised when an entity is absent or not visible to the caller.

    :param entity: Entity name (e.g., "Program").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


class AuthorizationError(ServiceError):
    """Raised when the caller lacks the role or ownership an operation needs."""

    def __init__(self, message: str = "You are not allowed to perform this action.") -> None:
        super().__init__(message)


@dataclass(eq=False)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class AlreadyEnrolledError(ConflictError):
    """Raised when a client already holds an active enrollment in a program."""

    def __init__(self, program_id: int) -> None:
        super().__init__(entity="ClientProgram", detail="already enrolled in this program")
        self.program_id = program_id


class PreconditionFailedError(ServiceError):
    """Raised when an ``If-Match`` precondition does not hold."""

    def __init__(self, message: str = "Precondition failed (ETag mismatch)") -> None:
        super().__init__(message)


class StorageError(ServiceError):
    """Raised when the underlying transaction fails; details are logged, never returned."""

    def __init__(self, message: str = "Storage failure") -> None:
        super().__init__(message)


class AuthenticationError(ServiceError):
    """Raised when credentials or a presented token cannot be verified."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)
