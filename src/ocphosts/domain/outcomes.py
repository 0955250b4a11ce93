"""Classification of polymorphic mutation payloads.

Every OCP mutation answers with a union keyed by ``__typename``: one success
arm that differs per mutation plus the shared ``ValidationErrors``,
``Unauthorized`` and ``OperationUnavailable`` arms. ``discriminate`` maps such a
payload onto the closed ``Outcome`` type and ``unwrap`` turns anything but a
success into the matching error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final, Literal, Protocol

from .errors import (
    ProtocolViolationError,
    UnauthorizedError,
    UnavailableError,
    ValidationFailedError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

VALIDATION_ERRORS: Final[str] = "ValidationErrors"
UNAUTHORIZED: Final[str] = "Unauthorized"
OPERATION_UNAVAILABLE: Final[str] = "OperationUnavailable"
EMPTY_VALIDATION_MESSAGE: Final[str] = "validation failed without message"


class OutcomeKind(StrEnum):
    CREATED = "created"
    VALIDATION_FAILED = "validation_failed"
    UNAUTHORIZED = "unauthorized"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class FieldErrorPayload(Protocol):
    @property
    def field(self) -> str: ...

    @property
    def messages(self) -> Sequence[str]: ...


class OutcomePayload[T](Protocol):
    """Structural view of a decoded mutation payload."""

    @property
    def typename(self) -> str: ...

    @property
    def message(self) -> str | None: ...

    @property
    def errors(self) -> Sequence[FieldErrorPayload]: ...

    @property
    def reasons(self) -> Sequence[str]: ...

    def success_object(self) -> T | None: ...


@dataclass(slots=True, frozen=True)
class FieldError:
    field: str
    messages: tuple[str, ...] = ()

    def render(self) -> str:
        return f"{self.field}: [{', '.join(self.messages)}]"


@dataclass(slots=True, frozen=True)
class Created[T]:
    object: T
    kind: Literal[OutcomeKind.CREATED] = OutcomeKind.CREATED


@dataclass(slots=True, frozen=True)
class ValidationFailed:
    message: str
    field_errors: tuple[FieldError, ...] = ()
    kind: Literal[OutcomeKind.VALIDATION_FAILED] = OutcomeKind.VALIDATION_FAILED


@dataclass(slots=True, frozen=True)
class Unauthorized:
    message: str
    kind: Literal[OutcomeKind.UNAUTHORIZED] = OutcomeKind.UNAUTHORIZED


@dataclass(slots=True, frozen=True)
class Unavailable:
    message: str
    reasons: tuple[str, ...] = ()
    kind: Literal[OutcomeKind.UNAVAILABLE] = OutcomeKind.UNAVAILABLE

    def render(self) -> str:
        if self.reasons:
            return f"{self.message} (reasons=[{', '.join(self.reasons)}])"
        return self.message


@dataclass(slots=True, frozen=True)
class UnknownKind:
    typename: str
    kind: Literal[OutcomeKind.UNKNOWN] = OutcomeKind.UNKNOWN


type Outcome[T] = Created[T] | ValidationFailed | Unauthorized | Unavailable | UnknownKind


def discriminate[T](payload: OutcomePayload[T], *, success_type: str) -> Outcome[T]:
    """Classify ``payload`` by its discriminant.

    Raises ``ProtocolViolationError`` when the success arm is present without
    its object.
    """

    typename = payload.typename
    if typename == success_type:
        obj = payload.success_object()
        if obj is None:
            raise ProtocolViolationError(
                f"backend returned {typename} without its object",
                operation=success_type,
            )
        return Created(obj)

    if typename == VALIDATION_ERRORS:
        field_errors = tuple(
            FieldError(field=error.field, messages=tuple(error.messages))
            for error in payload.errors
        )
        return ValidationFailed(
            message=format_validation_message(payload.message, field_errors),
            field_errors=field_errors,
        )

    if typename == UNAUTHORIZED:
        return Unauthorized(message=payload.message or typename)

    if typename == OPERATION_UNAVAILABLE:
        return Unavailable(message=payload.message or typename, reasons=tuple(payload.reasons))

    return UnknownKind(typename=typename)


def format_validation_message(message: str | None, field_errors: Sequence[FieldError]) -> str:
    details = "; ".join(error.render() for error in field_errors)
    if message and details:
        return f"{message} ({details})"
    return message or details or EMPTY_VALIDATION_MESSAGE


def unwrap[T](outcome: Outcome[T], *, operation: str) -> T:
    """Return the success object or raise the error matching ``outcome``."""

    match outcome:
        case Created(object=obj):
            return obj
        case ValidationFailed(message=message, field_errors=field_errors):
            raise ValidationFailedError(message, operation=operation, field_errors=field_errors)
        case Unauthorized(message=message):
            raise UnauthorizedError(message, operation=operation)
        case Unavailable(reasons=reasons):
            raise UnavailableError(outcome.render(), operation=operation, reasons=reasons)
        case UnknownKind(typename=typename):
            raise ProtocolViolationError(
                f"unexpected payload type {typename!r}", operation=operation
            )


def expect_success[T](
    payload: OutcomePayload[T] | None,
    *,
    success_type: str,
    operation: str,
) -> T:
    """Discriminate and unwrap in one step; a missing payload violates the protocol."""

    if payload is None:
        raise ProtocolViolationError("backend returned no payload", operation=operation)
    try:
        outcome = discriminate(payload, success_type=success_type)
    except ProtocolViolationError as exc:
        raise ProtocolViolationError(exc.detail, operation=operation) from exc
    return unwrap(outcome, operation=operation)
