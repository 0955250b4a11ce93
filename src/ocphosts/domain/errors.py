"""Error taxonomy for talking to the OCP API and reconciling hosts.

Every error is terminal for the reconciliation pass that raised it; nothing in
this package retries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .outcomes import FieldError


class OcpError(RuntimeError):
    """Base class for everything raised by the reconciliation engine."""


class TransportError(OcpError):
    """The request could not be sent or the response could not be read."""


class RemoteReportedError(OcpError):
    """The backend answered with a non-empty ``errors`` list (first entry kept)."""


class DecodeError(OcpError):
    """The ``data`` payload did not match the expected schema."""


class OutcomeError(OcpError):
    """A mutation returned a failure arm of its outcome payload."""

    def __init__(self, message: str, *, operation: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.detail = message


class ValidationFailedError(OutcomeError):
    def __init__(
        self,
        message: str,
        *,
        operation: str,
        field_errors: Sequence[FieldError] = (),
    ) -> None:
        super().__init__(message, operation=operation)
        self.field_errors = tuple(field_errors)


class UnauthorizedError(OutcomeError):
    pass


class UnavailableError(OutcomeError):
    def __init__(self, message: str, *, operation: str, reasons: Sequence[str] = ()) -> None:
        super().__init__(message, operation=operation)
        self.reasons = tuple(reasons)


class ProtocolViolationError(OutcomeError):
    """The payload broke the contract the engine relies on.

    Raised for a success arm without its object and for discriminants the
    engine does not know about.
    """


class ConstraintRejectedError(OcpError):
    """A local update rule rejected the change before any request was sent."""


class DesiredStateError(OcpError, ValueError):
    """The desired state cannot be submitted as declared."""


class LookupFailedError(OcpError):
    """A name-based lookup did not resolve to exactly one object."""


class NoMatchError(LookupFailedError):
    pass


class AmbiguousMatchError(LookupFailedError):
    pass
