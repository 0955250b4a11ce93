"""Port for sending typed GraphQL requests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, overload, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping


@runtime_checkable
class RequestExecutor(Protocol):
    """Send one query or mutation and decode a named field of ``data``.

    Implementations keep no per-call state and may be shared between
    reconcilers.
    """

    @overload
    def execute(
        self,
        document: str,
        variables: Mapping[str, object] | None = None,
        *,
        field: None = None,
        into: None = None,
    ) -> None: ...

    @overload
    def execute[T](
        self,
        document: str,
        variables: Mapping[str, object] | None = None,
        *,
        field: str,
        into: type[T],
    ) -> T | None: ...

    def execute[T](
        self,
        document: str,
        variables: Mapping[str, object] | None = None,
        *,
        field: str | None = None,
        into: type[T] | None = None,
    ) -> T | None: ...
