"""Port implemented by every host reconciler."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ocphosts.domain.model import HostKind, HostState


class HostReconciler[TSpec](Protocol):
    """CRUD state machine for one host variant.

    Every method returns a new ``HostState``; a raised error means the caller's
    previous state is still accurate.
    """

    kind: HostKind

    def create(self, desired: TSpec) -> HostState[TSpec]: ...

    def read(self, state: HostState[TSpec]) -> HostState[TSpec]: ...

    def update(self, state: HostState[TSpec], desired: TSpec) -> HostState[TSpec]: ...

    def delete(self, state: HostState[TSpec]) -> HostState[TSpec]: ...

    def import_state(self, remote_id: str) -> HostState[TSpec]: ...
