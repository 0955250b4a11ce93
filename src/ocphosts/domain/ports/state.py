"""Persistence ports for observed host state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from ocphosts.domain.model import StoredResource


@runtime_checkable
class ResourceStateRepository(Protocol):
    def get(self, name: str) -> StoredResource | None: ...

    def list(self) -> Sequence[StoredResource]: ...

    def save(self, resource: StoredResource) -> None: ...

    def remove(self, name: str) -> None: ...


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class StateRepositories(RepositoryCollection):
    resources: ResourceStateRepository


type StateUnitOfWork = UnitOfWork[StateRepositories]
