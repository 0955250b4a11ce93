"""Observed state of a managed host."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .hosts import HostKind  # noqa: TC001


@dataclass(slots=True, kw_only=True, frozen=True)
class HostState[TSpec]:
    """Last-synchronized view of one remote virtual host.

    ``attributes`` holds the last applied or refreshed values in desired-state
    shape. An empty ``remote_id`` means the host does not exist remotely.
    """

    remote_id: str = ""
    uuid: str = ""
    status: str = ""
    attributes: TSpec | None = None

    @classmethod
    def absent(cls) -> HostState[TSpec]:
        return cls()

    @property
    def is_present(self) -> bool:
        return bool(self.remote_id)

    def require_attributes(self) -> TSpec:
        if self.attributes is None:
            raise ValueError(f"No attributes known for host {self.remote_id!r}; refresh it first")
        return self.attributes


@dataclass(slots=True, kw_only=True)
class StoredResource:
    """A manifest entry name paired with the observed state of its host."""

    name: str
    kind: HostKind
    state: HostState[Any] = field(default_factory=HostState)
