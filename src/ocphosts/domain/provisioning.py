"""Drive stored host state towards a declared set of resources.

The service walks the declared resources one at a time. Each resource is
refreshed, then created, updated or replaced by the reconciler for its kind,
and the resulting state is committed before the next resource starts. A
failure is recorded against its resource and leaves that resource's stored
state as it was; the remaining resources are still processed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any

from ocphosts.domain.errors import DesiredStateError, OcpError
from ocphosts.domain.model import HostState, StoredResource
from ocphosts.domain.reconciliation import changed_fields, requires_replacement

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence

    from ocphosts.domain.model import HostKind, HostSpec
    from ocphosts.domain.ports import HostReconciler, StateUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True, frozen=True)
class DesiredResource:
    """One named entry of a desired-state manifest."""

    name: str
    kind: HostKind
    spec: HostSpec


class Action(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DELETE = "delete"
    NOOP = "noop"
    READ = "read"


@dataclass(slots=True, kw_only=True, frozen=True)
class Change:
    name: str
    kind: HostKind
    action: Action
    fields: tuple[str, ...] = ()
    reason: str | None = None


@dataclass(slots=True, kw_only=True, frozen=True)
class ResourceFailure:
    name: str
    action: Action
    error: OcpError


@dataclass(slots=True)
class ProvisioningResult:
    changes: list[Change] = field(default_factory=list["Change"])
    failures: list[ResourceFailure] = field(default_factory=list["ResourceFailure"])

    @property
    def ok(self) -> bool:
        return not self.failures


type ReconcilerRegistry = Mapping[HostKind, HostReconciler[Any]]


def plan_change(desired: DesiredResource, stored: StoredResource | None) -> Change:
    """Decide what applying ``desired`` would do given the last stored state."""

    if stored is None or not stored.state.is_present:
        return Change(name=desired.name, kind=desired.kind, action=Action.CREATE)
    if stored.kind != desired.kind:
        return Change(
            name=desired.name,
            kind=desired.kind,
            action=Action.REPLACE,
            reason=f"kind changes from {stored.kind} to {desired.kind}",
        )
    prior = stored.state.attributes
    if prior is None:
        return Change(
            name=desired.name,
            kind=desired.kind,
            action=Action.UPDATE,
            reason="stored attributes unknown",
        )
    replacement = requires_replacement(prior, desired.spec)
    if replacement:
        return Change(
            name=desired.name,
            kind=desired.kind,
            action=Action.REPLACE,
            fields=tuple(sorted(replacement)),
        )
    changed = changed_fields(prior, desired.spec)
    if changed:
        return Change(
            name=desired.name,
            kind=desired.kind,
            action=Action.UPDATE,
            fields=tuple(sorted(changed)),
        )
    return Change(name=desired.name, kind=desired.kind, action=Action.NOOP)


def _ensure_unique(desired: Iterable[DesiredResource]) -> None:
    seen: set[str] = set()
    for resource in desired:
        if resource.name in seen:
            raise DesiredStateError(f"Resource name {resource.name!r} is declared twice")
        seen.add(resource.name)


class ProvisioningService:
    def __init__(
        self,
        *,
        reconcilers: ReconcilerRegistry,
        unit_of_work_factory: Callable[[], StateUnitOfWork],
    ) -> None:
        self.reconcilers = reconcilers
        self.unit_of_work_factory = unit_of_work_factory

    # -- stored state ------------------------------------------------------------

    def stored(self) -> list[StoredResource]:
        with self.unit_of_work_factory() as uow:
            return list(uow.repositories.resources.list())

    def _save(self, resource: StoredResource) -> None:
        with self.unit_of_work_factory() as uow:
            uow.repositories.resources.save(resource)
            uow.commit()

    def _remove(self, name: str) -> None:
        with self.unit_of_work_factory() as uow:
            uow.repositories.resources.remove(name)
            uow.commit()

    def _reconciler(self, kind: HostKind) -> HostReconciler[Any]:
        try:
            return self.reconcilers[kind]
        except KeyError:
            raise DesiredStateError(f"No reconciler registered for {kind}") from None

    # -- operations --------------------------------------------------------------

    def plan(self, desired: Sequence[DesiredResource]) -> list[Change]:
        """Compare the manifest against stored state without contacting the backend."""

        _ensure_unique(desired)
        stored = {resource.name: resource for resource in self.stored()}
        changes = [plan_change(resource, stored.get(resource.name)) for resource in desired]
        declared = {resource.name for resource in desired}
        changes.extend(
            Change(name=name, kind=resource.kind, action=Action.DELETE)
            for name, resource in stored.items()
            if name not in declared
        )
        return changes

    def apply(self, desired: Sequence[DesiredResource]) -> ProvisioningResult:
        _ensure_unique(desired)
        stored = {resource.name: resource for resource in self.stored()}
        result = ProvisioningResult()

        for resource in desired:
            try:
                change = self._apply_one(resource, stored.get(resource.name))
            except OcpError as exc:
                log.error("Failed to apply %s: %s", resource.name, exc)
                result.failures.append(
                    ResourceFailure(
                        name=resource.name,
                        action=plan_change(resource, stored.get(resource.name)).action,
                        error=exc,
                    )
                )
                continue
            result.changes.append(change)

        declared = {resource.name for resource in desired}
        for name, record in stored.items():
            if name in declared:
                continue
            self._destroy_one(record, result)

        log.info(
            "Apply finished: %s change(s), %s failure(s)",
            sum(change.action is not Action.NOOP for change in result.changes),
            len(result.failures),
        )
        return result

    def _apply_one(self, resource: DesiredResource, stored: StoredResource | None) -> Change:
        reconciler = self._reconciler(resource.kind)
        state: HostState[Any] = HostState.absent()
        recreated = False

        if stored is not None and stored.state.is_present:
            if stored.kind != resource.kind:
                self._reconciler(stored.kind).delete(stored.state)
                self._save(StoredResource(name=resource.name, kind=stored.kind))
                return self._create(resource, action=Action.REPLACE, reason="kind changed")
            state = reconciler.read(stored.state)
            recreated = not state.is_present
            if recreated:
                log.warning("%s was deleted outside ocphosts; creating it again", resource.name)

        if not state.is_present:
            return self._create(
                resource,
                action=Action.CREATE,
                reason="deleted outside ocphosts" if recreated else None,
            )

        prior = state.require_attributes()
        replacement = requires_replacement(prior, resource.spec)
        if replacement:
            fields = tuple(sorted(replacement))
            log.info("Replacing %s because %s changed", resource.name, ", ".join(fields))
            reconciler.delete(state)
            self._save(StoredResource(name=resource.name, kind=resource.kind))
            return self._create(resource, action=Action.REPLACE, fields=fields)

        changed = tuple(sorted(changed_fields(prior, resource.spec)))
        if changed:
            state = reconciler.update(state, resource.spec)
            action = Action.UPDATE
        else:
            action = Action.NOOP
        self._save(StoredResource(name=resource.name, kind=resource.kind, state=state))
        return Change(name=resource.name, kind=resource.kind, action=action, fields=changed)

    def _create(
        self,
        resource: DesiredResource,
        *,
        action: Action,
        fields: tuple[str, ...] = (),
        reason: str | None = None,
    ) -> Change:
        state = self._reconciler(resource.kind).create(resource.spec)
        self._save(StoredResource(name=resource.name, kind=resource.kind, state=state))
        return Change(
            name=resource.name, kind=resource.kind, action=action, fields=fields, reason=reason
        )

    def refresh(self) -> ProvisioningResult:
        """Re-read every stored resource and store what the backend reports."""

        result = ProvisioningResult()
        for record in self.stored():
            if not record.state.is_present:
                continue
            try:
                state = self._reconciler(record.kind).read(record.state)
            except OcpError as exc:
                log.error("Failed to refresh %s: %s", record.name, exc)
                result.failures.append(
                    ResourceFailure(name=record.name, action=Action.READ, error=exc)
                )
                continue
            self._save(StoredResource(name=record.name, kind=record.kind, state=state))
            result.changes.append(
                Change(
                    name=record.name,
                    kind=record.kind,
                    action=Action.READ,
                    reason=None if state.is_present else "deleted outside ocphosts",
                )
            )
        return result

    def destroy(self, names: Sequence[str] | None = None) -> ProvisioningResult:
        """Delete the named resources, or every stored resource when ``names`` is None."""

        stored = {resource.name: resource for resource in self.stored()}
        result = ProvisioningResult()
        targets = list(stored) if names is None else list(names)
        for name in targets:
            record = stored.get(name)
            if record is None:
                result.failures.append(
                    ResourceFailure(
                        name=name,
                        action=Action.DELETE,
                        error=DesiredStateError(f"{name} is not in the state store"),
                    )
                )
                continue
            self._destroy_one(record, result)
        return result

    def _destroy_one(self, record: StoredResource, result: ProvisioningResult) -> None:
        try:
            if record.state.is_present:
                self._reconciler(record.kind).delete(record.state)
        except OcpError as exc:
            log.error("Failed to delete %s: %s", record.name, exc)
            result.failures.append(
                ResourceFailure(name=record.name, action=Action.DELETE, error=exc)
            )
            return
        self._remove(record.name)
        result.changes.append(Change(name=record.name, kind=record.kind, action=Action.DELETE))

    def import_resource(self, name: str, kind: HostKind, remote_id: str) -> StoredResource:
        """Adopt an existing remote host under ``name``."""

        with self.unit_of_work_factory() as uow:
            existing = uow.repositories.resources.get(name)
        if existing is not None and existing.state.is_present:
            raise DesiredStateError(
                f"{name} already tracks host {existing.state.remote_id}; destroy it first"
            )
        state = self._reconciler(kind).import_state(remote_id)
        if not state.is_present:
            raise DesiredStateError(f"No {kind} with id {remote_id!r} exists")
        resource = StoredResource(name=name, kind=kind, state=state)
        self._save(resource)
        log.info("Imported %s %s as %s", kind, remote_id, name)
        return resource
