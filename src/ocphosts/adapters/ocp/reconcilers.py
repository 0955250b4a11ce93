"""Reconcilers for OCP-provisioned virtual hosts (template and immutable image)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from ocphosts.domain.errors import DesiredStateError
from ocphosts.domain.model import (
    HostKind,
    HostState,
    ImmutableVirtualHostSpec,
    VirtualHostSpec,
)
from ocphosts.domain.outcomes import expect_success
from ocphosts.domain.reconciliation import (
    ChangeCategory,
    compute_change_set,
    guard_change_set,
)

from . import documents
from .schema import (
    AcknowledgementPayload,
    VirtualHostCreatedPayload,
    VirtualHostNode,
)
from .translator import (
    created_immutable_state,
    created_standard_state,
    delete_input,
    immutable_create_input,
    immutable_state_from_node,
    resize_input,
    standard_create_input,
    standard_state_from_node,
    tier_input,
)

if TYPE_CHECKING:
    from ocphosts.domain.ports import RequestExecutor

log = getLogger(__name__)

VIRTUAL_HOST_CREATED = "VirtualHostCreated"
TASK_EXECUTION_NODE = "TaskExecutionNode"


class _ProvisionedHostReconciler[TSpec: (VirtualHostSpec, ImmutableVirtualHostSpec)](ABC):
    """Read, update and delete shared by both provisioned variants.

    Subclasses supply the create mutation and the translation of ``GetVm``.
    """

    kind: ClassVar[HostKind]

    def __init__(self, executor: RequestExecutor) -> None:
        self.executor = executor

    @abstractmethod
    def create(self, desired: TSpec) -> HostState[TSpec]: ...

    @abstractmethod
    def _state_from_node(self, node: VirtualHostNode, base: TSpec | None) -> HostState[TSpec]: ...

    def read(self, state: HostState[TSpec]) -> HostState[TSpec]:
        return self._read(state.remote_id, base=state.attributes)

    def import_state(self, remote_id: str) -> HostState[TSpec]:
        return self._read(remote_id, base=None)

    def _read(self, remote_id: str, *, base: TSpec | None) -> HostState[TSpec]:
        node = self.executor.execute(
            documents.GET_VIRTUAL_HOST,
            {"id": remote_id},
            field="virtualHost",
            into=VirtualHostNode,
        )
        if node is None:
            log.info("Virtual host %s no longer exists", remote_id)
            return HostState.absent()
        return self._state_from_node(node, base)

    def update(self, state: HostState[TSpec], desired: TSpec) -> HostState[TSpec]:
        prior = state.require_attributes()
        change_set = compute_change_set(prior, desired)
        category = guard_change_set(change_set, resource=desired.hostname)
        if change_set.other:
            log.warning(
                "Ignoring changes to %s on %s; they cannot be applied in place",
                ", ".join(sorted(change_set.other)),
                state.remote_id,
            )

        if category is ChangeCategory.SIZING:
            payload = self.executor.execute(
                documents.RESIZE_VIRTUAL_HOST,
                {"input": resize_input(state.remote_id, desired, change_set.sizing)},
                field="virtualHostResize",
                into=AcknowledgementPayload,
            )
            task_id = expect_success(
                payload, success_type=TASK_EXECUTION_NODE, operation="virtualHostResize"
            )
            log.info("Resize of %s accepted (%s)", state.remote_id, task_id)
        elif category is ChangeCategory.TIER:
            payload = self.executor.execute(
                documents.UPDATE_VIRTUAL_HOST_TIER,
                {"input": tier_input(state.remote_id, desired.tier_id)},
                field="virtualHostUpdateTier",
                into=AcknowledgementPayload,
            )
            task_id = expect_success(
                payload, success_type=TASK_EXECUTION_NODE, operation="virtualHostUpdateTier"
            )
            log.info("Tier change of %s accepted (%s)", state.remote_id, task_id)

        return self._read(state.remote_id, base=desired)

    def delete(self, state: HostState[TSpec]) -> HostState[TSpec]:
        payload = self.executor.execute(
            documents.DELETE_VIRTUAL_HOST,
            {"input": delete_input(state.remote_id)},
            field="virtualHostDelete",
            into=AcknowledgementPayload,
        )
        expect_success(payload, success_type=TASK_EXECUTION_NODE, operation="virtualHostDelete")
        log.info("Deletion of %s accepted", state.remote_id)
        return HostState.absent()


class VirtualHostReconciler(_ProvisionedHostReconciler[VirtualHostSpec]):
    """Hosts provisioned from a template."""

    kind = HostKind.STANDARD

    def create(self, desired: VirtualHostSpec) -> HostState[VirtualHostSpec]:
        if not desired.interfaces:
            raise DesiredStateError(
                f"{desired.hostname}: at least one network interface is required"
            )
        payload = self.executor.execute(
            documents.CREATE_VIRTUAL_HOST,
            {"input": standard_create_input(desired)},
            field="virtualHostCreate",
            into=VirtualHostCreatedPayload,
        )
        node = expect_success(
            payload, success_type=VIRTUAL_HOST_CREATED, operation="virtualHostCreate"
        )
        log.info("Created virtual host %s (%s)", node.hostname or desired.hostname, node.id)
        return created_standard_state(node, desired)

    def _state_from_node(
        self, node: VirtualHostNode, base: VirtualHostSpec | None
    ) -> HostState[VirtualHostSpec]:
        return standard_state_from_node(node, base)


class ImmutableVirtualHostReconciler(_ProvisionedHostReconciler[ImmutableVirtualHostSpec]):
    """Hosts provisioned from an immutable image with ignition config data."""

    kind = HostKind.IMMUTABLE

    def create(self, desired: ImmutableVirtualHostSpec) -> HostState[ImmutableVirtualHostSpec]:
        payload = self.executor.execute(
            documents.CREATE_IMMUTABLE_VIRTUAL_HOST,
            {"input": immutable_create_input(desired)},
            field="virtualHostCreateImmutable",
            into=VirtualHostCreatedPayload,
        )
        node = expect_success(
            payload, success_type=VIRTUAL_HOST_CREATED, operation="virtualHostCreateImmutable"
        )
        log.info(
            "Created immutable virtual host %s (%s)", node.hostname or desired.hostname, node.id
        )
        return created_immutable_state(node, desired)

    def _state_from_node(
        self, node: VirtualHostNode, base: ImmutableVirtualHostSpec | None
    ) -> HostState[ImmutableVirtualHostSpec]:
        return immutable_state_from_node(node, base)

