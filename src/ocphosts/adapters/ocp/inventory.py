"""Reconciler for inventory-only ("CAAS") virtual host records.

These records describe VMs that already run in a vCenter. OCP keeps them for
billing and ownership only, so there is no sizing, tier job or interface
handling here: every update is a single synchronous mutation.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from ocphosts.domain.model import HostKind, HostState, InventoryHostSpec
from ocphosts.domain.outcomes import expect_success
from ocphosts.domain.reconciliation import changed_fields

from . import documents
from .schema import AcknowledgementPayload, VirtualHostNode, VirtualHostNodePayload
from .translator import (
    delete_input,
    inventory_create_input,
    inventory_state_from_node,
    inventory_update_input,
)

if TYPE_CHECKING:
    from ocphosts.domain.ports import RequestExecutor

log = getLogger(__name__)

VIRTUAL_HOST_NODE = "VirtualHostNode"
UPDATABLE_FIELDS = frozenset({"note", "tier_id"})


class InventoryHostReconciler:
    kind = HostKind.INVENTORY

    def __init__(self, executor: RequestExecutor) -> None:
        self.executor = executor

    def create(self, desired: InventoryHostSpec) -> HostState[InventoryHostSpec]:
        payload = self.executor.execute(
            documents.CREATE_INVENTORY_HOST,
            {"input": inventory_create_input(desired)},
            field="virtualHostCreateCaas",
            into=VirtualHostNodePayload,
        )
        node = expect_success(
            payload, success_type=VIRTUAL_HOST_NODE, operation="virtualHostCreateCaas"
        )
        log.info("Registered inventory host %s (%s)", node.hostname or desired.hostname, node.id)
        return inventory_state_from_node(node)

    def read(self, state: HostState[InventoryHostSpec]) -> HostState[InventoryHostSpec]:
        return self.import_state(state.remote_id)

    def import_state(self, remote_id: str) -> HostState[InventoryHostSpec]:
        node = self.executor.execute(
            documents.GET_INVENTORY_HOST,
            {"id": remote_id},
            field="virtualHost",
            into=VirtualHostNode,
        )
        if node is None:
            log.info("Inventory host %s no longer exists", remote_id)
            return HostState.absent()
        return inventory_state_from_node(node)

    def update(
        self, state: HostState[InventoryHostSpec], desired: InventoryHostSpec
    ) -> HostState[InventoryHostSpec]:
        prior = state.require_attributes()
        changed = changed_fields(prior, desired)
        updatable = changed & UPDATABLE_FIELDS
        if changed - updatable:
            log.warning(
                "Ignoring changes to %s on %s; they cannot be applied in place",
                ", ".join(sorted(changed - updatable)),
                state.remote_id,
            )
        if updatable:
            payload = self.executor.execute(
                documents.UPDATE_INVENTORY_HOST,
                {"input": inventory_update_input(state.remote_id, desired, updatable)},
                field="virtualHostUpdateCaas",
                into=VirtualHostNodePayload,
            )
            expect_success(
                payload, success_type=VIRTUAL_HOST_NODE, operation="virtualHostUpdateCaas"
            )
            log.info(
                "Updated %s on inventory host %s", ", ".join(sorted(updatable)), state.remote_id
            )
        return self.import_state(state.remote_id)

    def delete(self, state: HostState[InventoryHostSpec]) -> HostState[InventoryHostSpec]:
        payload = self.executor.execute(
            documents.DELETE_INVENTORY_HOST,
            {"input": delete_input(state.remote_id)},
            field="virtualHostDeleteCaas",
            into=AcknowledgementPayload,
        )
        expect_success(payload, success_type=VIRTUAL_HOST_NODE, operation="virtualHostDeleteCaas")
        log.info("Removed inventory host %s", state.remote_id)
        return HostState.absent()
