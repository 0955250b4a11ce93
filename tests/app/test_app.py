from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from ocphosts.app import (
    LookupKind,
    apply_manifest,
    destroy_resources,
    import_host,
    lookup,
    plan_manifest,
    refresh_state,
    show_state,
)
from ocphosts.domain.errors import DesiredStateError
from ocphosts.domain.model import HostKind
from ocphosts.domain.provisioning import Action
from tests.support.ocp_backend import (
    FakeOcpBackend,
    connection,
    created_payload,
    inventory_node,
    task_payload,
    vm_node,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from ocphosts.adapters.ocp import OcpClient
    from ocphosts.adapters.sqlalchemy import SqlAlchemyStateUnitOfWork

    type UowFactory = Callable[[], SqlAlchemyStateUnitOfWork]


@pytest.fixture
def manifest_path(tmp_path: Path) -> Path:
    path = tmp_path / "hosts.json"
    config = {
        "region": "FI1",
        "customer_id": "cust-1",
        "project_id": "prj-1",
        "hostname": "app01",
        "domain_id": "dom-1",
        "cpu_count": 2,
        "memory_size_gb": 8,
        "tier_id": "tier-gold",
        "template_id": "tpl-1",
        "note": "web tier",
        "data_protection_policy": "dpp-1",
        "interfaces": [{"network_id": "net-1", "auto_assign_ip": False, "ip": "192.0.2.10"}],
    }
    path.write_text(
        json.dumps({"resources": [{"name": "web", "kind": "virtual_host", "config": config}]})
    )
    return path


def test_apply_then_plan_then_destroy(
    ocp_backend: FakeOcpBackend,
    ocp_client: OcpClient,
    state_unit_of_work: UowFactory,
    manifest_path: Path,
) -> None:
    ocp_backend.respond("virtualHostCreate", created_payload())

    result = apply_manifest(
        manifest_path, executor=ocp_client, unit_of_work_factory=state_unit_of_work
    )

    assert result.ok
    assert result.changes[0].action is Action.CREATE
    plan = plan_manifest(manifest_path, unit_of_work_factory=state_unit_of_work)
    assert [change.action for change in plan] == [Action.NOOP]

    ocp_backend.respond("virtualHost", vm_node())
    second = apply_manifest(
        manifest_path, executor=ocp_client, unit_of_work_factory=state_unit_of_work
    )
    assert second.changes[0].action is Action.NOOP

    ocp_backend.respond("virtualHostDelete", task_payload())
    destroyed = destroy_resources(
        None, executor=ocp_client, unit_of_work_factory=state_unit_of_work
    )

    assert destroyed.ok
    assert show_state(unit_of_work_factory=state_unit_of_work) == []
    assert ocp_backend.fields == ["virtualHostCreate", "virtualHost", "virtualHostDelete"]


def test_refresh_records_host_deleted_outside(
    ocp_backend: FakeOcpBackend,
    ocp_client: OcpClient,
    state_unit_of_work: UowFactory,
    manifest_path: Path,
) -> None:
    ocp_backend.respond("virtualHostCreate", created_payload())
    apply_manifest(manifest_path, executor=ocp_client, unit_of_work_factory=state_unit_of_work)
    ocp_backend.respond("virtualHost", None)

    result = refresh_state(executor=ocp_client, unit_of_work_factory=state_unit_of_work)

    assert result.changes[0].reason == "deleted outside ocphosts"
    stored = show_state(unit_of_work_factory=state_unit_of_work)
    assert stored[0].state.remote_id == ""


def test_import_host_stores_inventory_record(
    ocp_backend: FakeOcpBackend,
    ocp_client: OcpClient,
    state_unit_of_work: UowFactory,
) -> None:
    ocp_backend.respond("virtualHost", inventory_node())

    resource = import_host(
        "legacy",
        HostKind.INVENTORY,
        "vh-caas-1",
        executor=ocp_client,
        unit_of_work_factory=state_unit_of_work,
    )

    assert resource.state.require_attributes().vcenter_id == "vc-1"
    assert show_state(unit_of_work_factory=state_unit_of_work)[0].name == "legacy"


def test_lookup_dispatches_by_kind(ocp_backend: FakeOcpBackend, ocp_client: OcpClient) -> None:
    ocp_backend.respond("vcenterList", connection({"id": "vc-1", "name": "vcenter-fi1"}))

    node = lookup(LookupKind.VCENTER, "vcenter-fi1", customer_id="cust-1", executor=ocp_client)

    assert node.id == "vc-1"


def test_lookup_requires_scoping_options(
    ocp_backend: FakeOcpBackend, ocp_client: OcpClient
) -> None:
    with pytest.raises(DesiredStateError, match="--project-id"):
        lookup(
            LookupKind.DATA_PROTECTION_POLICY,
            "daily",
            customer_id="cust-1",
            executor=ocp_client,
        )

    assert ocp_backend.calls == []
