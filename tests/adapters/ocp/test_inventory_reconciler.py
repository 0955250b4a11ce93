from __future__ import annotations

from dataclasses import replace

import pytest

from ocphosts.adapters.ocp import InventoryHostReconciler, OcpClient
from ocphosts.domain.errors import ProtocolViolationError, UnavailableError
from ocphosts.domain.model import HostState, InventoryHostSpec
from tests.support.ocp_backend import FakeOcpBackend, inventory_node


def _desired(**overrides: object) -> InventoryHostSpec:
    spec = InventoryHostSpec(
        region="FI1",
        vcenter_id="vc-1",
        project_id="prj-1",
        tier_id="tier-silver",
        hostname="legacy01",
        uuid="4230-bbbb",
        note="migrated",
    )
    return replace(spec, **overrides)


def _node_payload(**overrides: object) -> dict[str, object]:
    return {"__typename": "VirtualHostNode", **inventory_node(**overrides)}


def _present(spec: InventoryHostSpec) -> HostState[InventoryHostSpec]:
    return HostState(
        remote_id="vh-caas-1", uuid="4230-bbbb", status="RUNNING", attributes=spec
    )


@pytest.fixture
def reconciler(ocp_client: OcpClient) -> InventoryHostReconciler:
    return InventoryHostReconciler(ocp_client)


def test_create_registers_existing_vm(
    ocp_backend: FakeOcpBackend, reconciler: InventoryHostReconciler
) -> None:
    ocp_backend.respond("virtualHostCreateCaas", _node_payload())

    state = reconciler.create(_desired())

    assert ocp_backend.calls[0].input == {
        "vcenter": "vc-1",
        "hostname": "legacy01",
        "uuid": "4230-bbbb",
        "note": "migrated",
        "tier": "tier-silver",
        "project": "prj-1",
        "region": "FI1",
    }
    assert state.remote_id == "vh-caas-1"
    assert state.require_attributes().customer_id == "cust-1"


def test_create_success_without_id_is_protocol_violation(
    ocp_backend: FakeOcpBackend, reconciler: InventoryHostReconciler
) -> None:
    ocp_backend.respond("virtualHostCreateCaas", _node_payload(id=""))

    with pytest.raises(ProtocolViolationError, match="virtualHostCreateCaas"):
        reconciler.create(_desired())


def test_reported_customer_does_not_count_as_change(
    ocp_backend: FakeOcpBackend, reconciler: InventoryHostReconciler
) -> None:
    ocp_backend.respond("virtualHost", inventory_node())
    stored = _present(_desired(customer_id="cust-1"))

    state = reconciler.update(stored, _desired())

    assert ocp_backend.fields == ["virtualHost"]
    assert state.require_attributes().customer_id == "cust-1"


def test_update_sends_only_note_and_tier(
    ocp_backend: FakeOcpBackend, reconciler: InventoryHostReconciler
) -> None:
    ocp_backend.respond("virtualHostUpdateCaas", _node_payload(note="renamed"))
    ocp_backend.respond("virtualHost", inventory_node(note="renamed"))

    state = reconciler.update(_present(_desired()), _desired(note="renamed"))

    assert ocp_backend.fields == ["virtualHostUpdateCaas", "virtualHost"]
    assert ocp_backend.calls[0].input == {"virtualHost": "vh-caas-1", "note": "renamed"}
    assert state.require_attributes().note == "renamed"


def test_update_failure_is_raised(
    ocp_backend: FakeOcpBackend, reconciler: InventoryHostReconciler
) -> None:
    ocp_backend.respond(
        "virtualHostUpdateCaas",
        {"__typename": "OperationUnavailable", "message": "Busy", "reasons": ["LOCKED"]},
    )

    with pytest.raises(UnavailableError, match=r"Busy \(reasons=\[LOCKED\]\)"):
        reconciler.update(_present(_desired()), _desired(tier_id="tier-gold"))


def test_read_of_missing_record_is_absent(
    ocp_backend: FakeOcpBackend, reconciler: InventoryHostReconciler
) -> None:
    ocp_backend.respond("virtualHost", None)

    assert reconciler.read(_present(_desired())) == HostState.absent()


def test_delete_acknowledged_without_id(
    ocp_backend: FakeOcpBackend, reconciler: InventoryHostReconciler
) -> None:
    ocp_backend.respond("virtualHostDeleteCaas", {"__typename": "VirtualHostNode"})

    assert reconciler.delete(_present(_desired())) == HostState.absent()
    assert ocp_backend.calls[0].input == {"virtualHost": "vh-caas-1"}
