from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, select

from ocphosts.adapters.sqlalchemy import (
    SqlAlchemyStateUnitOfWork,
    StartupError,
    is_started,
    resource_state_table,
    shutdown,
    startup,
)
from ocphosts.domain.model import (
    HostKind,
    HostState,
    InterfaceSpec,
    LocalDisk,
    StaticInterfaceSpec,
    StoredResource,
)
from tests.helpers.hosts import make_immutable_host, make_inventory_host, make_virtual_host

if TYPE_CHECKING:
    from collections.abc import Callable


type UowFactory = Callable[[], SqlAlchemyStateUnitOfWork]


def _resource(name: str = "web", **overrides: object) -> StoredResource:
    spec = make_virtual_host(
        interfaces=(
            InterfaceSpec(network_id="net-1", auto_assign_ip=False, ip="192.0.2.10"),
            InterfaceSpec(network_id="net-2"),
        ),
        **overrides,
    )
    return StoredResource(
        name=name,
        kind=HostKind.STANDARD,
        state=HostState(
            remote_id=f"vh-{name}", uuid="4210-aaaa", status="RUNNING", attributes=spec
        ),
    )


def test_saved_resource_loads_with_typed_attributes(state_unit_of_work: UowFactory) -> None:
    resource = _resource()

    with state_unit_of_work() as uow:
        uow.repositories.resources.save(resource)
        uow.commit()

    with state_unit_of_work() as uow:
        loaded = uow.repositories.resources.get("web")

    assert loaded == resource


def test_each_kind_keeps_its_spec_type(state_unit_of_work: UowFactory) -> None:
    immutable = make_immutable_host(
        interfaces=(StaticInterfaceSpec(network_id="net-1", ip_list=("192.0.2.20",)),),
        local_disks=(LocalDisk(size_gb=100),),
    )
    inventory = make_inventory_host(customer_id="cust-1")
    resources = [
        StoredResource(
            name="node",
            kind=HostKind.IMMUTABLE,
            state=HostState(remote_id="vh-2", attributes=immutable),
        ),
        StoredResource(
            name="legacy",
            kind=HostKind.INVENTORY,
            state=HostState(remote_id="vh-3", attributes=inventory),
        ),
    ]

    with state_unit_of_work() as uow:
        for resource in resources:
            uow.repositories.resources.save(resource)
        uow.commit()

    with state_unit_of_work() as uow:
        loaded = {item.name: item for item in uow.repositories.resources.list()}

    assert loaded["node"].state.attributes == immutable
    assert loaded["legacy"].state.attributes == inventory
    assert loaded["legacy"].kind is HostKind.INVENTORY


def test_save_overwrites_existing_row(state_unit_of_work: UowFactory) -> None:
    with state_unit_of_work() as uow:
        uow.repositories.resources.save(_resource())
        uow.commit()

    updated = _resource(cpu_count=8)
    with state_unit_of_work() as uow:
        uow.repositories.resources.save(updated)
        uow.commit()

    with state_unit_of_work() as uow:
        rows = uow.session.execute(select(resource_state_table.c.name)).all()
        loaded = uow.repositories.resources.get("web")

    assert len(rows) == 1
    assert loaded is not None
    assert loaded.state.require_attributes().cpu_count == 8


def test_absent_state_without_attributes(state_unit_of_work: UowFactory) -> None:
    with state_unit_of_work() as uow:
        uow.repositories.resources.save(StoredResource(name="pending", kind=HostKind.STANDARD))
        uow.commit()

    with state_unit_of_work() as uow:
        loaded = uow.repositories.resources.get("pending")

    assert loaded is not None
    assert not loaded.state.is_present
    assert loaded.state.attributes is None


def test_list_is_ordered_and_remove_deletes(state_unit_of_work: UowFactory) -> None:
    with state_unit_of_work() as uow:
        for name in ("web", "api", "db"):
            uow.repositories.resources.save(_resource(name))
        uow.commit()

    with state_unit_of_work() as uow:
        uow.repositories.resources.remove("api")
        uow.commit()

    with state_unit_of_work() as uow:
        names = [item.name for item in uow.repositories.resources.list()]

    assert names == ["db", "web"]


def test_uncommitted_changes_roll_back_on_error(state_unit_of_work: UowFactory) -> None:
    with pytest.raises(RuntimeError), state_unit_of_work() as uow:
        uow.repositories.resources.save(_resource())
        raise RuntimeError("boom")

    with state_unit_of_work() as uow:
        assert uow.repositories.resources.get("web") is None


def test_unit_of_work_requires_startup() -> None:
    shutdown()

    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyStateUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:")
    engine_b = create_engine("sqlite+pysqlite:///:memory:")
    try:
        startup(engine=engine_a, force=True)
        with pytest.raises(StartupError):
            startup(engine=engine_b)
        startup(engine=engine_b, force=True)
        assert is_started()
    finally:
        shutdown()
