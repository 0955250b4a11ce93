"""Application orchestration entry points."""

from __future__ import annotations

from contextlib import contextmanager
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any

from ocphosts.adapters.manifest import load_manifest
from ocphosts.adapters.ocp import (
    ImmutableVirtualHostReconciler,
    InventoryHostReconciler,
    OcpClient,
    OcpLookups,
    VirtualHostReconciler,
)
from ocphosts.adapters.sqlalchemy import SqlAlchemyStateUnitOfWork, is_started, startup
from ocphosts.config import get_ocp_config
from ocphosts.domain.errors import DesiredStateError
from ocphosts.domain.model import HostKind
from ocphosts.domain.provisioning import ProvisioningService

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence
    from pathlib import Path

    from ocphosts.adapters.ocp.schema import NamedNode
    from ocphosts.domain.model import StoredResource
    from ocphosts.domain.ports import HostReconciler, RequestExecutor, StateUnitOfWork
    from ocphosts.domain.provisioning import Change, ProvisioningResult

type UnitOfWorkFactory = Callable[[], StateUnitOfWork]

log = getLogger(__name__)


class LookupKind(StrEnum):
    CUSTOMER = "customer"
    PROJECT = "project"
    DOMAIN = "domain"
    NETWORK = "network"
    TIER = "tier"
    TEMPLATE = "template"
    DATA_PROTECTION_POLICY = "data_protection_policy"
    VCENTER = "vcenter"


def build_reconcilers(executor: RequestExecutor) -> dict[HostKind, HostReconciler[Any]]:
    return {
        HostKind.STANDARD: VirtualHostReconciler(executor),
        HostKind.INVENTORY: InventoryHostReconciler(executor),
        HostKind.IMMUTABLE: ImmutableVirtualHostReconciler(executor),
    }


@contextmanager
def _open_executor(executor: RequestExecutor | None) -> Iterator[RequestExecutor]:
    if executor is not None:
        yield executor
        return
    config = get_ocp_config()
    log.debug("Using %r", config)
    with OcpClient(config) as client:
        yield client


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyStateUnitOfWork


@contextmanager
def _open_service(
    executor: RequestExecutor | None,
    unit_of_work_factory: UnitOfWorkFactory | None,
) -> Iterator[ProvisioningService]:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with _open_executor(executor) as effective_executor:
        yield ProvisioningService(
            reconcilers=build_reconcilers(effective_executor),
            unit_of_work_factory=effective_uow,
        )


def plan_manifest(
    manifest_path: Path | str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[Change]:
    """Compare a manifest with stored state; the backend is not contacted."""

    desired = load_manifest(manifest_path)
    service = ProvisioningService(
        reconcilers={},
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
    )
    return service.plan(desired)


def apply_manifest(
    manifest_path: Path | str,
    *,
    executor: RequestExecutor | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ProvisioningResult:
    desired = load_manifest(manifest_path)
    log.info("Applying %s resource(s) from %s", len(desired), manifest_path)
    with _open_service(executor, unit_of_work_factory) as service:
        return service.apply(desired)


def refresh_state(
    *,
    executor: RequestExecutor | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ProvisioningResult:
    with _open_service(executor, unit_of_work_factory) as service:
        return service.refresh()


def destroy_resources(
    names: Sequence[str] | None = None,
    *,
    executor: RequestExecutor | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ProvisioningResult:
    with _open_service(executor, unit_of_work_factory) as service:
        return service.destroy(names)


def import_host(
    name: str,
    kind: HostKind,
    remote_id: str,
    *,
    executor: RequestExecutor | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> StoredResource:
    with _open_service(executor, unit_of_work_factory) as service:
        return service.import_resource(name, kind, remote_id)


def show_state(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> list[StoredResource]:
    service = ProvisioningService(
        reconcilers={},
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
    )
    return service.stored()


def _require(value: str | None, option: str, kind: LookupKind) -> str:
    if not value:
        raise DesiredStateError(f"{kind} lookups need {option}")
    return value


def lookup(
    kind: LookupKind,
    name: str,
    *,
    customer_id: str | None = None,
    project_id: str | None = None,
    region: str | None = None,
    solution_type: str | None = None,
    executor: RequestExecutor | None = None,
) -> NamedNode:
    """Resolve ``name`` (the note, for data protection policies) to exactly one object."""

    with _open_executor(executor) as effective_executor:
        lookups = OcpLookups(effective_executor)
        solution: dict[str, str] = {"solution_type": solution_type} if solution_type else {}
        match kind:
            case LookupKind.CUSTOMER:
                return lookups.customer(name)
            case LookupKind.PROJECT:
                return lookups.project(
                    name, customer_id=_require(customer_id, "--customer-id", kind)
                )
            case LookupKind.DOMAIN:
                return lookups.domain(
                    name, customer_id=_require(customer_id, "--customer-id", kind)
                )
            case LookupKind.NETWORK:
                return lookups.network(
                    name, customer_id=_require(customer_id, "--customer-id", kind)
                )
            case LookupKind.TIER:
                return lookups.tier(name, **solution)
            case LookupKind.TEMPLATE:
                return lookups.template(
                    name,
                    customer_id=_require(customer_id, "--customer-id", kind),
                    region=_require(region, "--region", kind),
                    **solution,
                )
            case LookupKind.DATA_PROTECTION_POLICY:
                return lookups.data_protection_policy(
                    name,
                    customer_id=_require(customer_id, "--customer-id", kind),
                    project_id=_require(project_id, "--project-id", kind),
                    **solution,
                )
            case LookupKind.VCENTER:
                return lookups.vcenter(
                    name, customer_id=_require(customer_id, "--customer-id", kind)
                )
