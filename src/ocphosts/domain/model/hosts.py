"""Desired-state records for the three virtual host variants."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar


class HostKind(StrEnum):
    """Resource variants managed by ocphosts."""

    STANDARD = "virtual_host"
    INVENTORY = "virtual_host_inventory"
    IMMUTABLE = "virtual_host_immutable"


@dataclass(slots=True, kw_only=True, frozen=True)
class InterfaceSpec:
    """Network interface of a template-provisioned host.

    ``ip`` is only meaningful when ``auto_assign_ip`` is false.
    """

    network_id: str
    auto_assign_ip: bool = True
    ip: str | None = None


@dataclass(slots=True, kw_only=True, frozen=True)
class StaticInterfaceSpec:
    """Network interface of an image-provisioned host with explicit addresses."""

    network_id: str
    ip_list: tuple[str, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class LocalDisk:
    size_gb: int


@dataclass(slots=True, kw_only=True, frozen=True)
class VirtualHostSpec:
    """Host provisioned from a template."""

    REPLACEMENT_FIELDS: ClassVar[tuple[str, ...]] = (
        "region",
        "customer_id",
        "project_id",
        "template_id",
    )
    REPORTED_FIELDS: ClassVar[tuple[str, ...]] = ()

    region: str
    customer_id: str
    project_id: str
    hostname: str
    domain_id: str
    cpu_count: int
    memory_size_gb: int
    tier_id: str
    template_id: str
    note: str
    data_protection_policy: str
    interfaces: tuple[InterfaceSpec, ...] = ()
    cores_per_socket: int = 1
    allow_resize_restart: bool = True


@dataclass(slots=True, kw_only=True, frozen=True)
class ImmutableVirtualHostSpec:
    """Host provisioned from an immutable image and ignition config data."""

    REPLACEMENT_FIELDS: ClassVar[tuple[str, ...]] = (
        "region",
        "customer_id",
        "project_id",
        "template_id",
    )
    REPORTED_FIELDS: ClassVar[tuple[str, ...]] = ()

    region: str
    customer_id: str
    project_id: str
    hostname: str
    template_id: str
    tier_id: str
    cpu_count: int
    memory_size_gb: int
    note: str
    ignition_config_data: str = field(repr=False)
    ignition_config_data_encoding: str = "BASE64"
    os_disk_size_gb: int = 20
    cores_per_socket: int = 1
    data_protection_policy: str | None = None
    allow_resize_restart: bool = True
    notify_user: bool = False
    cluster_type: str = "PRIMARY"
    version: str | None = None
    anti_affinity: str | None = None
    business_service: str | None = None
    dedicated_cluster: str | None = None
    dedicated_dr_cluster: str | None = None
    interfaces: tuple[StaticInterfaceSpec, ...] = ()
    local_disks: tuple[LocalDisk, ...] = ()


@dataclass(slots=True, kw_only=True, frozen=True)
class InventoryHostSpec:
    """Inventory-only record linked to a VM that already runs in a vCenter.

    OCP neither provisions nor controls the VM; ``uuid`` is the vCenter UUID
    of the existing machine. ``customer_id`` is reported by the backend and
    never submitted.
    """

    REPLACEMENT_FIELDS: ClassVar[tuple[str, ...]] = (
        "region",
        "vcenter_id",
        "project_id",
        "hostname",
        "uuid",
    )
    REPORTED_FIELDS: ClassVar[tuple[str, ...]] = ("customer_id",)

    region: str
    vcenter_id: str
    project_id: str
    tier_id: str
    hostname: str
    uuid: str
    note: str
    customer_id: str | None = None


type HostSpec = VirtualHostSpec | ImmutableVirtualHostSpec | InventoryHostSpec

SPEC_TYPE_BY_KIND: dict[HostKind, type[HostSpec]] = {
    HostKind.STANDARD: VirtualHostSpec,
    HostKind.INVENTORY: InventoryHostSpec,
    HostKind.IMMUTABLE: ImmutableVirtualHostSpec,
}
