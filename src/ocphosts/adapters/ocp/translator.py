"""Translate between desired-state specs and OCP wire payloads."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING, Any

from ocphosts.domain.model import (
    HostState,
    ImmutableVirtualHostSpec,
    InterfaceSpec,
    InventoryHostSpec,
    StaticInterfaceSpec,
    VirtualHostSpec,
    mb_to_gb,
)
from ocphosts.domain.model.units import is_whole_gb
from ocphosts.domain.reconciliation import reconcile_interfaces, strip_prefix

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import NetworkInterfaceNode, VirtualHostNode

log = getLogger(__name__)

_WIRE_SIZING_FIELDS: dict[str, str] = {
    "cpu_count": "cpuCount",
    "cores_per_socket": "coresPerSocket",
    "memory_size_gb": "memorySizeGB",
}
_WIRE_INVENTORY_FIELDS: dict[str, str] = {
    "note": "note",
    "tier_id": "tier",
}


# -- inputs ----------------------------------------------------------------------


def standard_create_input(spec: VirtualHostSpec) -> dict[str, Any]:
    return {
        "region": spec.region,
        "customer": spec.customer_id,
        "project": spec.project_id,
        "hostname": spec.hostname,
        "domain": spec.domain_id,
        "cpuCount": spec.cpu_count,
        "coresPerSocket": spec.cores_per_socket,
        "memorySizeGB": spec.memory_size_gb,
        "tier": spec.tier_id,
        "template": spec.template_id,
        "note": spec.note,
        "dataProtectionPolicy": spec.data_protection_policy,
        "interfaceList": [_standard_interface_input(item) for item in spec.interfaces],
    }


def _standard_interface_input(interface: InterfaceSpec) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "network": interface.network_id,
        "autoAssignIp": interface.auto_assign_ip,
    }
    if interface.ip:
        payload["ipList"] = [interface.ip]
    return payload


def immutable_create_input(spec: ImmutableVirtualHostSpec) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "region": spec.region,
        "customer": spec.customer_id,
        "project": spec.project_id,
        "hostname": spec.hostname,
        "template": spec.template_id,
        "tier": spec.tier_id,
        "cpuCount": spec.cpu_count,
        "coresPerSocket": spec.cores_per_socket,
        "memorySizeGB": spec.memory_size_gb,
        "note": spec.note,
        "ignitionConfigData": spec.ignition_config_data,
        "ignitionConfigDataEncoding": spec.ignition_config_data_encoding,
        "osDiskSizeGB": spec.os_disk_size_gb,
        "notifyUser": spec.notify_user,
        "clusterType": spec.cluster_type,
        "interfaceList": [_static_interface_input(item) for item in spec.interfaces],
        "localDiskList": [{"sizeGB": disk.size_gb} for disk in spec.local_disks],
    }
    optional = {
        "dataProtectionPolicy": spec.data_protection_policy,
        "antiAffinity": spec.anti_affinity,
        "businessService": spec.business_service,
        "dedicatedCluster": spec.dedicated_cluster,
        "dedicatedDrCluster": spec.dedicated_dr_cluster,
        "version": spec.version,
    }
    payload.update({key: value for key, value in optional.items() if value})
    return payload


def _static_interface_input(interface: StaticInterfaceSpec) -> dict[str, Any]:
    payload: dict[str, Any] = {"network": interface.network_id}
    if interface.ip_list:
        payload["ipList"] = list(interface.ip_list)
    return payload


def resize_input(
    remote_id: str,
    desired: VirtualHostSpec | ImmutableVirtualHostSpec,
    changed: Iterable[str],
) -> dict[str, Any]:
    """Resize input carrying only the sizing fields listed in ``changed``."""

    payload: dict[str, Any] = {
        "virtualHost": remote_id,
        "allowRestart": desired.allow_resize_restart,
    }
    for name in sorted(changed):
        wire_name = _WIRE_SIZING_FIELDS.get(name)
        if wire_name is not None:
            payload[wire_name] = getattr(desired, name)
    return payload


def tier_input(remote_id: str, tier_id: str) -> dict[str, Any]:
    return {"virtualHost": remote_id, "tier": tier_id}


def delete_input(remote_id: str) -> dict[str, Any]:
    return {"virtualHost": remote_id}


def inventory_create_input(spec: InventoryHostSpec) -> dict[str, Any]:
    return {
        "vcenter": spec.vcenter_id,
        "hostname": spec.hostname,
        "uuid": spec.uuid,
        "note": spec.note,
        "tier": spec.tier_id,
        "project": spec.project_id,
        "region": spec.region,
    }


def inventory_update_input(
    remote_id: str,
    desired: InventoryHostSpec,
    changed: Iterable[str],
) -> dict[str, Any]:
    payload: dict[str, Any] = {"virtualHost": remote_id}
    for name in sorted(changed):
        wire_name = _WIRE_INVENTORY_FIELDS.get(name)
        if wire_name is not None:
            payload[wire_name] = getattr(desired, name)
    return payload


# -- observed state --------------------------------------------------------------


def _memory_gb(node: VirtualHostNode, fallback: int) -> int:
    if node.memory_size_mb is None:
        return fallback
    if not is_whole_gb(node.memory_size_mb):
        log.warning(
            "Host %s reports %s MB, which is not a whole number of GB; using %s GB",
            node.id,
            node.memory_size_mb,
            mb_to_gb(node.memory_size_mb),
        )
    return mb_to_gb(node.memory_size_mb)


def _or(value: str, fallback: str) -> str:
    return value or fallback


def _materialize_standard_interface(interface: NetworkInterfaceNode) -> InterfaceSpec:
    if interface.ipv4_addresses:
        return InterfaceSpec(
            network_id=interface.network_id,
            auto_assign_ip=False,
            ip=strip_prefix(interface.ipv4_addresses[0].ip),
        )
    return InterfaceSpec(network_id=interface.network_id, auto_assign_ip=True)


def _materialize_static_interface(interface: NetworkInterfaceNode) -> StaticInterfaceSpec:
    return StaticInterfaceSpec(
        network_id=interface.network_id,
        ip_list=tuple(strip_prefix(address.ip) for address in interface.ipv4_addresses),
    )


def created_standard_state(
    node: VirtualHostNode, desired: VirtualHostSpec
) -> HostState[VirtualHostSpec]:
    """Merge the scalars returned by ``VirtualHostCreated`` over ``desired``."""

    attributes = replace(
        desired,
        hostname=_or(node.hostname, desired.hostname),
        cpu_count=node.cpu_count if node.cpu_count is not None else desired.cpu_count,
        cores_per_socket=(
            node.cores_per_socket
            if node.cores_per_socket is not None
            else desired.cores_per_socket
        ),
        memory_size_gb=_memory_gb(node, desired.memory_size_gb),
        tier_id=_or(node.tier_id, desired.tier_id),
        domain_id=_or(node.domain_id, desired.domain_id),
        template_id=_or(node.template_id, desired.template_id),
        project_id=_or(node.project_id, desired.project_id),
        customer_id=_or(node.customer_id, desired.customer_id),
        region=_or(node.region, desired.region),
    )
    return HostState(remote_id=node.id, uuid=node.uuid, status=node.state, attributes=attributes)


def created_immutable_state(
    node: VirtualHostNode, desired: ImmutableVirtualHostSpec
) -> HostState[ImmutableVirtualHostSpec]:
    attributes = replace(
        desired,
        hostname=_or(node.hostname, desired.hostname),
        cpu_count=node.cpu_count if node.cpu_count is not None else desired.cpu_count,
        cores_per_socket=(
            node.cores_per_socket
            if node.cores_per_socket is not None
            else desired.cores_per_socket
        ),
        memory_size_gb=_memory_gb(node, desired.memory_size_gb),
        tier_id=_or(node.tier_id, desired.tier_id),
        template_id=_or(node.template_id, desired.template_id),
        project_id=_or(node.project_id, desired.project_id),
        customer_id=_or(node.customer_id, desired.customer_id),
        region=_or(node.region, desired.region),
    )
    return HostState(remote_id=node.id, uuid=node.uuid, status=node.state, attributes=attributes)


def standard_state_from_node(
    node: VirtualHostNode, base: VirtualHostSpec | None
) -> HostState[VirtualHostSpec]:
    """Rebuild observed state from ``GetVm``.

    ``base`` supplies the local-only values and the interface declarations; it
    is ``None`` when importing a host that was never managed locally.
    """

    current_interfaces = base.interfaces if base is not None else ()
    attributes = VirtualHostSpec(
        region=node.region,
        customer_id=node.customer_id,
        project_id=node.project_id,
        hostname=node.hostname,
        domain_id=node.domain_id,
        cpu_count=node.cpu_count if node.cpu_count is not None else _base_int(base, "cpu_count"),
        cores_per_socket=(
            node.cores_per_socket
            if node.cores_per_socket is not None
            else _base_int(base, "cores_per_socket", 1)
        ),
        memory_size_gb=_memory_gb(node, _base_int(base, "memory_size_gb")),
        tier_id=node.tier_id,
        template_id=node.template_id,
        note=node.note or "",
        data_protection_policy=(
            node.data_protection_policy.id
            if node.data_protection_policy is not None
            else (base.data_protection_policy if base is not None else "")
        ),
        interfaces=reconcile_interfaces(
            current_interfaces, node.network_interfaces, _materialize_standard_interface
        ),
        allow_resize_restart=base.allow_resize_restart if base is not None else True,
    )
    return HostState(remote_id=node.id, uuid=node.uuid, status=node.state, attributes=attributes)


def immutable_state_from_node(
    node: VirtualHostNode, base: ImmutableVirtualHostSpec | None
) -> HostState[ImmutableVirtualHostSpec]:
    """Rebuild observed state from ``GetVm``, keeping create-only options from ``base``."""

    reported = {
        "region": node.region,
        "customer_id": node.customer_id,
        "project_id": node.project_id,
        "hostname": node.hostname,
        "template_id": node.template_id,
        "tier_id": node.tier_id,
        "cpu_count": (
            node.cpu_count if node.cpu_count is not None else _base_int(base, "cpu_count")
        ),
        "cores_per_socket": (
            node.cores_per_socket
            if node.cores_per_socket is not None
            else _base_int(base, "cores_per_socket", 1)
        ),
        "memory_size_gb": _memory_gb(node, _base_int(base, "memory_size_gb")),
        "note": node.note or "",
        "data_protection_policy": (
            node.data_protection_policy.id
            if node.data_protection_policy is not None
            else (base.data_protection_policy if base is not None else None)
        ),
    }
    if base is None:
        attributes = ImmutableVirtualHostSpec(
            ignition_config_data="",
            interfaces=reconcile_interfaces(
                (), node.network_interfaces, _materialize_static_interface
            ),
            **reported,
        )
    else:
        attributes = replace(
            base,
            interfaces=reconcile_interfaces(
                base.interfaces, node.network_interfaces, _materialize_static_interface
            ),
            **reported,
        )
    return HostState(remote_id=node.id, uuid=node.uuid, status=node.state, attributes=attributes)


def inventory_state_from_node(node: VirtualHostNode) -> HostState[InventoryHostSpec]:
    attributes = InventoryHostSpec(
        region=node.region,
        vcenter_id=node.vcenter_id,
        project_id=node.project_id,
        tier_id=node.tier_id,
        hostname=node.hostname,
        uuid=node.uuid,
        note=node.note or "",
        customer_id=node.customer_id or None,
    )
    return HostState(remote_id=node.id, uuid=node.uuid, status=node.state, attributes=attributes)


def _base_int(base: object | None, name: str, default: int = 0) -> int:
    if base is None:
        return default
    return int(getattr(base, name))


__all__ = [
    "created_immutable_state",
    "created_standard_state",
    "delete_input",
    "immutable_create_input",
    "immutable_state_from_node",
    "inventory_create_input",
    "inventory_state_from_node",
    "inventory_update_input",
    "resize_input",
    "standard_create_input",
    "standard_state_from_node",
    "tier_input",
]
