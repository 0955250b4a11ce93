"""Domain model for managed virtual hosts."""

from __future__ import annotations

from .hosts import (
    SPEC_TYPE_BY_KIND,
    HostKind,
    HostSpec,
    ImmutableVirtualHostSpec,
    InterfaceSpec,
    InventoryHostSpec,
    LocalDisk,
    StaticInterfaceSpec,
    VirtualHostSpec,
)
from .state import HostState, StoredResource
from .units import MB_PER_GB, gb_to_mb, mb_to_gb

__all__ = [
    "MB_PER_GB",
    "SPEC_TYPE_BY_KIND",
    "HostKind",
    "HostSpec",
    "HostState",
    "ImmutableVirtualHostSpec",
    "InterfaceSpec",
    "InventoryHostSpec",
    "LocalDisk",
    "StaticInterfaceSpec",
    "StoredResource",
    "VirtualHostSpec",
    "gb_to_mb",
    "mb_to_gb",
]
