"""Public interface for the OCP GraphQL adapter."""

from __future__ import annotations

from .client import OcpClient
from .inventory import InventoryHostReconciler
from .lookups import OcpLookups
from .reconcilers import ImmutableVirtualHostReconciler, VirtualHostReconciler

__all__ = [
    "ImmutableVirtualHostReconciler",
    "InventoryHostReconciler",
    "OcpClient",
    "OcpLookups",
    "VirtualHostReconciler",
]
