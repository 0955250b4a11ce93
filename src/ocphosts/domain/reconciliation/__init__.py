"""Reconciliation rules shared by the host reconcilers."""

from __future__ import annotations

from .changes import (
    SIZING_FIELDS,
    TIER_FIELDS,
    ChangeCategory,
    ChangeSet,
    changed_fields,
    compute_change_set,
    guard_change_set,
    requires_replacement,
)
from .interfaces import reconcile_interfaces, strip_prefix

__all__ = [
    "SIZING_FIELDS",
    "TIER_FIELDS",
    "ChangeCategory",
    "ChangeSet",
    "changed_fields",
    "compute_change_set",
    "guard_change_set",
    "reconcile_interfaces",
    "requires_replacement",
    "strip_prefix",
]
