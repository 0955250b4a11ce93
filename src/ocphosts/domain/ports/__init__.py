"""Ports the domain services depend on."""

from __future__ import annotations

from .executor import RequestExecutor
from .reconciler import HostReconciler
from .state import ResourceStateRepository, StateRepositories, StateUnitOfWork, UnitOfWork

__all__ = [
    "HostReconciler",
    "RequestExecutor",
    "ResourceStateRepository",
    "StateRepositories",
    "StateUnitOfWork",
    "UnitOfWork",
]
