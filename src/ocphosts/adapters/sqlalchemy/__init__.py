"""SQLAlchemy adapter package for the ocphosts state store."""

from __future__ import annotations

from .mappings import create_all_tables, metadata, resource_state_table
from .repositories import SqlAlchemyResourceStateRepository
from .unit_of_work import (
    SqlAlchemyStateUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyResourceStateRepository",
    "SqlAlchemyStateUnitOfWork",
    "StartupError",
    "create_all_tables",
    "is_started",
    "metadata",
    "resource_state_table",
    "shutdown",
    "startup",
]
