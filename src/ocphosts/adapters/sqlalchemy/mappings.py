"""SQLAlchemy table metadata for stored host state."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Column, DateTime, Enum, MetaData, String, Table

from ocphosts.domain.model import HostKind

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "pk": "pk_%(table_name)s",
    }
)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


resource_state_table = Table(
    "resource_state",
    metadata,
    Column("name", String, primary_key=True),
    Column(
        "kind",
        Enum(HostKind, native_enum=False, values_callable=lambda kinds: [k.value for k in kinds]),
        nullable=False,
    ),
    Column("remote_id", String, nullable=False, default=""),
    Column("uuid", String, nullable=False, default=""),
    Column("status", String, nullable=False, default=""),
    Column("attributes", JSON, nullable=True),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    ),
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine)
