"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from functools import cache
from typing import TYPE_CHECKING, Any, cast

from pydantic import TypeAdapter
from sqlalchemy import delete, insert, select, update

from ocphosts.domain.model import SPEC_TYPE_BY_KIND, HostKind, HostState, StoredResource

from .mappings import resource_state_table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Row
    from sqlalchemy.orm import Session


@cache
def _attributes_adapter(kind: HostKind) -> TypeAdapter[Any]:
    return TypeAdapter(SPEC_TYPE_BY_KIND[kind])


def _dump_attributes(kind: HostKind, attributes: object | None) -> dict[str, Any] | None:
    if attributes is None:
        return None
    return _attributes_adapter(kind).dump_python(attributes, mode="json")


def _load_attributes(kind: HostKind, payload: dict[str, Any] | None) -> object | None:
    if payload is None:
        return None
    return _attributes_adapter(kind).validate_python(payload)


class SqlAlchemyResourceStateRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, name: str) -> StoredResource | None:
        stmt = select(resource_state_table).where(resource_state_table.c.name == name)
        row = self.session.execute(stmt).one_or_none()
        return self._to_resource(row) if row is not None else None

    def list(self) -> Sequence[StoredResource]:
        stmt = select(resource_state_table).order_by(resource_state_table.c.name)
        return [self._to_resource(row) for row in self.session.execute(stmt)]

    def save(self, resource: StoredResource) -> None:
        state = resource.state
        values = {
            "kind": resource.kind,
            "remote_id": state.remote_id,
            "uuid": state.uuid,
            "status": state.status,
            "attributes": _dump_attributes(resource.kind, state.attributes),
        }
        key = resource_state_table.c.name == resource.name
        exists = self.session.execute(
            select(resource_state_table.c.name).where(key)
        ).scalar_one_or_none()
        if exists is None:
            stmt = insert(resource_state_table).values(name=resource.name, **values)
        else:
            stmt = update(resource_state_table).where(key).values(**values)
        self.session.execute(stmt)

    def remove(self, name: str) -> None:
        stmt = delete(resource_state_table).where(resource_state_table.c.name == name)
        self.session.execute(stmt)

    @staticmethod
    def _to_resource(row: Row[Any]) -> StoredResource:
        kind = HostKind(row.kind)
        return StoredResource(
            name=row.name,
            kind=kind,
            state=HostState(
                remote_id=row.remote_id,
                uuid=row.uuid,
                status=row.status,
                attributes=_load_attributes(kind, row.attributes),
            ),
        )


if TYPE_CHECKING:
    from ocphosts.domain.ports import ResourceStateRepository

    _session_stub = cast("Session", object())
    _repository_check: ResourceStateRepository = SqlAlchemyResourceStateRepository(_session_stub)
