from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.pool import StaticPool

from ocphosts.adapters.sqlalchemy import SqlAlchemyStateUnitOfWork, shutdown, startup
from tests.support.ocp_backend import FakeOcpBackend

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from ocphosts.adapters.ocp import OcpClient


@pytest.fixture
def ocp_backend() -> Iterator[FakeOcpBackend]:
    backend = FakeOcpBackend()
    yield backend
    backend.assert_drained()


@pytest.fixture
def ocp_client(ocp_backend: FakeOcpBackend) -> Iterator[OcpClient]:
    with ocp_backend.client() as client:
        yield client


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def state_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyStateUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyStateUnitOfWork:
        return SqlAlchemyStateUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
