from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from sqlnode.config import ConnectionConfig

from .fakes import FakePool


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'sqlnode.db'}"


@pytest.fixture
def sqlite_engine(sqlite_url: str) -> Iterator[Engine]:
    """
    File-backed SQLite database seeded with a ``product`` table.
    """
    eng = create_engine(sqlite_url)
    with eng.begin() as conn:
        conn.exec_driver_sql(
            """
            CREATE TABLE product (
                id INTEGER PRIMARY KEY,
                name VARCHAR(255) NULL,
                price NUMERIC NULL
            )
            """
        )
    yield eng
    eng.dispose()


@pytest.fixture
def sqlite_config(sqlite_url: str, sqlite_engine: Engine) -> ConnectionConfig:
    return ConnectionConfig(url=sqlite_url)
