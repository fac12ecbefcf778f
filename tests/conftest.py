"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from schemasync.core.models import WarehouseIdentity


@pytest.fixture
def warehouse() -> WarehouseIdentity:
    """Sync target on a DuckDB destination."""
    return WarehouseIdentity(
        source_id="src-1",
        destination_id="dst-1",
        destination_type="DUCKDB",
        namespace="analytics",
    )


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield engine
    engine.dispose()


@pytest.fixture
def duckdb_path(tmp_path: Path) -> Path:
    """DuckDB database file with an `analytics.tracks` table.

    Also holds a `main.other` table that must not show up when the
    `analytics` namespace is introspected.
    """
    import duckdb

    path = tmp_path / "warehouse.duckdb"
    conn = duckdb.connect(str(path))
    conn.execute("CREATE SCHEMA analytics")
    conn.execute(
        "CREATE TABLE analytics.tracks (id VARCHAR, event VARCHAR, amount BIGINT)"
    )
    conn.execute("CREATE TABLE main.other (x INTEGER)")
    conn.close()
    return path


@pytest.fixture
def sqlite_file_engine(tmp_path: Path):
    """File-backed SQLite engine handing each thread its own connection."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'schemas.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    yield engine
    engine.dispose()
