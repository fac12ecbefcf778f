"""Relational schema cache and staging-file stores using SQLAlchemy."""

import datetime as dt
import logging
from typing import Union

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    create_engine,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from schemasync.core.exceptions import PersistenceError
from schemasync.core.models import Schema, WarehouseIdentity
from schemasync.store.base import (
    WAREHOUSE_SCHEMAS_TABLE,
    WAREHOUSE_STAGING_FILES_TABLE,
    KeyedLocks,
    decode_schema,
    encode_schema,
    upsert_key,
)

logger = logging.getLogger(__name__)


def _redact_url(url: str) -> str:
    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        return "<invalid url>"


def _get_engine(engine: Union[Engine, str]) -> Engine:
    if isinstance(engine, str):
        url = _redact_url(engine)
        try:
            return create_engine(engine, pool_pre_ping=True)
        except SQLAlchemyError as e:
            # the driver message may echo the raw url
            raise PersistenceError(
                f"Failed to create database engine for {url}: {type(e).__name__}",
                context={"url": url},
            ) from e
    return engine


# Dialects with a native INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

UPSERT_KEY_COLUMNS = ("source_id", "destination_id", "namespace")


class SQLSchemaCacheStore:
    """Schema cache stored in a relational table.

    One row per (source, destination, namespace), enforced by a unique
    constraint. Reads pick the newest row for a destination namespace
    regardless of source. On PostgreSQL and SQLite writes are a single
    ``INSERT ... ON CONFLICT DO UPDATE``; other dialects check for an
    existing row and insert or update it inside one transaction, under a
    per-target lock.
    """

    def __init__(
        self,
        engine: Union[Engine, str],
        table_name: str = WAREHOUSE_SCHEMAS_TABLE,
    ):
        """Initialize the store.

        Args:
            engine: SQLAlchemy engine or database URL
            table_name: Name of the cached-schema table
        """
        self._engine = _get_engine(engine)
        self._metadata = MetaData()
        self.table = Table(
            table_name,
            self._metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("source_id", String(64), nullable=False),
            Column("namespace", String(128), nullable=False),
            Column("destination_id", String(64), nullable=False),
            Column("destination_type", String(64), nullable=False),
            Column("schema", Text, nullable=False),
            Column("created_at", DateTime(timezone=True), nullable=False),
            UniqueConstraint(*UPSERT_KEY_COLUMNS, name=f"uq_{table_name}_target"),
        )
        self._locks = KeyedLocks()

    def create_table(self) -> None:
        """Create the cached-schema table if it does not exist."""
        try:
            self._metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to create table {self.table.name}: {e}",
                context={"table": self.table.name},
            ) from e

    def get(self, destination_id: str, namespace: str) -> Schema:
        t = self.table
        context = {"destination_id": destination_id, "namespace": namespace}
        stmt = (
            select(t.c.schema)
            .where(t.c.destination_id == destination_id, t.c.namespace == namespace)
            .order_by(t.c.id.desc())
            .limit(1)
        )
        try:
            with self._engine.connect() as conn:
                raw = conn.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to read cached schema: {e}", context=context
            ) from e

        if raw is None:
            logger.info(
                f"No cached schema found for {destination_id} with namespace: {namespace}"
            )
            return {}
        return decode_schema(raw, context=context)

    def upsert(self, warehouse: WarehouseIdentity, schema: Schema) -> None:
        source_id, destination_id, namespace = upsert_key(warehouse)
        context = {
            "source_id": source_id,
            "destination_id": destination_id,
            "namespace": namespace,
        }
        payload = encode_schema(schema, context=context)
        row = {
            "source_id": source_id,
            "namespace": namespace,
            "destination_id": destination_id,
            "destination_type": warehouse.destination_type,
            "schema": payload,
            "created_at": dt.datetime.now(dt.timezone.utc),
        }

        dialect_insert = _UPSERT_INSERTS.get(self._engine.dialect.name)
        try:
            if dialect_insert is not None:
                self._upsert_on_conflict(dialect_insert, row)
            else:
                self._upsert_locked(row)
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to write cached schema: {e}", context=context
            ) from e

    def _upsert_on_conflict(self, dialect_insert, row: dict) -> None:
        stmt = dialect_insert(self.table).values(**row)
        # id and created_at of an existing row are kept
        stmt = stmt.on_conflict_do_update(
            index_elements=list(UPSERT_KEY_COLUMNS),
            set_={"schema": stmt.excluded["schema"]},
        )
        with self._engine.begin() as conn:
            conn.execute(stmt)

    def _upsert_locked(self, row: dict) -> None:
        t = self.table
        key = tuple(row[name] for name in UPSERT_KEY_COLUMNS)
        scope = (
            (t.c.source_id == row["source_id"])
            & (t.c.destination_id == row["destination_id"])
            & (t.c.namespace == row["namespace"])
        )
        with self._locks.hold(key):
            with self._engine.begin() as conn:
                count = conn.execute(
                    select(func.count()).select_from(t).where(scope)
                ).scalar_one()
                if count == 0:
                    conn.execute(insert(t).values(**row))
                else:
                    conn.execute(update(t).where(scope).values(schema=row["schema"]))


class SQLStagingFileStore:
    """Staging-file schemas stored in a relational table keyed by integer id."""

    def __init__(
        self,
        engine: Union[Engine, str],
        table_name: str = WAREHOUSE_STAGING_FILES_TABLE,
    ):
        self._engine = _get_engine(engine)
        self._metadata = MetaData()
        self.table = Table(
            table_name,
            self._metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("schema", Text, nullable=False),
            Column("created_at", DateTime(timezone=True), nullable=False),
        )

    def create_table(self) -> None:
        """Create the staging-file table if it does not exist."""
        try:
            self._metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to create table {self.table.name}: {e}",
                context={"table": self.table.name},
            ) from e

    def add(self, schema: Schema) -> int:
        """Store a staging file's schema and return its id."""
        payload = encode_schema(schema)
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    insert(self.table).values(
                        schema=payload, created_at=dt.datetime.now(dt.timezone.utc)
                    )
                )
                return int(result.inserted_primary_key[0])
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to write staging file: {e}") from e

    def fetch_schemas(self, ids: list[int]) -> list[Schema]:
        if not ids:
            return []
        t = self.table
        stmt = select(t.c.id, t.c.schema).where(t.c.id.in_(ids))
        try:
            with self._engine.connect() as conn:
                found = {row.id: row.schema for row in conn.execute(stmt)}
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to read staging file schemas: {e}",
                context={"ids": ids},
            ) from e

        missing = [i for i in ids if i not in found]
        if missing:
            raise PersistenceError(
                "Staging files not found", context={"missing_ids": missing}
            )
        return [decode_schema(found[i], context={"staging_file_id": i}) for i in ids]
