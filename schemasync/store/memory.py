"""In-memory schema cache and staging-file stores."""

from __future__ import annotations

import datetime as dt
import itertools
import threading
from dataclasses import dataclass, field
from typing import Dict, List

from schemasync.core.exceptions import PersistenceError
from schemasync.core.models import Schema, WarehouseIdentity, copy_schema
from schemasync.store.base import KeyedLocks, upsert_key


@dataclass
class CachedSchemaRow:
    id: int
    source_id: str
    namespace: str
    destination_id: str
    destination_type: str
    schema: Schema
    created_at: dt.datetime = field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc)
    )


class InMemorySchemaCacheStore:
    """Schema cache kept in process memory, one row per write."""

    def __init__(self) -> None:
        self.rows: List[CachedSchemaRow] = []
        self._ids = itertools.count(1)
        self._locks = KeyedLocks()

    def get(self, destination_id: str, namespace: str) -> Schema:
        matches = [
            row
            for row in self.rows
            if row.destination_id == destination_id and row.namespace == namespace
        ]
        if not matches:
            return {}
        latest = max(matches, key=lambda row: row.id)
        return copy_schema(latest.schema)

    def upsert(self, warehouse: WarehouseIdentity, schema: Schema) -> None:
        key = upsert_key(warehouse)
        with self._locks.hold(key):
            for row in self.rows:
                if (row.source_id, row.destination_id, row.namespace) == key:
                    row.schema = copy_schema(schema)
                    return
            self.rows.append(
                CachedSchemaRow(
                    id=next(self._ids),
                    source_id=warehouse.source_id,
                    namespace=warehouse.namespace,
                    destination_id=warehouse.destination_id,
                    destination_type=warehouse.destination_type,
                    schema=copy_schema(schema),
                )
            )


class InMemoryStagingFileStore:
    """Staging-file schemas kept in process memory."""

    def __init__(self) -> None:
        self._schemas: Dict[int, Schema] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add(self, schema: Schema) -> int:
        with self._lock:
            staging_file_id = next(self._ids)
            self._schemas[staging_file_id] = copy_schema(schema)
        return staging_file_id

    def fetch_schemas(self, ids: list[int]) -> list[Schema]:
        missing = [i for i in ids if i not in self._schemas]
        if missing:
            raise PersistenceError(
                "Staging files not found",
                context={"missing_ids": missing},
            )
        return [copy_schema(self._schemas[i]) for i in ids]
