"""Store protocols and shared helpers for schema persistence."""

import json
import threading
from contextlib import contextmanager
from typing import Any, Hashable, Iterator, Protocol

from schemasync.core.exceptions import DeserializationError, PersistenceError
from schemasync.core.models import Schema, WarehouseIdentity, validate_schema

WAREHOUSE_SCHEMAS_TABLE = "wh_schemas"
WAREHOUSE_STAGING_FILES_TABLE = "wh_staging_files"


class SchemaCacheStore(Protocol):
    """Protocol for the last-known-good schema per sync target."""

    def get(self, destination_id: str, namespace: str) -> Schema:
        """Load the most recently written schema for a destination namespace.

        Lookup is scoped by destination and namespace only, not by source.

        Args:
            destination_id: Destination identifier
            namespace: Namespace inside the destination

        Returns:
            The cached schema, or an empty schema if none was written yet

        Raises:
            PersistenceError: If the store cannot be read
            DeserializationError: If the stored payload is malformed
        """
        ...

    def upsert(self, warehouse: WarehouseIdentity, schema: Schema) -> None:
        """Insert or update the cached schema for (source, destination, namespace).

        Args:
            warehouse: Sync target the schema belongs to
            schema: Schema to store

        Raises:
            PersistenceError: If the store cannot be written
        """
        ...


class StagingFileStore(Protocol):
    """Protocol for reading per-staging-file schemas."""

    def fetch_schemas(self, ids: list[int]) -> list[Schema]:
        """Load the schemas of the given staging files.

        Args:
            ids: Staging file ids

        Returns:
            One schema per id, in the order of ``ids``

        Raises:
            PersistenceError: If the store cannot be read or an id has no row
            DeserializationError: If a stored payload is malformed
        """
        ...


class KeyedLocks:
    """Registry of mutexes, one per key.

    Serializes check-then-write sequences for the same sync target while
    letting different targets proceed concurrently. A key's lock is dropped
    once no thread holds or waits for it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # key -> [lock, number of holders and waiters]
        self._locks: dict[Hashable, list] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]


def upsert_key(warehouse: WarehouseIdentity) -> tuple[str, str, str]:
    """Key under which a cached schema is written."""
    return (warehouse.source_id, warehouse.destination_id, warehouse.namespace)


def encode_schema(schema: Schema, context: dict[str, Any] | None = None) -> str:
    """Serialize a schema to its stored JSON form.

    Raises:
        PersistenceError: If the schema is not JSON serializable
    """
    try:
        return json.dumps(schema, sort_keys=True)
    except (TypeError, ValueError) as e:
        raise PersistenceError(
            f"Failed to serialize schema: {e}", context=context
        ) from e


def decode_schema(raw: str | bytes, context: dict[str, Any] | None = None) -> Schema:
    """Parse a stored JSON schema payload.

    Raises:
        DeserializationError: If the payload is not valid JSON or has the wrong shape
    """
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        raise DeserializationError(
            f"Failed to parse stored schema: {e}", context=context
        ) from e
    return validate_schema(payload, context=context)
