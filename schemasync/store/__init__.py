"""Schema cache and staging-file stores."""

from schemasync.core.exceptions import ConfigurationError
from schemasync.store.base import (
    WAREHOUSE_SCHEMAS_TABLE,
    WAREHOUSE_STAGING_FILES_TABLE,
    KeyedLocks,
    SchemaCacheStore,
    StagingFileStore,
    decode_schema,
    encode_schema,
)
from schemasync.store.memory import InMemorySchemaCacheStore, InMemoryStagingFileStore
from schemasync.store.sql import SQLSchemaCacheStore, SQLStagingFileStore


def create_schema_store(config: str, create_table: bool = False) -> SchemaCacheStore:
    """Create a schema cache store from a configuration string.

    Supported formats:
    - "memory" -> InMemorySchemaCacheStore
    - any SQLAlchemy URL (e.g. "postgresql+psycopg2://user@host/db",
      "sqlite:///schemas.db") -> SQLSchemaCacheStore

    Args:
        config: Store configuration string
        create_table: Create the cached-schema table for SQL stores

    Returns:
        SchemaCacheStore instance

    Raises:
        ConfigurationError: If config format is invalid
    """
    if config == "memory":
        return InMemorySchemaCacheStore()

    if "://" in config:
        store = SQLSchemaCacheStore(config)
        if create_table:
            store.create_table()
        return store

    raise ConfigurationError(
        f"Invalid schema store config: {config}. "
        f"Supported formats: 'memory', '<dialect>://...'",
        context={"config": config},
    )


__all__ = [
    "WAREHOUSE_SCHEMAS_TABLE",
    "WAREHOUSE_STAGING_FILES_TABLE",
    "KeyedLocks",
    "SchemaCacheStore",
    "StagingFileStore",
    "InMemorySchemaCacheStore",
    "InMemoryStagingFileStore",
    "SQLSchemaCacheStore",
    "SQLStagingFileStore",
    "create_schema_store",
    "decode_schema",
    "encode_schema",
]
