"""DuckDB warehouse manager."""

import logging

try:
    import duckdb
except ImportError:
    duckdb = None  # type: ignore

from schemasync.core.exceptions import IntrospectionError
from schemasync.core.models import Schema, WarehouseIdentity
from schemasync.warehouse.registry import register_manager

from .type_mapper import DuckDBTypeMapper

logger = logging.getLogger(__name__)

SCHEMA_QUERY = """
SELECT table_name, column_name, data_type
FROM information_schema.columns
WHERE table_schema = ?
ORDER BY table_name, ordinal_position
"""


class DuckDBManager:
    """Introspects namespaces of a file-based or in-memory DuckDB database."""

    def __init__(self, database: str = ":memory:", read_only: bool = False):
        """Initialize DuckDBManager.

        Args:
            database: Path to the DuckDB database file, or ":memory:"
            read_only: Open the database read-only

        Raises:
            ImportError: If duckdb is not installed (install with: pip install schemasync[duckdb])
        """
        if duckdb is None:
            raise ImportError(
                "DuckDBManager requires duckdb. "
                "Install it with: pip install schemasync[duckdb]"
            )
        self._database = database
        self._read_only = read_only
        self._type_mapper = DuckDBTypeMapper()

    def fetch_schema(self, warehouse: WarehouseIdentity) -> Schema:
        """Read column types of every table in the warehouse namespace."""
        conn = None
        try:
            conn = duckdb.connect(self._database, read_only=self._read_only)
            rows = conn.execute(SCHEMA_QUERY, [warehouse.namespace]).fetchall()
        except duckdb.Error as e:
            raise IntrospectionError(
                f"Failed to fetch schema from DuckDB: {e}",
                context={"database": self._database, "namespace": warehouse.namespace},
            ) from e
        finally:
            if conn is not None:
                conn.close()

        schema: Schema = {}
        for table_name, column_name, data_type in rows:
            schema.setdefault(table_name, {})[column_name] = (
                self._type_mapper.connector_type_to_column_type(data_type)
            )
        logger.debug(
            f"Fetched {len(schema)} tables from DuckDB namespace {warehouse.namespace}"
        )
        return schema


@register_manager("DUCKDB")
def create_duckdb_manager(**options) -> DuckDBManager:
    """Factory function for creating DuckDBManager instances."""
    return DuckDBManager(**options)
