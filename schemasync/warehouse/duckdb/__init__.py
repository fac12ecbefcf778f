"""DuckDB warehouse manager."""

from .manager import DuckDBManager, create_duckdb_manager
from .type_mapper import DuckDBTypeMapper

__all__ = ["DuckDBManager", "DuckDBTypeMapper", "create_duckdb_manager"]
