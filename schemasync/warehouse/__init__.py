"""Warehouse managers used to introspect destinations.

Importing this package registers the built-in managers.
"""

from schemasync.warehouse.base import WarehouseManager
from schemasync.warehouse.duckdb import DuckDBManager
from schemasync.warehouse.registry import (
    get_manager,
    list_manager_types,
    register_manager,
    unregister_manager,
)

__all__ = [
    "WarehouseManager",
    "DuckDBManager",
    "get_manager",
    "list_manager_types",
    "register_manager",
    "unregister_manager",
]
