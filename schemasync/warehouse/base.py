"""Warehouse manager protocol."""

from typing import Protocol

from schemasync.core.models import Schema, WarehouseIdentity


class WarehouseManager(Protocol):
    """Protocol for destination-specific warehouse access.

    Managers own connections to a concrete destination. Schema reconciliation
    only needs introspection; DDL execution lives with the loader.
    """

    def fetch_schema(self, warehouse: WarehouseIdentity) -> Schema:
        """Introspect the live schema of the warehouse namespace.

        Args:
            warehouse: Sync target whose namespace is introspected

        Returns:
            Schema of the namespace (empty if the namespace has no tables)

        Raises:
            IntrospectionError: If the destination cannot be queried
        """
        ...
