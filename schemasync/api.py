"""Public Python API for schemasync package.

This module provides the main entry point for reconciling one sync target.
"""

from typing import Any, Optional, Sequence

from schemasync.core.models import StagingFile, WarehouseIdentity
from schemasync.core.reconcile import ReconciliationPlan, SchemaHandle
from schemasync.models.config import SchemaSyncConfig
from schemasync.store.base import SchemaCacheStore, StagingFileStore
from schemasync.warehouse import get_manager
from schemasync.warehouse.base import WarehouseManager


def reconcile_schema(
    warehouse: WarehouseIdentity,
    staging_files: Sequence[StagingFile],
    cache_store: SchemaCacheStore,
    staging_store: StagingFileStore,
    manager: Optional[WarehouseManager] = None,
    config: Optional[SchemaSyncConfig] = None,
    **manager_options: Any,
) -> ReconciliationPlan:
    """Compute the schema merge plan for one sync target.

    Args:
        warehouse: Sync target (source, destination, namespace).
        staging_files: Pending staging files, in processing order.
        cache_store: Store holding the last-known-good schema.
        staging_store: Store holding the staging-file schemas.
        manager: Warehouse manager; looked up by destination type when omitted.
        config: Settings for this cycle (defaults to SchemaSyncConfig.from_env()).
        **manager_options: Options for the looked-up manager (e.g. database path).

    Returns:
        ReconciliationPlan with the upload schema and the diff to apply.

    Raises:
        ConfigurationError: If no manager is registered for the destination type
        PersistenceError: If the cache or staging files cannot be read
        IntrospectionError: If the warehouse schema cannot be fetched

    Example:
        >>> from schemasync import reconcile_schema, WarehouseIdentity
        >>> from schemasync.store import InMemorySchemaCacheStore, InMemoryStagingFileStore
        >>> plan = reconcile_schema(
        ...     WarehouseIdentity(source_id="src", destination_id="dst",
        ...                       destination_type="DUCKDB", namespace="main"),
        ...     staging_files=[],
        ...     cache_store=InMemorySchemaCacheStore(),
        ...     staging_store=InMemoryStagingFileStore(),
        ...     database=":memory:",
        ... )
        >>> plan.diff.tables_to_create
        ['rudder_discards']
    """
    if manager is None:
        manager = get_manager(warehouse.destination_type, **manager_options)
    handle = SchemaHandle(
        warehouse,
        staging_files,
        cache_store,
        staging_store,
        manager,
        config or SchemaSyncConfig.from_env(),
    )
    return handle.reconcile()
