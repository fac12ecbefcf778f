"""Schema reconciliation for one (source, destination, namespace) sync cycle.

A cycle runs:
1. Load the locally cached schema
2. Fetch the live schema from the warehouse; it becomes the diff baseline
3. Consolidate all staging-file schemas, using the cached schema for type
   precedence, and add the bookkeeping tables (the upload schema)
4. Diff the baseline against the upload schema
5. After the caller applied the diff, persist the merged schema

Any failure aborts the cycle before the cache is written.
"""

import logging
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from schemasync.core.diff import compare_schema, get_schema_diff
from schemasync.core.exceptions import IntrospectionError, SchemaSyncError
from schemasync.core.logging import warehouse_context
from schemasync.core.merge import consolidate_staging_files_schema
from schemasync.core.models import Schema, SchemaDiff, StagingFile, WarehouseIdentity
from schemasync.core.synthetic import inject_synthetic_tables
from schemasync.models.config import SchemaSyncConfig
from schemasync.store.base import SchemaCacheStore, StagingFileStore
from schemasync.warehouse.base import WarehouseManager

logger = logging.getLogger(__name__)


class ReconciliationPlan(BaseModel):
    """Outcome of reconciling one sync target."""

    warehouse: WarehouseIdentity
    local_schema: Schema = Field(default_factory=dict)
    schema_in_warehouse: Schema = Field(default_factory=dict)
    upload_schema: Schema = Field(default_factory=dict)
    diff: SchemaDiff = Field(default_factory=SchemaDiff)
    local_schema_stale: bool = Field(
        default=False,
        description="The cached schema differed from the live warehouse schema",
    )

    @property
    def needs_commit(self) -> bool:
        return self.diff.has_changes or self.local_schema_stale


class SchemaHandle:
    """Reconciles staged schemas against one warehouse namespace."""

    def __init__(
        self,
        warehouse: WarehouseIdentity,
        staging_files: Sequence[StagingFile],
        cache_store: SchemaCacheStore,
        staging_store: StagingFileStore,
        manager: WarehouseManager,
        config: Optional[SchemaSyncConfig] = None,
    ):
        """Initialize SchemaHandle.

        Args:
            warehouse: Sync target being reconciled.
            staging_files: Pending staging files, in processing order.
            cache_store: Store holding the last-known-good schema.
            staging_store: Store holding the staging-file schemas.
            manager: Manager able to introspect the destination.
            config: Settings for this cycle (defaults to SchemaSyncConfig()).
        """
        self.warehouse = warehouse
        self.staging_files = list(staging_files)
        self.cache_store = cache_store
        self.staging_store = staging_store
        self.manager = manager
        self.config = config or SchemaSyncConfig()
        self._log_extra = warehouse_context(warehouse)

    def get_local_schema(self) -> Schema:
        """Load the cached schema for the destination namespace."""
        logger.info("Fetching cached schema", extra=self._log_extra)
        return self.cache_store.get(
            self.warehouse.destination_id, self.warehouse.namespace
        )

    def update_local_schema(self, schema: Schema) -> None:
        """Write ``schema`` to the cache for this sync target."""
        self.cache_store.upsert(self.warehouse, schema)
        logger.info(
            f"Updated cached schema with {len(schema)} tables", extra=self._log_extra
        )

    def fetch_schema_from_warehouse(self) -> Schema:
        """Introspect the live warehouse schema.

        Raises:
            IntrospectionError: If the manager fails.
        """
        try:
            return self.manager.fetch_schema(self.warehouse)
        except IntrospectionError:
            logger.error("Failed fetching schema from warehouse", extra=self._log_extra)
            raise
        except Exception as e:
            logger.error(
                f"Failed fetching schema from warehouse: {e}", extra=self._log_extra
            )
            raise IntrospectionError(
                f"Failed fetching schema from warehouse: {e}",
                context=warehouse_context(self.warehouse),
            ) from e

    def sync_remote_schema(self, local_schema: Schema) -> tuple[Schema, bool]:
        """Build the diff baseline from the live schema and the cache.

        The live schema is authoritative. When it differs from the cache the
        cache is reported as stale so the next commit refreshes it.

        Returns:
            Tuple of (current schema, whether the cache is stale).
        """
        schema_in_warehouse = self.fetch_schema_from_warehouse()
        stale = not compare_schema(local_schema, schema_in_warehouse)
        if stale:
            logger.warning(
                "Cached schema differs from warehouse schema, using warehouse schema",
                extra=self._log_extra,
            )
        return schema_in_warehouse, stale

    def consolidate_staging_files_schema(self, local_schema: Schema) -> Schema:
        """Merge staging-file schemas and add the bookkeeping tables."""
        consolidated = consolidate_staging_files_schema(
            local_schema,
            self.staging_files,
            self.staging_store,
            page_size=self.config.staging_files_page_size,
        )
        return inject_synthetic_tables(
            consolidated,
            self.warehouse.destination_type,
            self.config.identity_resolution,
        )

    def reconcile(self) -> ReconciliationPlan:
        """Compute the merge plan for this sync cycle.

        Nothing is written to the cache; call :meth:`commit` once the diff
        was applied to the warehouse.

        Raises:
            PersistenceError: If the cache or staging files cannot be read.
            DeserializationError: If a stored schema is malformed.
            IntrospectionError: If the warehouse schema cannot be fetched.
        """
        logger.info(
            f"Reconciling schema for {len(self.staging_files)} staging files",
            extra=self._log_extra,
        )
        try:
            local_schema = self.get_local_schema()
            schema_in_warehouse, stale = self.sync_remote_schema(local_schema)
            upload_schema = self.consolidate_staging_files_schema(local_schema)
            diff = get_schema_diff(schema_in_warehouse, upload_schema)
        except SchemaSyncError as e:
            logger.error(f"Reconciliation failed: {e}", extra=self._log_extra)
            raise

        logger.info(
            f"Schema diff: {len(diff.tables_to_create)} new tables, "
            f"{sum(len(c) for c in diff.columns_to_add.values())} new columns, "
            f"{sum(len(c) for c in diff.string_columns_to_widen.values())} widened columns",
            extra=self._log_extra,
        )
        return ReconciliationPlan(
            warehouse=self.warehouse,
            local_schema=local_schema,
            schema_in_warehouse=schema_in_warehouse,
            upload_schema=upload_schema,
            diff=diff,
            local_schema_stale=stale,
        )

    def commit(self, plan: ReconciliationPlan) -> bool:
        """Persist the merged schema of an applied plan.

        Returns:
            True if the cache was written.
        """
        if not plan.needs_commit:
            logger.debug("Cached schema up to date, skipping write", extra=self._log_extra)
            return False
        self.update_local_schema(plan.diff.merged_schema)
        return True
