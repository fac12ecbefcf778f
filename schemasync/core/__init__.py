"""Core module for schemasync package."""

from schemasync.core.coercion import (
    build_discard_record,
    handle_discard_types,
    handle_schema_change,
)
from schemasync.core.diff import compare_schema, get_schema_diff
from schemasync.core.discards import DiscardSink, InMemoryDiscardSink
from schemasync.core.exceptions import (
    ConfigurationError,
    DeserializationError,
    IntrospectionError,
    PersistenceError,
    SchemaSyncError,
)
from schemasync.core.merge import consolidate_staging_files_schema, merge_schema
from schemasync.core.models import (
    ColumnType,
    DiscardRecord,
    Schema,
    SchemaDiff,
    StagingFile,
    TableSchema,
    WarehouseIdentity,
    copy_schema,
)
from schemasync.core.reconcile import ReconciliationPlan, SchemaHandle
from schemasync.core.synthetic import inject_synthetic_tables

__all__ = [
    "ColumnType",
    "Schema",
    "TableSchema",
    "WarehouseIdentity",
    "StagingFile",
    "SchemaDiff",
    "DiscardRecord",
    "copy_schema",
    "SchemaSyncError",
    "PersistenceError",
    "DeserializationError",
    "IntrospectionError",
    "ConfigurationError",
    "merge_schema",
    "consolidate_staging_files_schema",
    "inject_synthetic_tables",
    "compare_schema",
    "get_schema_diff",
    "handle_schema_change",
    "build_discard_record",
    "handle_discard_types",
    "DiscardSink",
    "InMemoryDiscardSink",
    "SchemaHandle",
    "ReconciliationPlan",
]
