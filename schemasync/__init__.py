"""schemasync - Warehouse schema reconciliation.

Consolidates the schemas of staged event batches, diffs them against a
warehouse namespace, and decides per value when a row has to be discarded.
"""

__version__ = "0.1.0"

# Public API
from schemasync.api import reconcile_schema

# Exceptions
from schemasync.core.exceptions import (
    ConfigurationError,
    DeserializationError,
    IntrospectionError,
    PersistenceError,
    SchemaSyncError,
)

# Core classes
from schemasync.core.models import (
    ColumnType,
    DiscardRecord,
    SchemaDiff,
    StagingFile,
    WarehouseIdentity,
)
from schemasync.core.reconcile import ReconciliationPlan, SchemaHandle

# Configuration
from schemasync.models.config import IdentityResolutionConfig, SchemaSyncConfig

__all__ = [
    # Version
    "__version__",
    # Public API
    "reconcile_schema",
    # Core classes
    "ColumnType",
    "WarehouseIdentity",
    "StagingFile",
    "SchemaDiff",
    "DiscardRecord",
    "SchemaHandle",
    "ReconciliationPlan",
    "SchemaSyncConfig",
    "IdentityResolutionConfig",
    # Exceptions
    "SchemaSyncError",
    "PersistenceError",
    "DeserializationError",
    "IntrospectionError",
    "ConfigurationError",
]
