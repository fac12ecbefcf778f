"""Data model for warehouse schema reconciliation.

Schemas are kept as plain nested dictionaries (``table -> column -> type``)
so they serialize to the same JSON shape that is persisted in the schema
cache and staging-file stores. Column types are plain strings: the core only
special-cases the members of :class:`ColumnType`, and warehouse managers are
free to report additional types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemasync.core.exceptions import DeserializationError
from schemasync.core.naming import to_provider_case

TableSchema = dict[str, str]
Schema = dict[str, TableSchema]


class ColumnType(str, Enum):
    """Column types understood by the merge, diff and coercion engines."""

    STRING = "string"
    TEXT = "text"
    INT = "int"
    BIGINT = "bigint"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"


STRING_TYPES = (ColumnType.STRING.value, ColumnType.TEXT.value)
INTEGER_TYPES = (ColumnType.INT.value, ColumnType.BIGINT.value)


class WarehouseIdentity(BaseModel):
    """Identifies one sync target: a source feeding a destination namespace."""

    model_config = ConfigDict(frozen=True)

    source_id: str = Field(description="Source identifier")
    destination_id: str = Field(description="Destination identifier")
    destination_type: str = Field(
        description="Destination type (e.g., 'BQ', 'SNOWFLAKE', 'DUCKDB')"
    )
    namespace: str = Field(description="Schema/dataset name inside the destination")


@dataclass
class StagingFile:
    """A staged batch of events awaiting load.

    When ``schema`` is set the merge engine uses it as is; otherwise the
    schema is read from the staging-file store by id.
    """

    id: int
    schema: Optional[Schema] = None


class SchemaDiff(BaseModel):
    """Additive change set between a baseline schema and an upload schema."""

    tables_to_create: list[str] = Field(default_factory=list)
    columns_to_add: dict[str, TableSchema] = Field(default_factory=dict)
    string_columns_to_widen: dict[str, list[str]] = Field(default_factory=dict)
    merged_schema: Schema = Field(default_factory=dict)
    has_changes: bool = False


class DiscardRecord(BaseModel):
    """A single value that could not be loaded into its destination column."""

    table_name: str
    column_name: str
    column_value: str
    row_id: Any
    received_at: Any
    uuid_ts: Optional[str] = None
    loaded_at: Optional[str] = None

    def to_columns(self, destination_type: str) -> dict[str, Any]:
        """Render the record keyed by destination-cased column names.

        Load-time columns are only present when they were set.
        """
        columns = {
            "column_name": self.column_name,
            "column_value": self.column_value,
            "received_at": self.received_at,
            "row_id": self.row_id,
            "table_name": self.table_name,
        }
        if self.uuid_ts is not None:
            columns["uuid_ts"] = self.uuid_ts
        if self.loaded_at is not None:
            columns["loaded_at"] = self.loaded_at
        return {to_provider_case(destination_type, k): v for k, v in columns.items()}


def copy_schema(schema: Schema) -> Schema:
    """Return a copy of ``schema`` that shares no column maps with it."""
    return {table: dict(columns) for table, columns in schema.items()}


def validate_schema(payload: Any, context: dict | None = None) -> Schema:
    """Check that a decoded payload has the ``table -> column -> type`` shape.

    Args:
        payload: Object decoded from a stored schema.
        context: Extra context attached to the error.

    Returns:
        The payload as a Schema (``None`` tables become empty maps).

    Raises:
        DeserializationError: If the payload is not a mapping of mappings of strings.
    """
    if not isinstance(payload, dict):
        raise DeserializationError(
            f"Schema payload must be an object, got {type(payload).__name__}",
            context=context,
        )

    schema: Schema = {}
    for table_name, columns in payload.items():
        if columns is None:
            schema[table_name] = {}
            continue
        if not isinstance(columns, dict):
            raise DeserializationError(
                f"Columns of table '{table_name}' must be an object",
                context=context,
            )
        for column_name, column_type in columns.items():
            if not isinstance(column_type, str):
                raise DeserializationError(
                    f"Type of column '{table_name}.{column_name}' must be a string",
                    context=context,
                )
        schema[table_name] = dict(columns)
    return schema
