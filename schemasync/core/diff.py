"""Additive diff between a warehouse schema and an upload schema."""

import logging

from schemasync.core.models import ColumnType, Schema, SchemaDiff, copy_schema

logger = logging.getLogger(__name__)


def compare_schema(first: Schema, second: Schema) -> bool:
    """Return True if both schemas have the same tables, columns and types."""
    return first == second


def get_schema_diff(current_schema: Schema, upload_schema: Schema) -> SchemaDiff:
    """Compute the changes needed for ``current_schema`` to accept ``upload_schema``.

    Only additive changes are produced:
    - tables missing from the current schema are created with all columns
    - columns missing from an existing table are added
    - ``string`` columns that the upload schema has as ``text`` are widened

    Any other type mismatch is left out of the diff.

    Args:
        current_schema: Schema the warehouse has now.
        upload_schema: Schema the pending upload needs.

    Returns:
        SchemaDiff whose merged_schema is current_schema with the changes
        applied. Neither input is modified.
    """
    diff = SchemaDiff(merged_schema=copy_schema(current_schema))

    for table_name, upload_columns in upload_schema.items():
        current_columns = current_schema.get(table_name)
        if current_columns is None:
            diff.tables_to_create.append(table_name)
            diff.columns_to_add[table_name] = dict(upload_columns)
            diff.merged_schema[table_name] = dict(upload_columns)
            diff.has_changes = True
            continue

        for column_name, column_type in upload_columns.items():
            current_type = current_columns.get(column_name)
            if current_type is None:
                diff.columns_to_add.setdefault(table_name, {})[column_name] = column_type
                diff.merged_schema[table_name][column_name] = column_type
                diff.has_changes = True
            elif column_type == ColumnType.TEXT and current_type == ColumnType.STRING:
                diff.string_columns_to_widen.setdefault(table_name, []).append(
                    column_name
                )
                diff.merged_schema[table_name][column_name] = ColumnType.TEXT.value
                diff.has_changes = True
            elif column_type != current_type:
                logger.debug(
                    f"Type mismatch for {table_name}.{column_name} left unresolved: "
                    f"warehouse has {current_type}, upload has {column_type}"
                )

    return diff
