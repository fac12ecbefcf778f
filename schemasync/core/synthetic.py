"""Bookkeeping tables added to every upload schema."""

import logging

from schemasync.core.models import ColumnType, Schema, copy_schema
from schemasync.core.naming import (
    DISCARDS_TABLE,
    IDENTITY_MAPPINGS_TABLE,
    IDENTITY_MERGE_RULES_TABLE,
    to_provider_case,
)
from schemasync.models.config import IdentityResolutionConfig

logger = logging.getLogger(__name__)

DISCARDS_COLUMNS = {
    "table_name": ColumnType.STRING.value,
    "row_id": ColumnType.STRING.value,
    "column_name": ColumnType.STRING.value,
    "column_value": ColumnType.STRING.value,
    "received_at": ColumnType.DATETIME.value,
    "uuid_ts": ColumnType.DATETIME.value,
}

# Destinations whose discards table also carries loaded_at
LOADED_AT_DESTINATIONS = frozenset({"BQ"})

MERGE_RULES_COLUMNS = (
    "merge_property_1_type",
    "merge_property_1_value",
    "merge_property_2_type",
    "merge_property_2_value",
)

IDENTITY_MAPPINGS_COLUMNS = {
    "merge_property_type": ColumnType.STRING.value,
    "merge_property_value": ColumnType.STRING.value,
    "rudder_id": ColumnType.STRING.value,
    "updated_at": ColumnType.DATETIME.value,
}


def discards_table_schema(destination_type: str) -> dict[str, str]:
    """Columns of the discards table in destination casing."""
    columns = dict(DISCARDS_COLUMNS)
    if destination_type.upper() in LOADED_AT_DESTINATIONS:
        columns["loaded_at"] = ColumnType.DATETIME.value
    return {to_provider_case(destination_type, k): v for k, v in columns.items()}


def inject_synthetic_tables(
    schema: Schema,
    destination_type: str,
    identity_config: IdentityResolutionConfig,
) -> Schema:
    """Return ``schema`` extended with the discards and identity tables.

    The discards table is always added. The identity-mappings table is added,
    and the merge-rules table completed, only when identity resolution is
    enabled for the destination type and the merge-rules table already
    exists in ``schema``.

    Args:
        schema: Consolidated staging-file schema.
        destination_type: Destination type, for casing and eligibility.
        identity_config: Identity resolution switches for this cycle.

    Returns:
        A new schema; ``schema`` is not modified.
    """
    result = copy_schema(schema)
    result[to_provider_case(destination_type, DISCARDS_TABLE)] = discards_table_schema(
        destination_type
    )

    if not (
        identity_config.is_identity_resolution_enabled()
        and identity_config.is_identity_enabled_destination(destination_type)
    ):
        return result

    merge_rules_table = to_provider_case(destination_type, IDENTITY_MERGE_RULES_TABLE)
    merge_rules = result.get(merge_rules_table)
    if merge_rules is None:
        logger.debug(
            f"Skipping identity tables: {merge_rules_table} not in upload schema"
        )
        return result

    for column in MERGE_RULES_COLUMNS:
        merge_rules.setdefault(
            to_provider_case(destination_type, column), ColumnType.STRING.value
        )

    result[to_provider_case(destination_type, IDENTITY_MAPPINGS_TABLE)] = {
        to_provider_case(destination_type, k): v
        for k, v in IDENTITY_MAPPINGS_COLUMNS.items()
    }
    return result
