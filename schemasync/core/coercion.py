"""Row-level type coercion against existing destination column types.

When a staged value's detected type differs from the type the destination
column already has, :func:`handle_schema_change` decides whether the value
can still be loaded. Values that cannot are turned into discard records by
:func:`build_discard_record` and handed to a discard sink.
"""

import datetime as dt
import logging
import math
from typing import Any, Optional

from schemasync.core.discards import DiscardSink
from schemasync.core.load_format import LOADED_AT_COLUMN, UUID_TS_COLUMN, get_load_format
from schemasync.core.models import INTEGER_TYPES, STRING_TYPES, ColumnType, DiscardRecord
from schemasync.core.naming import to_provider_case

logger = logging.getLogger(__name__)


def handle_schema_change(
    existing_data_type: str, column_type: str, column_val: Any
) -> tuple[Any, bool]:
    """Adapt a value to the type its destination column already has.

    Args:
        existing_data_type: Type of the column in the destination.
        column_type: Type detected for the incoming value.
        column_val: The incoming value.

    Returns:
        Tuple of (value to load, ok). ``ok`` is False when the value has to
        be discarded.

    Rules:
    - string/text columns accept anything, rendered with ``str()``
    - int/bigint values load unchanged into float columns
    - float values load into int/bigint columns truncated to their integer
      part; a value that is not actually a float loads as None
    """
    if existing_data_type in STRING_TYPES:
        return str(column_val), True

    if column_type in INTEGER_TYPES and existing_data_type == ColumnType.FLOAT:
        return column_val, True

    if column_type == ColumnType.FLOAT and existing_data_type in INTEGER_TYPES:
        if not isinstance(column_val, float):
            return None, True
        if not math.isfinite(column_val):
            return None, False
        return int(column_val), True

    return None, False


def build_discard_record(
    table_name: str,
    column_name: str,
    column_val: Any,
    row: dict[str, Any],
    destination_type: str,
    uuid_ts: dt.datetime,
) -> Optional[DiscardRecord]:
    """Build the discard record for a value that failed coercion.

    Args:
        table_name: Destination table of the row.
        column_name: Column whose value is discarded.
        column_val: The value that could not be loaded.
        row: The full staged row, keyed by destination-cased column names.
        destination_type: Destination type, used for casing and load format.
        uuid_ts: Timestamp of the load job, used for load-time columns.

    Returns:
        DiscardRecord, or None when the row has no id or received_at key.
        Keys present with a None value still produce a record.
    """
    id_key = to_provider_case(destination_type, "id")
    received_at_key = to_provider_case(destination_type, "received_at")
    if id_key not in row or received_at_key not in row:
        return None
    row_id = row[id_key]
    received_at = row[received_at_key]

    load_format = get_load_format(destination_type)
    record = DiscardRecord(
        table_name=table_name,
        column_name=column_name,
        column_value=str(column_val),
        row_id=row_id,
        received_at=received_at,
    )
    if load_format.is_load_time_column(UUID_TS_COLUMN):
        record.uuid_ts = load_format.format_load_time(UUID_TS_COLUMN, uuid_ts)
    if load_format.is_load_time_column(LOADED_AT_COLUMN):
        record.loaded_at = load_format.format_load_time(LOADED_AT_COLUMN, uuid_ts)
    return record


def handle_discard_types(
    table_name: str,
    column_name: str,
    column_val: Any,
    row: dict[str, Any],
    destination_type: str,
    uuid_ts: dt.datetime,
    sink: DiscardSink,
) -> bool:
    """Send a discarded value to ``sink``.

    Returns:
        True if a record was produced, False if the row was skipped.
    """
    record = build_discard_record(
        table_name, column_name, column_val, row, destination_type, uuid_ts
    )
    if record is None:
        logger.debug(
            f"Skipping discard for {table_name}.{column_name}: row has no id or received_at"
        )
        return False
    sink.add(record)
    return True
