"""Consolidation of staging-file schemas into one upload schema.

Precedence for every (table, column, type) seen, in staging-file order:

1. If the authoritative schema (the locally cached warehouse schema) already
   has a type for the column, that type wins. The one exception is
   ``string`` there and ``text`` incoming: the column becomes ``text``.
2. Otherwise the first type seen for a new column is kept; later staging
   files offering a different type for it are ignored.

Staging-file schemas are read in pages so no single query returns an
unbounded number of payloads. The merged result is threaded through the
pages as an accumulator, so it does not depend on the page size.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from schemasync.core.models import ColumnType, Schema, StagingFile, copy_schema
from schemasync.store.base import StagingFileStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


def merge_schema(
    current_schema: Schema,
    schema_list: Iterable[Schema],
    current_merged_schema: Optional[Schema] = None,
) -> Schema:
    """Fold staging-file schemas into a merged schema.

    Args:
        current_schema: Authoritative schema used to resolve column types.
        schema_list: Staging-file schemas, in processing order.
        current_merged_schema: Result of merging earlier pages, if any.

    Returns:
        A new merged schema; neither input is modified.
    """
    merged = copy_schema(current_merged_schema or {})

    for schema in schema_list:
        for table_name, column_map in schema.items():
            merged_columns = merged.setdefault(table_name, {})
            known_columns = current_schema.get(table_name, {})

            for column_name, column_type in (column_map or {}).items():
                type_in_db = known_columns.get(column_name)
                if type_in_db is not None:
                    # a string column stays widened once any file offered text
                    widened = type_in_db == ColumnType.STRING and (
                        column_type == ColumnType.TEXT
                        or merged_columns.get(column_name) == ColumnType.TEXT
                    )
                    merged_columns[column_name] = (
                        ColumnType.TEXT.value if widened else type_in_db
                    )
                    continue

                adopted = merged_columns.setdefault(column_name, column_type)
                if adopted != column_type:
                    logger.warning(
                        f"Ignoring type {column_type} for {table_name}.{column_name}, "
                        f"already merged as {adopted}"
                    )

    return merged


def consolidate_staging_files_schema(
    local_schema: Schema,
    staging_files: Sequence[StagingFile],
    store: StagingFileStore,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Schema:
    """Merge the schemas of all staging files, reading them in pages.

    Staging files that already carry a schema are merged from it; only the
    remaining ids of each page are read from ``store``.

    Args:
        local_schema: Cached warehouse schema, used as the precedence oracle.
        staging_files: Staging files in processing order.
        store: Store the staging-file schemas are read from.
        page_size: Maximum number of schemas read per query.

    Returns:
        The consolidated schema.

    Raises:
        PersistenceError: If a page cannot be read.
        DeserializationError: If a stored schema is malformed.
    """
    if page_size <= 0:
        raise ValueError("page_size must be greater than 0")

    consolidated: Schema = {}
    for start in range(0, len(staging_files), page_size):
        page = staging_files[start : start + page_size]
        schemas = _page_schemas(page, store)
        logger.debug(f"Merging {len(schemas)} staging file schemas from id {page[0].id}")
        consolidated = merge_schema(local_schema, schemas, consolidated)

    return consolidated


def _page_schemas(page: Sequence[StagingFile], store: StagingFileStore) -> list[Schema]:
    """Schemas of one page in staging-file order, fetching only unknown ones."""
    missing_ids = [staging_file.id for staging_file in page if staging_file.schema is None]
    fetched = dict(zip(missing_ids, store.fetch_schemas(missing_ids))) if missing_ids else {}
    return [
        staging_file.schema if staging_file.schema is not None else fetched[staging_file.id]
        for staging_file in page
    ]
