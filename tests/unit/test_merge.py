"""Tests for staging-file schema consolidation."""

import logging

import pytest

from schemasync.core.exceptions import PersistenceError
from schemasync.core.merge import consolidate_staging_files_schema, merge_schema
from schemasync.core.models import StagingFile
from schemasync.store.memory import InMemoryStagingFileStore

STAGING_SCHEMAS = [
    {"tracks": {"id": "string", "event": "text", "amount": "float"}},
    {"tracks": {"amount": "int", "plan": "string"}, "pages": {"url": "string"}},
    {"pages": {"url": "text", "title": "string"}},
    {"identifies": {}},
    {"tracks": {"plan": "boolean", "event": "int"}},
    {"pages": {"title": "int"}, "tracks": {"new_col": "datetime"}},
    {"identifies": {"email": "string"}},
]

LOCAL_SCHEMA = {"tracks": {"id": "string", "event": "string"}}


class RecordingStore(InMemoryStagingFileStore):
    """Staging store remembering the ids of every page it served."""

    def __init__(self):
        super().__init__()
        self.pages = []

    def fetch_schemas(self, ids):
        self.pages.append(list(ids))
        return super().fetch_schemas(ids)


def _store_with(schemas):
    store = RecordingStore()
    files = [StagingFile(id=store.add(schema)) for schema in schemas]
    return store, files


class TestMergeSchema:
    """Tests for merge_schema precedence rules."""

    def test_widening_wins_over_authoritative_string(self):
        """Test that text widens a cached string column and later types are ignored."""
        result = merge_schema(
            {"T": {"c": "string"}},
            [{"T": {"c": "text"}}, {"T": {"c": "int"}}],
        )
        assert result == {"T": {"c": "text"}}

    def test_authoritative_type_wins(self):
        """Test that a cached type overrides staging-file types."""
        result = merge_schema({"T": {"c": "int"}}, [{"T": {"c": "float"}}])
        assert result == {"T": {"c": "int"}}

    def test_text_does_not_widen_non_string_columns(self):
        result = merge_schema({"T": {"c": "int"}}, [{"T": {"c": "text"}}])
        assert result == {"T": {"c": "int"}}

    def test_first_writer_wins_for_new_columns(self, caplog):
        """Test that the first type seen for a new column is kept."""
        with caplog.at_level(logging.WARNING, logger="schemasync.core.merge"):
            result = merge_schema({}, [{"T": {"c": "int"}}, {"T": {"c": "string"}}])

        assert result == {"T": {"c": "int"}}
        assert "Ignoring type string for T.c" in caplog.text

    def test_empty_tables_are_materialized(self):
        result = merge_schema({}, [{"T": {}}])
        assert result == {"T": {}}

    def test_merge_is_idempotent(self):
        """Test that merging the same schemas twice gives the same result."""
        first = merge_schema(LOCAL_SCHEMA, STAGING_SCHEMAS)
        second = merge_schema(LOCAL_SCHEMA, STAGING_SCHEMAS)
        assert first == second

    def test_inputs_are_not_modified(self):
        accumulator = {"T": {"a": "int"}}
        schema = {"T": {"b": "string"}}

        result = merge_schema({}, [schema], accumulator)

        assert result == {"T": {"a": "int", "b": "string"}}
        assert accumulator == {"T": {"a": "int"}}
        assert schema == {"T": {"b": "string"}}

    def test_accumulator_keeps_earlier_types(self):
        """Test that an earlier page's choice survives a later page."""
        first_page = merge_schema({}, [{"T": {"c": "int"}}])
        result = merge_schema({}, [{"T": {"c": "string"}}], first_page)
        assert result == {"T": {"c": "int"}}


class TestConsolidateStagingFilesSchema:
    """Tests for paged consolidation."""

    @pytest.mark.parametrize("page_size", [1, 2, 3, 7, 100])
    def test_result_independent_of_page_size(self, page_size):
        """Test that paging does not change the merged schema."""
        store, files = _store_with(STAGING_SCHEMAS)

        result = consolidate_staging_files_schema(LOCAL_SCHEMA, files, store, page_size)

        assert result == merge_schema(LOCAL_SCHEMA, STAGING_SCHEMAS)
        assert result["tracks"] == {
            "id": "string",
            "event": "text",
            "amount": "float",
            "plan": "string",
            "new_col": "datetime",
        }
        assert result["pages"] == {"url": "string", "title": "string"}
        assert result["identifies"] == {"email": "string"}

    def test_pages_are_read_in_order(self):
        store, files = _store_with(STAGING_SCHEMAS[:5])

        consolidate_staging_files_schema({}, files, store, page_size=2)

        assert store.pages == [[1, 2], [3, 4], [5]]

    def test_no_staging_files(self):
        store = RecordingStore()
        assert consolidate_staging_files_schema(LOCAL_SCHEMA, [], store) == {}
        assert store.pages == []

    def test_missing_staging_file_is_fatal(self):
        """Test that a page with an unknown id aborts consolidation."""
        store, files = _store_with(STAGING_SCHEMAS[:2])
        files.append(StagingFile(id=99))

        with pytest.raises(PersistenceError):
            consolidate_staging_files_schema({}, files, store, page_size=2)

    def test_invalid_page_size(self):
        store, files = _store_with(STAGING_SCHEMAS[:1])
        with pytest.raises(ValueError):
            consolidate_staging_files_schema({}, files, store, page_size=0)

    def test_carried_schema_is_used_without_store(self):
        """Test that a staging file carrying its schema is not looked up."""
        store = RecordingStore()
        files = [StagingFile(id=1, schema={"T": {"c": "int"}})]

        assert consolidate_staging_files_schema({}, files, store) == {"T": {"c": "int"}}
        assert store.pages == []

    def test_carried_and_stored_schemas_keep_file_order(self):
        """Test that only ids without a schema are fetched, in staging-file order."""
        store = RecordingStore()
        stored_first = store.add({"T": {"c": "int"}})
        stored_second = store.add({"T": {"d": "float"}})
        files = [
            StagingFile(id=stored_first),
            StagingFile(id=50, schema={"T": {"c": "string", "d": "string"}}),
            StagingFile(id=stored_second),
        ]

        result = consolidate_staging_files_schema({}, files, store, page_size=3)

        assert result == {"T": {"c": "int", "d": "string"}}
        assert store.pages == [[stored_first, stored_second]]
