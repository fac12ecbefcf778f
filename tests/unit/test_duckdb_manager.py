"""Unit tests for the DuckDB warehouse manager and the manager registry."""

from pathlib import Path

import pytest

from schemasync.core.exceptions import ConfigurationError, IntrospectionError
from schemasync.warehouse import get_manager, list_manager_types
from schemasync.warehouse.duckdb import DuckDBManager, DuckDBTypeMapper
from schemasync.warehouse.registry import register_manager, unregister_manager


class TestDuckDBTypeMapper:
    """Tests for DuckDBTypeMapper."""

    @pytest.mark.parametrize(
        "duckdb_type,expected",
        [
            ("VARCHAR", "string"),
            ("uuid", "string"),
            ("BIGINT", "int"),
            ("INTEGER", "int"),
            ("DOUBLE", "float"),
            ("DECIMAL(18,3)", "float"),
            ("BOOLEAN", "boolean"),
            ("TIMESTAMP WITH TIME ZONE", "datetime"),
            ("DATE", "datetime"),
            ("BLOB", "string"),
        ],
    )
    def test_connector_type_to_column_type(self, duckdb_type, expected):
        assert DuckDBTypeMapper().connector_type_to_column_type(duckdb_type) == expected


class TestDuckDBManager:
    """Tests for DuckDBManager.fetch_schema."""

    def test_fetch_schema_reads_namespace(self, duckdb_path: Path, warehouse):
        """Test that only tables of the warehouse namespace are returned."""
        manager = DuckDBManager(database=str(duckdb_path), read_only=True)

        schema = manager.fetch_schema(warehouse)

        assert schema == {
            "tracks": {"id": "string", "event": "string", "amount": "int"},
        }

    def test_fetch_schema_empty_namespace(self, duckdb_path: Path, warehouse):
        manager = DuckDBManager(database=str(duckdb_path))
        other = warehouse.model_copy(update={"namespace": "missing"})

        assert manager.fetch_schema(other) == {}

    def test_unreachable_database(self, tmp_path: Path, warehouse):
        """Test that connection failures surface as IntrospectionError."""
        manager = DuckDBManager(database=str(tmp_path / "no" / "such" / "dir.duckdb"))

        with pytest.raises(IntrospectionError) as exc_info:
            manager.fetch_schema(warehouse)

        assert exc_info.value.context["namespace"] == "analytics"


class TestManagerRegistry:
    """Tests for the warehouse manager registry."""

    def test_duckdb_is_registered(self):
        assert "DUCKDB" in list_manager_types()

    def test_get_manager_is_case_insensitive(self, duckdb_path: Path):
        manager = get_manager("duckdb", database=str(duckdb_path))
        assert isinstance(manager, DuckDBManager)

    def test_unknown_type(self):
        with pytest.raises(ConfigurationError, match="Unknown warehouse type"):
            get_manager("REDSHIFT")

    def test_register_and_unregister(self):
        """Test registering a factory with the decorator form."""

        class StaticManager:
            def fetch_schema(self, warehouse):
                return {"t": {"c": "int"}}

        @register_manager("static_test")
        def create_static_manager(**options):
            return StaticManager()

        try:
            assert "STATIC_TEST" in list_manager_types()
            assert isinstance(get_manager("STATIC_TEST"), StaticManager)
            with pytest.raises(ConfigurationError, match="already registered"):
                register_manager("STATIC_TEST", create_static_manager)
        finally:
            unregister_manager("static_test")

        assert "STATIC_TEST" not in list_manager_types()
