"""Type mapper for DuckDB warehouses."""

from schemasync.core.models import ColumnType


class DuckDBTypeMapper:
    """Maps DuckDB column types to schema column types."""

    def connector_type_to_column_type(self, connector_type: str) -> str:
        """Map DuckDB type to a column type.

        Args:
            connector_type: DuckDB type string (e.g., "VARCHAR", "DECIMAL(18,3)")

        Returns:
            Column type string (e.g., "string", "float")
        """
        duckdb_type_upper = connector_type.upper().split("(", 1)[0].strip()

        if duckdb_type_upper in ("VARCHAR", "TEXT", "CHAR", "STRING", "UUID"):
            return ColumnType.STRING.value
        elif duckdb_type_upper in (
            "BIGINT",
            "INT8",
            "HUGEINT",
            "INTEGER",
            "INT",
            "INT4",
            "SMALLINT",
            "INT2",
            "TINYINT",
        ):
            return ColumnType.INT.value
        elif duckdb_type_upper in ("DOUBLE", "FLOAT8", "FLOAT", "FLOAT4", "REAL", "DECIMAL", "NUMERIC"):
            return ColumnType.FLOAT.value
        elif duckdb_type_upper in ("BOOLEAN", "BOOL"):
            return ColumnType.BOOLEAN.value
        elif duckdb_type_upper.startswith("TIMESTAMP") or duckdb_type_upper == "DATE":
            return ColumnType.DATETIME.value
        else:
            # Default to string for unknown types
            return ColumnType.STRING.value
