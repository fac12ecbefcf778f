"""Discard sinks collecting values that could not be loaded."""

import threading
from typing import Protocol

import pyarrow as pa

from schemasync.core.models import DiscardRecord


class DiscardSink(Protocol):
    """Protocol for consumers of discard records.

    Sinks own serialization and storage of the records; the coercion engine
    only produces them.
    """

    def add(self, record: DiscardRecord) -> None:
        """Accept one discard record."""
        ...


class InMemoryDiscardSink:
    """Collects discard records for one destination in memory.

    Records can be exported as an Arrow table whose columns follow the
    destination's naming case, ready for a load-file writer.
    """

    def __init__(self, destination_type: str):
        self.destination_type = destination_type
        self.records: list[DiscardRecord] = []
        self._lock = threading.Lock()

    def add(self, record: DiscardRecord) -> None:
        with self._lock:
            self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)

    def to_rows(self) -> list[dict[str, str]]:
        """Return records as destination-cased column maps with string values."""
        rows = []
        for record in self.records:
            columns = record.to_columns(self.destination_type)
            rows.append({name: str(value) for name, value in columns.items()})
        return rows

    def to_arrow(self) -> pa.Table:
        """Return collected records as an Arrow table of string columns.

        Load-time columns that are unset for a record come out as nulls.
        """
        rows = self.to_rows()
        names: list[str] = []
        for row in rows:
            for name in row:
                if name not in names:
                    names.append(name)
        schema = pa.schema([pa.field(name, pa.string()) for name in names])
        return pa.Table.from_pylist(rows, schema=schema)
