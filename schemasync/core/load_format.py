"""Load-time column formats per destination.

Some destinations load staged rows with bookkeeping timestamps (``uuid_ts``,
``loaded_at``) that are filled in when the load file is written rather than
carried by the event. Each load format knows which columns those are and how
the destination expects them rendered.
"""

import datetime as dt
from abc import ABC, abstractmethod

UUID_TS_COLUMN = "uuid_ts"
LOADED_AT_COLUMN = "loaded_at"


def _as_utc(ts: dt.datetime) -> dt.datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=dt.timezone.utc)
    return ts.astimezone(dt.timezone.utc)


def format_rfc3339_millis(ts: dt.datetime) -> str:
    """Render as ``2021-01-02T03:04:05.678Z``."""
    ts = _as_utc(ts)
    return f"{ts.strftime('%Y-%m-%dT%H:%M:%S')}.{ts.microsecond // 1000:03d}Z"


def format_seconds_utc(ts: dt.datetime) -> str:
    """Render as ``2021-01-02 03:04:05 Z``."""
    return _as_utc(ts).strftime("%Y-%m-%d %H:%M:%S Z")


def format_trimmed_micros_utc(ts: dt.datetime) -> str:
    """Render as ``2021-01-02 03:04:05.12 Z`` with trailing zeros trimmed."""
    ts = _as_utc(ts)
    fraction = f"{ts.microsecond:06d}".rstrip("0")
    seconds = ts.strftime("%Y-%m-%d %H:%M:%S")
    if fraction:
        return f"{seconds}.{fraction} Z"
    return f"{seconds} Z"


class LoadFormat(ABC):
    """Base class for destination load formats."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the format name (e.g., 'csv', 'json')."""
        ...

    @abstractmethod
    def is_load_time_column(self, column_name: str) -> bool:
        """Return True if the column is filled in at load time."""
        ...

    @abstractmethod
    def format_load_time(self, column_name: str, ts: dt.datetime) -> str:
        """Render a load-time column value.

        Raises:
            KeyError: If column_name is not a load-time column of this format.
        """
        ...


class CSVLoadFormat(LoadFormat):
    """Delimited load files: only ``uuid_ts`` is stamped at load time."""

    @property
    def name(self) -> str:
        return "csv"

    def is_load_time_column(self, column_name: str) -> bool:
        return column_name == UUID_TS_COLUMN

    def format_load_time(self, column_name: str, ts: dt.datetime) -> str:
        if column_name != UUID_TS_COLUMN:
            raise KeyError(column_name)
        return format_rfc3339_millis(ts)


class JSONLoadFormat(LoadFormat):
    """Newline-delimited JSON load files, stamping ``uuid_ts`` and ``loaded_at``."""

    _formatters = {
        UUID_TS_COLUMN: format_seconds_utc,
        LOADED_AT_COLUMN: format_trimmed_micros_utc,
    }

    @property
    def name(self) -> str:
        return "json"

    def is_load_time_column(self, column_name: str) -> bool:
        return column_name in self._formatters

    def format_load_time(self, column_name: str, ts: dt.datetime) -> str:
        return self._formatters[column_name](ts)


# Destination types loaded from JSON files; everything else loads CSV
JSON_LOAD_DESTINATIONS = frozenset({"BQ"})


def get_load_format(destination_type: str) -> LoadFormat:
    """Return the load format used for a destination type."""
    if destination_type.upper() in JSON_LOAD_DESTINATIONS:
        return JSONLoadFormat()
    return CSVLoadFormat()
