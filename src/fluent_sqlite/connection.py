# fluent_sqlite/connection.py
"""
Connection abstraction consumed by the builder, plus the stock SQLite implementation.

The builder only relies on the DbConnection / DbCommand / DbParameter protocols:
 - connection: is_open, open(), create_command(), close()
 - command:    command_text, command_type, parameters, create_parameter(),
               execute_non_query(), execute_reader(), dispose()

SQLiteConnection implements them over the stdlib sqlite3 driver and accepts
ADO-style connection strings:

    Data Source=:memory:;Version=3;New=True;Synchronous=Off;

Supported keys (case-insensitive, spaces ignored):
 - Data Source / DataSource / Filename : path or ':memory:' (required)
 - Version                             : must be 3
 - New                                 : accepted; sqlite3 creates missing files anyway
 - Synchronous                         : Off | Normal | Full | Extra -> PRAGMA synchronous
 - Foreign Keys                        : True -> PRAGMA foreign_keys = ON
 - FailIfMissing                       : True -> opening a missing file fails
 - Read Only                           : True -> open the file read-only
"""
from __future__ import annotations

import datetime
import decimal
import logging
import sqlite3
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from fluent_sqlite.config import DEFAULT_CONNECTION_STRING
from fluent_sqlite.errors import ConnectionStringError, FluentSQLiteError
from fluent_sqlite.sql_utils import strip_parameter_marker

logger = logging.getLogger(__name__)

MEMORY_DATA_SOURCE = ":memory:"

_KEY_ALIASES = {
    "datasource": "data_source",
    "filename": "data_source",
    "version": "version",
    "new": "new",
    "synchronous": "synchronous",
    "foreignkeys": "foreign_keys",
    "failifmissing": "fail_if_missing",
    "readonly": "read_only",
}

_SYNCHRONOUS_MODES = {"off", "normal", "full", "extra"}


class CommandType(str, Enum):
    TEXT = "Text"


# -----------------------
# Protocols
# -----------------------

@runtime_checkable
class DbParameter(Protocol):
    parameter_name: str
    value: Any


@runtime_checkable
class DbCommand(Protocol):
    command_text: str
    command_type: CommandType
    parameters: List[DbParameter]

    def create_parameter(self) -> DbParameter:
        ...

    def execute_non_query(self) -> int:
        ...

    def execute_reader(self) -> Any:
        ...

    def dispose(self) -> None:
        ...


@runtime_checkable
class DbConnection(Protocol):
    @property
    def is_open(self) -> bool:
        ...

    def open(self) -> None:
        ...

    def create_command(self) -> DbCommand:
        ...

    def close(self) -> None:
        ...


# -----------------------
# Connection string parsing
# -----------------------

def _as_bool(key: str, value: str) -> bool:
    v = value.strip().lower()
    if v in ("true", "yes", "1", "on"):
        return True
    if v in ("false", "no", "0", "off"):
        return False
    raise ConnectionStringError(f"Invalid boolean for {key}: {value!r}")


def parse_connection_string(text: str) -> Dict[str, Any]:
    """
    Parse an ADO-style 'Key=Value;' connection string into normalized settings.

    Returns a dict with keys: data_source, version, new, synchronous,
    foreign_keys, fail_if_missing, read_only.

    Raises ConnectionStringError on malformed segments, unknown keys,
    unsupported versions or a missing data source.
    """
    if not isinstance(text, str):
        raise ConnectionStringError("Connection string must be a string")

    settings: Dict[str, Any] = {
        "data_source": None,
        "version": 3,
        "new": False,
        "synchronous": None,
        "foreign_keys": False,
        "fail_if_missing": False,
        "read_only": False,
    }

    for segment in text.split(";"):
        if not segment.strip():
            continue
        if "=" not in segment:
            raise ConnectionStringError(f"Malformed connection string segment: {segment.strip()!r}")
        raw_key, value = segment.split("=", 1)
        key = _KEY_ALIASES.get("".join(raw_key.split()).lower())
        if key is None:
            raise ConnectionStringError(f"Unsupported connection string key: {raw_key.strip()!r}")
        value = value.strip()

        if key == "data_source":
            settings[key] = value
        elif key == "version":
            if value != "3":
                raise ConnectionStringError(f"Unsupported SQLite version: {value!r}")
        elif key == "synchronous":
            if value.lower() not in _SYNCHRONOUS_MODES:
                raise ConnectionStringError(f"Invalid Synchronous mode: {value!r}")
            settings[key] = value.upper()
        else:
            settings[key] = _as_bool(raw_key.strip(), value)

    if not settings["data_source"]:
        raise ConnectionStringError("Connection string has no Data Source")

    return settings


def _adapt_value(value: Any) -> Any:
    # sqlite3 has no native DECIMAL and its default datetime adapters are deprecated
    if isinstance(value, decimal.Decimal):
        return str(value)
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    return value


# -----------------------
# SQLite implementation
# -----------------------

@dataclass
class SQLiteParameter:
    parameter_name: str = ""
    value: Any = None


class SQLiteCommand:
    """A single SQL text plus named parameters, executed on an open SQLiteConnection."""

    def __init__(self, connection: "SQLiteConnection"):
        self._connection = connection
        self.command_text = ""
        self.command_type = CommandType.TEXT
        self.parameters: List[SQLiteParameter] = []
        self._disposed = False

    def create_parameter(self, parameter_name: str = "", value: Any = None) -> SQLiteParameter:
        """Create a parameter; callers append it to `parameters` themselves."""
        return SQLiteParameter(parameter_name, value)

    def _bindings(self) -> Dict[str, Any]:
        return {
            strip_parameter_marker(p.parameter_name): _adapt_value(p.value)
            for p in self.parameters
        }

    def _execute(self) -> sqlite3.Cursor:
        if self._disposed:
            raise FluentSQLiteError("Command has been disposed")
        if self.command_type != CommandType.TEXT:
            raise FluentSQLiteError(f"Unsupported command type: {self.command_type!r}")
        return self._connection.raw.execute(self.command_text, self._bindings())

    def execute_non_query(self) -> int:
        cursor = self._execute()
        try:
            return cursor.rowcount
        finally:
            cursor.close()

    def execute_reader(self) -> sqlite3.Cursor:
        """Return an open cursor over the result rows; the caller closes it."""
        return self._execute()

    def execute_scalar(self) -> Any:
        cursor = self._execute()
        try:
            row = cursor.fetchone()
            return None if row is None else row[0]
        finally:
            cursor.close()

    def dispose(self) -> None:
        self.parameters = []
        self._disposed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()


class SQLiteConnection:
    """
    Connection over the stdlib sqlite3 driver, created closed and opened explicitly.

    Statements run in autocommit mode: each executed command is applied
    immediately, nothing is wrapped in an implicit transaction.
    """

    def __init__(self, connection_string: str = DEFAULT_CONNECTION_STRING):
        self.connection_string = connection_string
        self.settings = parse_connection_string(connection_string)
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def data_source(self) -> str:
        return self.settings["data_source"]

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def raw(self) -> sqlite3.Connection:
        if self._conn is None:
            raise FluentSQLiteError("Connection is not open")
        return self._conn

    def _connect(self) -> sqlite3.Connection:
        source = self.data_source
        if source == MEMORY_DATA_SOURCE:
            return sqlite3.connect(source, isolation_level=None)

        mode = None
        if self.settings["read_only"]:
            mode = "ro"
        elif self.settings["fail_if_missing"]:
            mode = "rw"
        if mode is None:
            return sqlite3.connect(source, isolation_level=None)
        uri = Path(source).resolve().as_uri() + f"?mode={mode}"
        return sqlite3.connect(uri, uri=True, isolation_level=None)

    def open(self) -> None:
        if self._conn is not None:
            return
        logger.debug("Opening SQLite connection to %s", self.data_source)
        conn = self._connect()
        try:
            conn.row_factory = sqlite3.Row
            if self.settings["synchronous"]:
                conn.execute(f"PRAGMA synchronous = {self.settings['synchronous']}")
            if self.settings["foreign_keys"]:
                conn.execute("PRAGMA foreign_keys = ON")
        except Exception:
            conn.close()
            raise
        self._conn = conn

    def create_command(self) -> SQLiteCommand:
        if self._conn is None:
            raise FluentSQLiteError("Connection is not open")
        return SQLiteCommand(self)

    def close(self) -> None:
        if self._conn is None:
            return
        logger.debug("Closing SQLite connection to %s", self.data_source)
        try:
            self._conn.close()
        finally:
            self._conn = None

    def dispose(self) -> None:
        self.close()

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
