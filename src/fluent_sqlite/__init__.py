# fluent_sqlite/__init__.py
"""Fluent builder for SQLite table definitions and bulk row inserts."""
from fluent_sqlite.builder import DatabaseContext, DataRow, TableContext
from fluent_sqlite.config import DEFAULT_CONNECTION_STRING
from fluent_sqlite.connection import SQLiteConnection, parse_connection_string
from fluent_sqlite.database import create_database
from fluent_sqlite.errors import (
    ConnectionStringError,
    DuplicateFieldError,
    DuplicatePrimaryKeyError,
    DuplicateTableError,
    FluentSQLiteError,
    InvalidAutoIncrementError,
    SchemaDefinitionError,
)
from fluent_sqlite.fields import FieldContext, FieldType

__all__ = [
    "DEFAULT_CONNECTION_STRING",
    "ConnectionStringError",
    "DataRow",
    "DatabaseContext",
    "DuplicateFieldError",
    "DuplicatePrimaryKeyError",
    "DuplicateTableError",
    "FieldContext",
    "FieldType",
    "FluentSQLiteError",
    "InvalidAutoIncrementError",
    "SQLiteConnection",
    "SchemaDefinitionError",
    "TableContext",
    "create_database",
    "parse_connection_string",
]
