# fluent_sqlite/errors.py
"""
Exceptions raised by the fluent builder.

Validation errors are raised at the call that breaks the rule (add_table,
add_field). Errors coming from the database engine itself are never wrapped
and reach the caller as whatever the connection raised.
"""

from __future__ import annotations


class FluentSQLiteError(Exception):
    """Base exception for builder validation and usage errors."""


class DuplicateTableError(FluentSQLiteError):
    """Raised when a table name is already registered (case-insensitive)."""


class InvalidAutoIncrementError(FluentSQLiteError):
    """Raised when an AutoIncrement field is not declared as primary key."""


class DuplicatePrimaryKeyError(FluentSQLiteError):
    """Raised when an AutoIncrement field would share the primary key with another field."""


class DuplicateFieldError(FluentSQLiteError):
    """Raised when a field name, or the parameter it binds as, is already used in the table."""


class ConnectionStringError(FluentSQLiteError):
    """Raised when a connection string cannot be parsed or names unsupported options."""


class SchemaDefinitionError(FluentSQLiteError):
    """Raised when a declarative schema document is structurally invalid."""
