# fluent_sqlite/builder.py
"""
Fluent database / table builders.

    create_database()
        .add_table("Table1")
            .add_field("PrimaryKey", FieldType.AUTO_INCREMENT, True, True)
            .add_field("SomeData", FieldType.STRING)
            .add_field("SomeOtherData", FieldType.INTEGER)
        .commit_structure()
        .select_table("Table1")
            .insert_row("String 1", 42)
            .insert_row("String 2", 720)
        .commit_data()

Field-level primary key rules are checked as each field is added:
 - an AutoIncrement field must be a primary key field;
 - an AutoIncrement field must be the only primary key field, whichever
   of the two is declared first.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional

from fluent_sqlite.connection import CommandType, DbConnection
from fluent_sqlite.errors import (
    DuplicateFieldError,
    DuplicatePrimaryKeyError,
    DuplicateTableError,
    FluentSQLiteError,
    InvalidAutoIncrementError,
)
from fluent_sqlite.fields import FieldContext, FieldType, sql_type_for
from fluent_sqlite.sql_utils import (
    fold_identifier,
    parameter_name,
    quote_ident,
    quote_ident_list,
    validate_identifier,
)

logger = logging.getLogger(__name__)


class DataRow(tuple):
    """Positional values for one pending insert, aligned to the non-AutoIncrement fields."""


class TableContext:
    def __init__(self, table_name: str, owner: Optional["DatabaseContext"]):
        validate_identifier(table_name)
        self._owner = owner
        self._table_name = table_name
        self._fields: List[FieldContext] = []
        self._rows: List[DataRow] = []
        self._auto_inc_present = False

    def __repr__(self):
        return f"TableContext({self._table_name!r}, fields={len(self._fields)}, pending_rows={len(self._rows)})"

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def fields(self) -> List[FieldContext]:
        return list(self._fields)

    @property
    def pending_rows(self) -> List[DataRow]:
        return list(self._rows)

    # -----------------------
    # Structure
    # -----------------------

    def add_field(
        self,
        field_name: str,
        field_type: FieldType,
        required: bool = False,
        primary_key: bool = False,
    ) -> "TableContext":
        if primary_key:
            required = True

        self._check_primary_key_restrictions(field_type, primary_key)

        field = FieldContext(field_name, field_type, required, primary_key)
        self._check_name_collision(field)
        self._fields.append(field)
        if field.is_auto_increment:
            self._auto_inc_present = True

        logger.debug("Table %s: added field %r", self._table_name, field)
        return self

    def _check_name_collision(self, field: FieldContext) -> None:
        name_key = fold_identifier(field.field_name)
        token = parameter_name(field.field_name)
        for existing in self._fields:
            if fold_identifier(existing.field_name) == name_key:
                raise DuplicateFieldError(
                    f"Table '{self._table_name}': field '{field.field_name}' already declared"
                )
            if parameter_name(existing.field_name) == token:
                raise DuplicateFieldError(
                    f"Table '{self._table_name}': fields '{existing.field_name}' and "
                    f"'{field.field_name}' would both bind as {token}"
                )

    def _check_primary_key_restrictions(self, field_type, primary_key: bool) -> None:
        if self._auto_inc_present and primary_key:
            raise DuplicatePrimaryKeyError(
                f"Table '{self._table_name}': AutoIncrement field must be the only primary key field"
            )

        if field_type != FieldType.AUTO_INCREMENT:
            return

        if not primary_key:
            raise InvalidAutoIncrementError(
                f"Table '{self._table_name}': AutoIncrement field must be a primary key"
            )

        if any(f.is_in_primary_key for f in self._fields):
            raise DuplicatePrimaryKeyError(
                f"Table '{self._table_name}': AutoIncrement field must be the only primary key field"
            )

    def _require_owner(self) -> "DatabaseContext":
        if self._owner is None:
            raise FluentSQLiteError("Table is not attached to a database")
        return self._owner

    def create_table_sql(self) -> str:
        """Render the CREATE TABLE statement for the current field list."""
        clauses = []
        for field in self._fields:
            clause = f"{quote_ident(field.field_name)} {sql_type_for(field.field_type)}"
            # AUTOINCREMENT columns are implicitly NOT NULL
            if field.is_required and not field.is_auto_increment:
                clause += " NOT NULL"
            clauses.append(clause)

        key_fields = [
            f.field_name for f in self._fields
            if f.is_in_primary_key and not f.is_auto_increment
        ]
        if key_fields:
            clauses.append(f"PRIMARY KEY({quote_ident_list(key_fields)})")

        return f"CREATE TABLE {quote_ident(self._table_name)} ({', '.join(clauses)})"

    def commit_structure(self) -> "DatabaseContext":
        sql = self.create_table_sql()
        logger.debug("Executing: %s", sql)

        command = self._require_owner()._create_command()
        try:
            command.command_type = CommandType.TEXT
            command.command_text = sql
            command.execute_non_query()
        finally:
            command.dispose()

        logger.info("Created table %s (%d fields)", self._table_name, len(self._fields))
        return self._owner

    # -----------------------
    # Data
    # -----------------------

    def _insert_fields(self) -> List[FieldContext]:
        return [f for f in self._fields if not f.is_auto_increment]

    def insert_sql(self) -> str:
        """Render the parameterized INSERT statement; AutoIncrement fields are skipped."""
        insert_fields = self._insert_fields()
        columns = quote_ident_list(f.field_name for f in insert_fields)
        params = ", ".join(parameter_name(f.field_name) for f in insert_fields)
        return f"INSERT INTO {quote_ident(self._table_name)} ({columns}) VALUES ({params})"

    def insert_row(self, *values: Any) -> "TableContext":
        self._rows.append(DataRow(values))
        return self

    def commit_data(self) -> "DatabaseContext":
        """
        Execute one prepared INSERT per queued row, in queue order.

        Rows are bound positionally to the non-AutoIncrement fields. The queue
        is cleared once every row has been executed; if a row fails, rows
        executed before it stay applied and the queue is kept as it was.
        """
        if not self._rows:
            return self._owner

        sql = self.insert_sql()
        logger.debug("Executing: %s (%d rows)", sql, len(self._rows))

        command = self._require_owner()._create_command()
        try:
            command.command_type = CommandType.TEXT
            command.command_text = sql

            parameters = []
            for f in self._insert_fields():
                parameter = command.create_parameter()
                parameter.parameter_name = parameter_name(f.field_name)
                parameters.append(parameter)
                command.parameters.append(parameter)

            for row in self._rows:
                # extra values beyond the parameter count are ignored
                for parameter, value in zip(parameters, row):
                    parameter.value = value
                logger.debug("Binding row %r", row)
                command.execute_non_query()
        finally:
            command.dispose()

        logger.info("Inserted %d rows into %s", len(self._rows), self._table_name)
        self._rows = []
        return self._owner


class DatabaseContext:
    """Registry of table builders sharing one open connection."""

    def __init__(self, connection: DbConnection):
        self._tables: Dict[str, TableContext] = {}
        self._connection: Optional[DbConnection] = connection

        if not connection.is_open:
            connection.open()

    @property
    def connection(self) -> Optional[DbConnection]:
        return self._connection

    @property
    def data_tables(self) -> List[TableContext]:
        return list(self._tables.values())

    def __iter__(self) -> Iterator[TableContext]:
        return iter(self.data_tables)

    def __contains__(self, table_name) -> bool:
        return isinstance(table_name, str) and fold_identifier(table_name) in self._tables

    def _create_command(self):
        if self._connection is None:
            raise FluentSQLiteError("Database is detached")
        return self._connection.create_command()

    def add_table(self, table_name: str) -> TableContext:
        validate_identifier(table_name)
        key = fold_identifier(table_name)
        if key in self._tables:
            raise DuplicateTableError(f"Table already present in the database: {table_name}")

        context = TableContext(table_name, self)
        self._tables[key] = context
        return context

    def select_table(self, table_name: str) -> TableContext:
        validate_identifier(table_name)
        context = self._tables.get(fold_identifier(table_name))
        if context is not None:
            return context
        return self.add_table(table_name)

    def detach_database(self) -> None:
        if self._connection is None:
            return
        connection, self._connection = self._connection, None
        try:
            connection.close()
        finally:
            dispose = getattr(connection, "dispose", None)
            if callable(dispose):
                dispose()
        logger.info("Database detached")
