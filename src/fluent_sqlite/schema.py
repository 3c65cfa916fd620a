# fluent_sqlite/schema.py
"""
Declarative schema documents for rebuilding a database in one go.

Document shape (JSON):

    {
      "tables": {
        "Table1": {
          "fields": [
            {"name": "PrimaryKey", "type": "AutoIncrement", "required": true, "primary_key": true},
            {"name": "SomeData", "type": "String"},
            {"name": "SomeOtherData", "type": "Integer"}
          ],
          "rows": [["String 1", 42], ["String 2", 720]]
        }
      }
    }

Tables are built in document order. "rows" is optional; each row lists values
for the non-AutoIncrement fields in declaration order.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from fluent_sqlite.builder import DatabaseContext, TableContext
from fluent_sqlite.errors import SchemaDefinitionError
from fluent_sqlite.fields import parse_field_type

logger = logging.getLogger(__name__)

FIELD_KEYS = {"name", "type", "required", "primary_key"}
FLAG_KEYS = ("required", "primary_key")


def load_schema(path: Union[str, Path]) -> Dict[str, Any]:
    """Read and validate a schema document from a JSON file."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            schema = json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaDefinitionError(
            f"Failed to parse schema JSON in {path}: {e.msg} (line {e.lineno})"
        ) from e
    except UnicodeDecodeError as e:
        raise SchemaDefinitionError(
            f"Schema file {path} is not valid UTF-8 (byte offset {e.start})"
        ) from e
    validate_schema(schema)
    return schema


def validate_schema(schema: Any) -> None:
    """
    Structural checks only. Field type names are resolved here so typos are
    reported before anything is executed; key rules are left to add_field.
    """
    if not isinstance(schema, dict) or not isinstance(schema.get("tables"), dict):
        raise SchemaDefinitionError("Schema must be an object with a 'tables' object")

    for table_name, table_def in schema["tables"].items():
        if not isinstance(table_def, dict):
            raise SchemaDefinitionError(f"Table '{table_name}': definition must be an object")

        fields = table_def.get("fields")
        if not isinstance(fields, list) or not fields:
            raise SchemaDefinitionError(f"Table '{table_name}': 'fields' must be a non-empty list")

        for i, field_def in enumerate(fields):
            if not isinstance(field_def, dict) or "name" not in field_def or "type" not in field_def:
                raise SchemaDefinitionError(
                    f"Table '{table_name}': field #{i} needs 'name' and 'type'"
                )
            if not isinstance(field_def["name"], str) or not isinstance(field_def["type"], str):
                raise SchemaDefinitionError(
                    f"Table '{table_name}': field #{i} 'name' and 'type' must be strings"
                )
            unknown = set(field_def) - FIELD_KEYS
            if unknown:
                raise SchemaDefinitionError(
                    f"Table '{table_name}': field '{field_def['name']}' has unknown keys {sorted(unknown)}"
                )
            for flag in FLAG_KEYS:
                if flag in field_def and not isinstance(field_def[flag], bool):
                    raise SchemaDefinitionError(
                        f"Table '{table_name}': field '{field_def['name']}' flag '{flag}' must be true or false"
                    )
            try:
                parse_field_type(field_def["type"])
            except ValueError as e:
                raise SchemaDefinitionError(f"Table '{table_name}': {e}") from e

        rows = table_def.get("rows", [])
        if not isinstance(rows, list) or not all(isinstance(r, list) for r in rows):
            raise SchemaDefinitionError(f"Table '{table_name}': 'rows' must be a list of lists")


def _declare_table(table: TableContext, table_def: Dict[str, Any]) -> TableContext:
    for field_def in table_def["fields"]:
        table.add_field(
            field_def["name"],
            parse_field_type(field_def["type"]),
            required=field_def.get("required", False),
            primary_key=field_def.get("primary_key", False),
        )
    for row in table_def.get("rows", []):
        table.insert_row(*row)
    return table


def build_from_schema(db: DatabaseContext, schema: Dict[str, Any]) -> DatabaseContext:
    """Create every table in the schema and insert its rows through `db`."""
    validate_schema(schema)
    for table_name, table_def in schema["tables"].items():
        _declare_table(db.add_table(table_name), table_def)
        db.select_table(table_name).commit_structure()
        db.select_table(table_name).commit_data()
    logger.info("Built %d tables from schema", len(schema["tables"]))
    return db


def render_schema(schema: Dict[str, Any]) -> List[str]:
    """
    Return the statements build_from_schema would execute, without an engine.
    One CREATE TABLE per table, followed by its INSERT when it has rows.
    """
    validate_schema(schema)
    statements: List[str] = []
    for table_name, table_def in schema["tables"].items():
        table = _declare_table(TableContext(table_name, owner=None), table_def)
        statements.append(table.create_table_sql())
        if table.pending_rows:
            statements.append(table.insert_sql())
    return statements
