# fluent_sqlite/fields.py
"""
Field declarations: the column types the builder knows and the immutable
descriptor recorded for each AddField call.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fluent_sqlite.sql_utils import validate_identifier


class FieldType(str, Enum):
    AUTO_INCREMENT = "AutoIncrement"
    INTEGER = "Integer"
    FLOAT = "Float"
    DECIMAL = "Decimal"
    DATETIME = "DateTime"
    STRING = "String"
    BLOB = "Blob"


SQL_TYPES = {
    # Embeds both the type and the key declaration for the column
    FieldType.AUTO_INCREMENT: "INTEGER PRIMARY KEY AUTOINCREMENT",
    FieldType.INTEGER: "INTEGER",
    FieldType.FLOAT: "REAL",
    FieldType.DECIMAL: "NUMERIC",
    FieldType.DATETIME: "DATETIME",
    FieldType.STRING: "CHAR",
    FieldType.BLOB: "BLOB",
}

FALLBACK_SQL_TYPE = "CHAR"


def sql_type_for(field_type) -> str:
    """Map a FieldType to its SQLite column type; unknown values fall back to CHAR."""
    try:
        return SQL_TYPES.get(field_type, FALLBACK_SQL_TYPE)
    except TypeError:
        # unhashable input
        return FALLBACK_SQL_TYPE


_TYPE_ALIASES = {
    "autoinc": FieldType.AUTO_INCREMENT,
    "auto_increment": FieldType.AUTO_INCREMENT,
    "autoincrement": FieldType.AUTO_INCREMENT,
}


def parse_field_type(value: str) -> FieldType:
    """
    Resolve a field type from its member name or value, case-insensitively.

      parse_field_type("AutoIncrement") -> FieldType.AUTO_INCREMENT
      parse_field_type("string")        -> FieldType.STRING

    Raises ValueError for unknown names.
    """
    if isinstance(value, FieldType):
        return value
    key = str(value).strip().lower()
    if key in _TYPE_ALIASES:
        return _TYPE_ALIASES[key]
    for member in FieldType:
        if key in (member.name.lower(), member.value.lower()):
            return member
    raise ValueError(f"Unknown field type: {value!r}")


@dataclass(frozen=True)
class FieldContext:
    field_name: str
    field_type: FieldType
    is_required: bool = False
    is_in_primary_key: bool = False

    def __post_init__(self):
        validate_identifier(self.field_name)
        if self.is_in_primary_key and not self.is_required:
            # primary key columns are always required
            object.__setattr__(self, "is_required", True)

    @property
    def is_auto_increment(self) -> bool:
        return self.field_type == FieldType.AUTO_INCREMENT
