# fluent_sqlite/sql_utils.py
"""
SQL identifier helpers: safe quoting, basic validation and parameter naming.

This small utility centralizes:
 - validate_identifier(name)    -> raises on suspicious/invalid names
 - quote_ident(name)            -> returns a double-quoted, SQL-escaped identifier
 - quote_ident_list(iterable)   -> comma-joined quoted identifiers
 - parameter_name(name)         -> '@'-prefixed named parameter token for a column

Notes:
- Uses SQL double-quote identifier quoting and escapes internal double-quotes by doubling them,
  per the SQLite tokenizer / identifier rules (SQL standard).
"""
from __future__ import annotations

from typing import Iterable

PARAMETER_MARKER = "@"


def _ensure_str(name: object) -> str:
    if not isinstance(name, str):
        raise TypeError("Identifier must be a string")
    return name


def validate_identifier(name: str) -> None:
    """
    Basic validation for identifier strings:
    - Must be a non-empty string.
    - Must not contain NUL/newline/carriage-return characters.
    Other characters (spaces included) are allowed since every identifier is quoted.
    Raises ValueError/TypeError on invalid input.
    """
    name = _ensure_str(name)
    if not name:
        raise ValueError("Identifier must not be empty")
    if "\x00" in name or "\n" in name or "\r" in name:
        raise ValueError("Identifier contains disallowed control characters")


def quote_ident(name: str) -> str:
    """
    Quote an SQL identifier using double quotes and escape embedded double-quotes.

    Examples:
      quote_ident('table') -> '"table"'
      quote_ident('we"ir d') -> '"we""ir d"'
    """
    validate_identifier(name)
    return '"' + name.replace('"', '""') + '"'


def quote_ident_list(names: Iterable[str]) -> str:
    """
    Quote and join an iterable of identifier names into a comma-separated list.
    """
    return ", ".join(quote_ident(n) for n in names)


def parameter_name(field_name: str) -> str:
    """
    Named parameter token for a column: marker + name with spaces replaced by
    underscores, so 'Some Data' binds as '@Some_Data'. 'Some Data' and 'Some_Data'
    therefore share a token; TableContext.add_field refuses such pairs.
    """
    validate_identifier(field_name)
    return PARAMETER_MARKER + field_name.replace(" ", "_")


def strip_parameter_marker(name: str) -> str:
    """Return the bare parameter key sqlite3 uses for named binding."""
    if name[:1] in (PARAMETER_MARKER, ":", "$"):
        return name[1:]
    return name


_ASCII_LOWER = str.maketrans("ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz")


def fold_identifier(name: str) -> str:
    """
    Case-fold an identifier the way SQLite compares them: ASCII letters only.

      fold_identifier('Foo')     -> 'foo'
      fold_identifier('Straße')  -> 'straße'   (distinct from 'strasse')
    """
    return _ensure_str(name).translate(_ASCII_LOWER)
