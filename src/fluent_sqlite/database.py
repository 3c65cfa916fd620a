# fluent_sqlite/database.py
"""Entry point: open a connection and wrap it in a DatabaseContext."""
from __future__ import annotations

import logging
from typing import Union

from fluent_sqlite.builder import DatabaseContext
from fluent_sqlite.config import DEFAULT_CONNECTION_STRING
from fluent_sqlite.connection import DbConnection, SQLiteConnection

logger = logging.getLogger(__name__)


def create_database(target: Union[str, DbConnection] = DEFAULT_CONNECTION_STRING) -> DatabaseContext:
    """
    Create a database builder.

    - target as str: treated as a SQLite connection string; defaults to a
      volatile in-memory database.
    - target as connection: used as-is, opened if not already open.

    Always returns a fresh DatabaseContext.
    """
    if isinstance(target, str):
        connection = SQLiteConnection(target)
        logger.info("Opening database %s", connection.data_source)
    else:
        connection = target
    return DatabaseContext(connection)
