#!/usr/bin/env python3
# fluent_sqlite/cli.py
"""
fluent-sqlite

Build (or regenerate) a SQLite database from a JSON schema document.

Examples:
  # Validate a schema by building it in memory
  fluent-sqlite schema.json

  # Print the statements without executing anything
  fluent-sqlite schema.json app.db --dry-run

  # Regenerate a damaged database file (the old file is backed up first)
  fluent-sqlite schema.json app.db --replace
"""
import argparse
import logging
import os
import shutil
from datetime import datetime
from typing import Optional, Sequence

from fluent_sqlite.cli_utils import BuildReport, Outcome, print_report
from fluent_sqlite.config import DEFAULT_CONNECTION_STRING, configure_logging
from fluent_sqlite.database import create_database
from fluent_sqlite.errors import FluentSQLiteError
from fluent_sqlite.schema import build_from_schema, load_schema, render_schema

logger = logging.getLogger(__name__)


def make_backup_path(db_path: str) -> str:
    base, ext = os.path.splitext(db_path)
    if not ext:
        ext = ".sqlite"
    ts = datetime.now().strftime("%y%m%d-%H%M")
    return f"{base}_backup_{ts}{ext}"


def file_connection_string(db_path: str) -> str:
    if ";" in db_path:
        raise FluentSQLiteError(f"Database path must not contain ';': {db_path}")
    return f"Data Source={db_path};Version=3;"


def _build(schema, connection_string: str) -> None:
    db = create_database(connection_string)
    try:
        build_from_schema(db, schema)
    finally:
        db.detach_database()


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fluent-sqlite",
        description="Build a SQLite database from a JSON schema document",
    )
    parser.add_argument(
        "schema_path",
        help="Path to the JSON schema document",
    )
    parser.add_argument(
        "db_path",
        nargs="?",
        default=None,
        help="Path to the SQLite database file (default: build in memory only)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the SQL statements, but do not execute them",
    )
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Back up and regenerate the database file if it already exists",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print extra developer detail",
    )
    return parser


def _finish(report: BuildReport, args) -> None:
    print_report(report, verbose=args.verbose, quiet=args.quiet)
    if report.exit_code:
        raise SystemExit(report.exit_code)


def main(argv: Optional[Sequence[str]] = None):
    args = _parser().parse_args(argv)
    configure_logging()

    try:
        schema = load_schema(args.schema_path)
    except (OSError, FluentSQLiteError) as e:
        raise SystemExit(f"Failed to load schema: {e}")

    table_count = len(schema["tables"])

    if args.dry_run:
        try:
            statements = render_schema(schema)
        except (FluentSQLiteError, ValueError, TypeError) as e:
            raise SystemExit(f"Schema build failed: {e}")
        for statement in statements:
            print(statement + ";")
        return

    if args.db_path is None:
        try:
            _build(schema, DEFAULT_CONNECTION_STRING)
        except Exception as e:
            logger.exception("In-memory build failed")
            raise SystemExit(f"Schema build failed: {e}")
        _finish(BuildReport(Outcome.VALIDATED, args.schema_path, table_count=table_count), args)
        return

    db_path = str(args.db_path)
    backup_path = None
    if os.path.exists(db_path):
        if not args.replace:
            _finish(BuildReport(Outcome.REFUSED, args.schema_path, db_path), args)
        backup_path = make_backup_path(db_path)
        shutil.copy2(db_path, backup_path)
        os.remove(db_path)
        logger.info("Backed up %s to %s", db_path, backup_path)

    try:
        _build(schema, file_connection_string(db_path))
    except Exception as e:
        logger.exception("Build of %s failed", db_path)
        if os.path.exists(db_path):
            os.remove(db_path)
        if backup_path:
            shutil.copy2(backup_path, db_path)
        _finish(
            BuildReport(
                Outcome.FAILED,
                args.schema_path,
                db_path,
                table_count=table_count,
                backup_path=backup_path,
                restored=backup_path is not None,
                error=str(e),
            ),
            args,
        )

    _finish(
        BuildReport(Outcome.BUILT, args.schema_path, db_path, table_count=table_count, backup_path=backup_path),
        args,
    )


if __name__ == "__main__":
    main()
