# fluent_sqlite/cli_utils.py
"""
Outcome reporting for the fluent-sqlite command.

Each run ends in one BuildReport. print_report renders it as:
 - a one-line summary (always, unless quiet);
 - an "Actionable:" block when the user can fix the situation with a rerun;
 - a "Details:" block (backup / restore paths) only when verbose.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class Outcome(str, Enum):
    VALIDATED = "validated"
    BUILT = "built"
    REFUSED = "refused"
    FAILED = "failed"


@dataclass
class BuildReport:
    outcome: Outcome
    schema_path: str
    db_path: Optional[str] = None
    table_count: int = 0
    backup_path: Optional[str] = None
    restored: bool = False
    error: Optional[str] = None

    @property
    def exit_code(self) -> int:
        return 1 if self.outcome in (Outcome.REFUSED, Outcome.FAILED) else 0

    def summary(self) -> str:
        if self.outcome == Outcome.VALIDATED:
            return f"Schema OK: {self.table_count} table(s) built in memory."
        if self.outcome == Outcome.BUILT:
            return f"Built {self.db_path} ({self.table_count} table(s))."
        if self.outcome == Outcome.REFUSED:
            return f"Database file already exists: {self.db_path}"
        first_line = (self.error or "").strip().splitlines()[:1]
        return "Schema build failed: " + (first_line[0] if first_line else "unknown error")

    def action(self) -> Optional[str]:
        if self.outcome == Outcome.REFUSED:
            return f"fluent-sqlite {self.schema_path} {self.db_path} --replace"
        return None

    def details(self) -> List[str]:
        lines = []
        if self.backup_path and self.restored:
            lines.append(f"Previous database restored from {self.backup_path}")
        elif self.backup_path:
            lines.append(f"Previous database backed up to {self.backup_path}")
        if self.outcome == Outcome.FAILED and self.db_path and not self.backup_path:
            lines.append(f"No database left at {self.db_path}")
        return lines


def print_report(report: BuildReport, verbose: bool = False, quiet: bool = False) -> None:
    if quiet:
        return

    print(report.summary())

    action = report.action()
    if action:
        print()
        print("Actionable:")
        print("  " + action)

    details = report.details()
    if verbose and details:
        print()
        print("Details:")
        for line in details:
            print("  " + line)
