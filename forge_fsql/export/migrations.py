"""DDL extraction from Forge SQL migration sources."""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

MIGRATION_FILENAMES = ("migration.ts", "migration.js")
SKIP_DIRS = {"node_modules", "dist", ".git", ".next", "build", "coverage"}

_TABLE_CONSTANT = re.compile(
    r"export const (CREATE_\w+_TABLE) = `\s*(CREATE TABLE[^`]+)`", re.DOTALL
)
_VIEW_CONSTANT = re.compile(
    r"export const (CREATE_\w+_VIEW) = `\s*(CREATE (?:OR REPLACE )?VIEW[^`]+)`",
    re.DOTALL,
)
_TABLE_NAME = re.compile(r"CREATE TABLE (?:IF NOT EXISTS )?(\w+)", re.IGNORECASE)
_VIEW_NAME = re.compile(r"CREATE (?:OR REPLACE )?VIEW (\w+)", re.IGNORECASE)


@dataclass
class MigrationDDL:
    """CREATE statements found in a migration file, keyed by object name."""

    tables: Dict[str, str] = field(default_factory=dict)
    views: Dict[str, str] = field(default_factory=dict)

    def merged(self) -> Dict[str, str]:
        combined = dict(self.tables)
        combined.update(self.views)
        return combined

    def __len__(self) -> int:
        return len(self.tables) + len(self.views)


def extract_ddl_from_migrations(path: Union[str, Path]) -> MigrationDDL:
    """Parse ``CREATE TABLE``/``CREATE VIEW`` constants out of a migration file."""
    content = Path(path).read_text(encoding="utf-8")
    ddl = MigrationDDL()

    for match in _TABLE_CONSTANT.finditer(content):
        statement = match.group(2)
        name = _TABLE_NAME.search(statement)
        if name:
            ddl.tables[name.group(1)] = statement.strip()

    for match in _VIEW_CONSTANT.finditer(content):
        statement = match.group(2)
        name = _VIEW_NAME.search(statement)
        if name:
            ddl.views[name.group(1)] = statement.strip()

    return ddl


def find_migration_candidates(root: Optional[Union[str, Path]] = None) -> List[str]:
    """Walk ``root`` for migration files, returning paths relative to it."""
    base = Path(root) if root is not None else Path.cwd()
    results: List[str] = []
    for dirpath, dirnames, filenames in os.walk(base):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        for filename in sorted(filenames):
            if filename in MIGRATION_FILENAMES:
                full = Path(dirpath) / filename
                results.append(str(full.relative_to(base)))
    return results
