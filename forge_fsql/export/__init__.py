"""SQL dump export."""

from .exporter import ExportError, SqlExporter, TablesAndViews, escape_sql_value
from .migrations import (
    MigrationDDL,
    extract_ddl_from_migrations,
    find_migration_candidates,
)

__all__ = [
    "ExportError",
    "SqlExporter",
    "TablesAndViews",
    "escape_sql_value",
    "MigrationDDL",
    "extract_ddl_from_migrations",
    "find_migration_candidates",
]
