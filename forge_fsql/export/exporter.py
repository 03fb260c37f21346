"""MySQL-style dump of a Forge SQL database through the webtrigger."""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from ..client import ForgeClient

logger = logging.getLogger(__name__)

_FORGE_SCHEMA_QUALIFIER = re.compile(r"`forge_[a-f0-9]+`\.")


class ExportError(RuntimeError):
    """Raised when metadata required for the dump cannot be fetched."""


@dataclass
class TablesAndViews:
    tables: List[str] = field(default_factory=list)
    views: List[str] = field(default_factory=list)


def escape_sql_value(value: Any) -> str:
    """Render a Python value as a SQL literal for an INSERT statement."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (dict, list)):
        text = json.dumps(value, default=str)
    else:
        text = str(value)
    escaped = text.replace("\\", "\\\\").replace("'", "''")
    return f"'{escaped}'"


class SqlExporter:
    """Builds a SQL dump of tables, views and (optionally) data.

    DDL comes from ``ddl_overrides`` when an object is listed there
    (typically extracted from migration sources) and from the live
    database otherwise.
    """

    def __init__(
        self,
        client: ForgeClient,
        schema_only: bool = False,
        ddl_overrides: Optional[Dict[str, str]] = None,
        progress: Callable[[str], None] = logger.info,
    ):
        self.client = client
        self.schema_only = schema_only
        self.ddl_overrides = dict(ddl_overrides or {})
        self.progress = progress
        self._lines: List[str] = []

    def emit(self, line: str = "") -> None:
        self._lines.append(line)

    def export(self) -> str:
        """Run the export and return the dump text."""
        self._lines = []
        self.emit("-- Export generated by fsql-export")
        if self.schema_only:
            self.emit("-- Schema only mode")
        self.emit(f"-- Generated at {datetime.now(timezone.utc).isoformat()}")
        self.emit("SET FOREIGN_KEY_CHECKS=0;")
        self.emit('SET SQL_MODE="ANSI_QUOTES,NO_AUTO_VALUE_ON_ZERO";')
        self.emit('SET time_zone = "+00:00";')

        objects = self.get_tables_and_views()

        # tables first so views can reference them
        for table in objects.tables:
            self.progress(f"Processing table: {table}...")
            self.generate_create_table(table)
            if not self.schema_only:
                columns = self.get_columns(table)
                self.dump_data(table, columns)

        for view in objects.views:
            self.progress(f"Processing view: {view}...")
            self.generate_create_view(view)

        self.emit("")
        self.emit("SET FOREIGN_KEY_CHECKS=1;")
        return "\n".join(self._lines) + "\n"

    def get_tables_and_views(self) -> TablesAndViews:
        result = self.client.execute("SHOW FULL TABLES")
        if result.error:
            raise ExportError(f"Failed to get tables: {result.error}")

        objects = TablesAndViews()
        for row in result.rows or []:
            name_key = next((k for k in row if k.startswith("Tables_in_")), None)
            if name_key is None:
                continue
            name = str(row[name_key])
            if row.get("Table_type") == "VIEW":
                objects.views.append(name)
            else:
                objects.tables.append(name)
        return objects

    def generate_create_table(self, table: str) -> None:
        self.emit("")
        self.emit(f"-- Table structure for table `{table}`")
        self.emit(f"DROP TABLE IF EXISTS `{table}`;")

        ddl = self.ddl_overrides.get(table)
        if ddl:
            self.emit(f"{ddl};")
            self.emit("")
            return

        self.progress(f"DDL for {table} not in migrations, using SHOW CREATE TABLE")
        result = self.client.execute(f"SHOW CREATE TABLE {table}")
        if result.error:
            logger.warning("SHOW CREATE TABLE failed for %s: %s", table, result.error)
            return
        if not result.rows:
            return
        create_sql = result.rows[0].get("Create Table")
        if create_sql:
            self.emit(f"{create_sql};")
            self.emit("")

    def generate_create_view(self, view: str) -> None:
        self.emit("")
        self.emit(f"-- View structure for view `{view}`")
        self.emit(f"DROP VIEW IF EXISTS `{view}`;")

        ddl = self.ddl_overrides.get(view)
        if ddl:
            self.emit(f"{ddl};")
            self.emit("")
            return

        self.progress(f"DDL for view {view} not in migrations, using INFORMATION_SCHEMA")
        result = self.client.execute(
            "SELECT VIEW_DEFINITION FROM INFORMATION_SCHEMA.VIEWS "
            f"WHERE TABLE_NAME = '{view}' AND TABLE_SCHEMA = DATABASE()"
        )
        if result.error:
            logger.warning("Error fetching view definition for %s: %s", view, result.error)
            return

        definition = result.rows[0].get("VIEW_DEFINITION") if result.rows else None
        if not definition:
            logger.warning("Could not get definition for view %s", view)
            return
        definition = _FORGE_SCHEMA_QUALIFIER.sub("", definition)
        self.emit(f"CREATE VIEW `{view}` AS {definition};")
        self.emit("")

    def get_columns(self, table: str) -> List[str]:
        """Non-generated column names of ``table``."""
        result = self.client.execute(f"SHOW COLUMNS FROM {table}")
        if result.error:
            raise ExportError(f"Failed to get columns for {table}: {result.error}")
        return [
            str(row["Field"])
            for row in result.rows or []
            if "GENERATED" not in str(row.get("Extra") or "")
        ]

    def dump_data(self, table: str, columns: List[str]) -> None:
        self.progress(f"Fetching rows for {table}...")
        result = self.client.execute(f"SELECT * FROM {table}")
        if result.error:
            logger.warning("Error fetching data for %s: %s", table, result.error)
            return

        rows = result.rows or []
        if not rows:
            return

        self.emit(f"-- Dumping data for table `{table}`")
        self.emit(f"LOCK TABLES `{table}` WRITE;")
        column_list = ", ".join(f"`{column}`" for column in columns)
        self.emit(f"INSERT INTO `{table}` ({column_list}) VALUES")
        values = []
        for row in rows:
            rendered = ", ".join(escape_sql_value(row.get(column)) for column in columns)
            values.append(f"({rendered})")
        self.emit(",\n".join(values) + ";")
        self.emit("UNLOCK TABLES;")
