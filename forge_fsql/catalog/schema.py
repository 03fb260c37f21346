"""Schema cache snapshot."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class SchemaCache:
    """One generation of table/column metadata.

    Instances are never mutated after construction; a reload builds a new
    one and swaps it in.
    """

    tables: Tuple[str, ...] = ()
    columns: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    all_columns: Tuple[str, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "SchemaCache":
        """Build a cache from ``(table_name, column_name)`` pairs.

        Tables and columns are deduplicated; each table keeps its columns in
        first-seen order.
        """
        per_table: Dict[str, List[str]] = {}
        unique_columns: Dict[str, None] = {}
        for table_name, column_name in pairs:
            table_columns = per_table.setdefault(table_name, [])
            if column_name not in table_columns:
                table_columns.append(column_name)
            unique_columns.setdefault(column_name, None)

        columns = {name: tuple(cols) for name, cols in per_table.items()}
        return cls(
            tables=tuple(per_table),
            columns=columns,
            all_columns=tuple(unique_columns),
        )

    def find_table(self, name: str) -> Optional[str]:
        """Return the cached table name matching ``name`` case-insensitively."""
        lowered = name.lower()
        for table in self.tables:
            if table.lower() == lowered:
                return table
        return None

    def get_columns(self, table: str) -> Tuple[str, ...]:
        return self.columns.get(table, ())

    def is_empty(self) -> bool:
        return not self.tables

    def __repr__(self) -> str:
        return f"SchemaCache(tables={len(self.tables)}, columns={len(self.all_columns)})"
