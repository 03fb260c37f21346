"""Catalog owning the schema cache used for completion."""

import logging
import time
from typing import Any, Iterator, List, Mapping, Optional, Tuple

from ..client import ForgeClient
from .schema import SchemaCache

logger = logging.getLogger(__name__)

METADATA_QUERY = """
    SELECT table_name, column_name
    FROM information_schema.columns
    WHERE table_schema = DATABASE()
    ORDER BY table_name, ordinal_position
"""


class SchemaLoadError(RuntimeError):
    """Raised when the metadata query fails."""


def normalize_metadata_row(row: Mapping[str, Any]) -> Optional[Tuple[str, str]]:
    """Reduce one metadata row to a ``(table, column)`` pair.

    Backends disagree on the casing of information_schema column labels, so
    both ``table_name`` and ``TABLE_NAME`` are accepted. Rows missing either
    value yield ``None``.
    """
    table_name = row.get("table_name") or row.get("TABLE_NAME")
    column_name = row.get("column_name") or row.get("COLUMN_NAME")
    if not table_name or not column_name:
        return None
    return str(table_name), str(column_name)


def _iter_pairs(rows: List[Mapping[str, Any]]) -> Iterator[Tuple[str, str]]:
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        pair = normalize_metadata_row(row)
        if pair is not None:
            yield pair


class SchemaCatalog:
    """Holds the current schema cache generation.

    Readers call ``get_schema_cache`` and always receive a complete
    snapshot; ``load_schema`` builds the next snapshot off to the side and
    installs it with a single assignment.
    """

    def __init__(self, cache: Optional[SchemaCache] = None):
        self._cache = cache or SchemaCache()
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def get_schema_cache(self) -> SchemaCache:
        return self._cache

    def load_schema(self, client: ForgeClient) -> float:
        """Reload table/column metadata through ``client``.

        Args:
            client: Client used to run the metadata query

        Returns:
            Elapsed time in milliseconds

        Raises:
            SchemaLoadError: If the metadata query fails; the previous
                generation stays installed
        """
        start = time.monotonic()
        result = client.execute(METADATA_QUERY)
        if result.error:
            logger.warning("Schema load failed: %s", result.error)
            raise SchemaLoadError(result.error)

        cache = SchemaCache.from_pairs(_iter_pairs(result.rows or []))
        self._cache = cache
        self._loaded = True

        elapsed = (time.monotonic() - start) * 1000
        logger.info(
            "Loaded schema: %d tables, %d columns in %.1f ms",
            len(cache.tables),
            len(cache.all_columns),
            elapsed,
        )
        return elapsed

    def __repr__(self) -> str:
        return f"SchemaCatalog({self._cache!r})"
