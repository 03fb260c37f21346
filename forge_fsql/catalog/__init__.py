"""Schema catalog backing completion and the refresh command."""

from .catalog import (
    SchemaCatalog,
    SchemaLoadError,
    METADATA_QUERY,
    normalize_metadata_row,
)
from .schema import SchemaCache

__all__ = [
    "SchemaCatalog",
    "SchemaCache",
    "SchemaLoadError",
    "METADATA_QUERY",
    "normalize_metadata_row",
]
