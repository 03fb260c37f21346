"""Remote query client."""

from .client import ForgeClient, terminate_statement
from .result import QueryResult

__all__ = ["ForgeClient", "QueryResult", "terminate_statement"]
