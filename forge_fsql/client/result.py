"""Structured result returned by the remote query endpoint."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class QueryResult:
    """Outcome of one statement sent to the endpoint.

    ``error`` marks a failed call; when it is set the other fields are
    never interpreted.
    """

    rows: Optional[List[Dict[str, Any]]] = None
    affected_rows: Optional[int] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def query_time(self) -> Optional[float]:
        """Elapsed milliseconds recorded by the client, if any."""
        return self.metadata.get("queryTime")

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "QueryResult":
        """Build a result from the endpoint's JSON body."""
        rows = payload.get("rows")
        if rows is not None and not isinstance(rows, list):
            rows = None
        affected = payload.get("affectedRows")
        if not isinstance(affected, int) or isinstance(affected, bool):
            affected = None
        error = payload.get("error")
        if error is not None and not isinstance(error, str):
            error = str(error)
        if not error and rows and not all(isinstance(row, dict) for row in rows):
            error = "Invalid response: rows must be JSON objects"
            rows = None
        metadata = payload.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        return cls(
            rows=rows,
            affected_rows=affected,
            error=error or None,
            metadata=dict(metadata),
        )

    @classmethod
    def failure(cls, message: str) -> "QueryResult":
        return cls(error=message)
