"""HTTP client for the remote SQL webtrigger."""

import time
from typing import Optional

import requests

from ..utils.logging import get_contextual_logger
from .result import QueryResult

DEFAULT_TIMEOUT = 30.0
PROBE_STATEMENT = "SELECT 1 as test"
TIMEOUT_MESSAGE = "Query timeout exceeded"


def terminate_statement(sql: str) -> str:
    """Append a statement delimiter when the text lacks one."""
    if sql.strip().endswith(";"):
        return sql
    return f"{sql};"


class ForgeClient:
    """Sends SQL text to the webtrigger and returns structured results.

    Transport failures never escape ``execute``: timeouts, connection
    errors, non-2xx responses and undecodable bodies all come back as a
    ``QueryResult`` with ``error`` populated.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize client.

        Args:
            url: Webtrigger URL accepting ``{"query": ...}`` POST bodies
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = get_contextual_logger(__name__, {"endpoint": url})

    def execute(self, sql: str) -> QueryResult:
        """Run one statement against the endpoint.

        Args:
            sql: SQL text; a trailing ``;`` is added when missing

        Returns:
            Query result, with ``metadata["queryTime"]`` in milliseconds
            on success
        """
        statement = terminate_statement(sql)
        start = time.monotonic()
        self.logger.debug("Sending statement: %s", statement)

        try:
            response = self.session.post(
                self.url,
                json={"query": statement},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.Timeout:
            self.logger.warning("Query timed out after %ss", self.timeout)
            return QueryResult.failure(TIMEOUT_MESSAGE)
        except requests.RequestException as exc:
            self.logger.warning("Request failed: %s", exc)
            return QueryResult.failure(str(exc) or "Unknown error")
        except ValueError as exc:
            # urllib3 rejects bad timeout values before any I/O
            self.logger.warning("Request rejected: %s", exc)
            return QueryResult.failure(f"Invalid request: {exc}")

        if not response.ok:
            self.logger.debug("Endpoint returned HTTP %s", response.status_code)
            return QueryResult.failure(f"HTTP {response.status_code}: {response.text}")

        try:
            payload = response.json()
        except ValueError as exc:
            self.logger.warning("Endpoint returned invalid JSON: %s", exc)
            return QueryResult.failure(f"Invalid JSON response: {exc}")

        if not isinstance(payload, dict):
            return QueryResult.failure("Invalid response: expected a JSON object")

        elapsed = (time.monotonic() - start) * 1000
        result = QueryResult.from_payload(payload)
        result.metadata["queryTime"] = elapsed
        self.logger.debug("Statement completed in %.1f ms", elapsed)
        return result

    def test_connection(self) -> bool:
        """Run a trivial probe statement and report whether it succeeded."""
        try:
            result = self.execute(PROBE_STATEMENT)
        except Exception:
            self.logger.debug("Connection probe raised", exc_info=True)
            return False
        return result.ok

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"ForgeClient(url={self.url!r}, timeout={self.timeout})"
