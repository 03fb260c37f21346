"""Shared fixtures for fsql tests."""

import logging
from typing import Dict, List, Optional

import pytest

from forge_fsql.catalog import SchemaCatalog
from forge_fsql.cli.formatter import ResultFormatter
from forge_fsql.client import QueryResult


class FakeClient:
    """Stands in for ForgeClient; answers by statement prefix."""

    def __init__(self, responses: Optional[Dict[str, QueryResult]] = None):
        self.responses = dict(responses or {})
        self.executed: List[str] = []
        self.default = QueryResult(rows=[])

    def execute(self, sql: str) -> QueryResult:
        self.executed.append(sql)
        stripped = sql.strip()
        for prefix, result in self.responses.items():
            if stripped.startswith(prefix):
                return result
        return self.default

    def test_connection(self) -> bool:
        return self.execute("SELECT 1 as test").ok


METADATA_ROWS = [
    {"table_name": "users", "column_name": "id"},
    {"table_name": "users", "column_name": "name"},
    {"table_name": "users", "column_name": "email"},
    {"table_name": "posts", "column_name": "id"},
    {"table_name": "posts", "column_name": "title"},
    {"table_name": "posts", "column_name": "user_id"},
    {"table_name": "posts", "column_name": "content"},
    {"table_name": "comments", "column_name": "id"},
    {"table_name": "comments", "column_name": "post_id"},
    {"table_name": "comments", "column_name": "user_id"},
    {"table_name": "comments", "column_name": "text"},
]


@pytest.fixture
def fake_client():
    """Client whose metadata query returns the users/posts/comments schema."""
    return FakeClient(
        {"SELECT table_name, column_name\n": QueryResult(rows=METADATA_ROWS)}
    )


@pytest.fixture
def schema_catalog(fake_client):
    """Catalog loaded from the fake client's metadata."""
    catalog = SchemaCatalog()
    catalog.load_schema(fake_client)
    return catalog


@pytest.fixture
def formatter():
    """Formatter with colour disabled so output can be compared verbatim."""
    return ResultFormatter(color=False)


@pytest.fixture
def make_client():
    """Factory for fake clients with custom responses."""
    return FakeClient


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLIs reconfigure the root logger; undo that after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
