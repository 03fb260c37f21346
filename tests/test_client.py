"""Tests for the remote query client."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from forge_fsql.client import ForgeClient, QueryResult, terminate_statement

URL = "https://example.test/webtrigger"


def _response(status=200, payload=None, text="", json_error=None):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.text = text
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def client():
    """Client with a short timeout."""
    return ForgeClient(URL, timeout=5)


def test_terminate_statement_appends_semicolon():
    """Missing delimiters are appended, existing ones kept."""
    assert terminate_statement("SELECT 1") == "SELECT 1;"
    assert terminate_statement("SELECT 1;") == "SELECT 1;"
    assert terminate_statement("SELECT 1;  ") == "SELECT 1;  "


def test_execute_posts_query_body(client):
    """The statement is sent as a JSON body with the configured timeout."""
    with patch.object(
        requests.Session, "post", return_value=_response(payload={"rows": []})
    ) as post:
        client.execute("SELECT 1")

    args, kwargs = post.call_args
    assert args[0] == URL
    assert kwargs["json"] == {"query": "SELECT 1;"}
    assert kwargs["timeout"] == 5
    assert kwargs["headers"]["Content-Type"] == "application/json"


def test_execute_returns_rows_and_query_time(client):
    """Successful payloads are mapped and timed."""
    payload = {"rows": [{"id": 1}], "metadata": {"source": "forge"}}
    with patch.object(requests.Session, "post", return_value=_response(payload=payload)):
        result = client.execute("SELECT id FROM users;")

    assert result.ok
    assert result.rows == [{"id": 1}]
    assert result.metadata["source"] == "forge"
    assert result.query_time is not None
    assert result.query_time >= 0


def test_execute_maps_affected_rows(client):
    """affectedRows becomes affected_rows."""
    with patch.object(
        requests.Session, "post", return_value=_response(payload={"affectedRows": 3})
    ):
        result = client.execute("DELETE FROM users")

    assert result.affected_rows == 3
    assert result.rows is None


def test_non_2xx_response_becomes_error(client):
    """HTTP failures carry status and body text."""
    with patch.object(
        requests.Session,
        "post",
        return_value=_response(status=500, text='{"error":"boom"}'),
    ):
        result = client.execute("SELECT 1")

    assert result.error == 'HTTP 500: {"error":"boom"}'
    assert not result.ok


def test_timeout_becomes_error(client):
    """Timeouts resolve to an error result instead of raising."""
    with patch.object(requests.Session, "post", side_effect=requests.Timeout()):
        result = client.execute("SELECT SLEEP(100)")

    assert result.error == "Query timeout exceeded"


def test_connection_error_becomes_error(client):
    """Transport failures resolve to an error result."""
    with patch.object(
        requests.Session, "post", side_effect=requests.ConnectionError("refused")
    ):
        result = client.execute("SELECT 1")

    assert result.error == "refused"


def test_invalid_json_becomes_error(client):
    """Undecodable bodies resolve to an error result."""
    with patch.object(
        requests.Session,
        "post",
        return_value=_response(json_error=ValueError("Expecting value")),
    ):
        result = client.execute("SELECT 1")

    assert result.error.startswith("Invalid JSON response")


def test_payload_error_is_preserved(client):
    """An error reported inside a 2xx body is surfaced."""
    payload = {"success": False, "error": "Table 'x' doesn't exist"}
    with patch.object(requests.Session, "post", return_value=_response(payload=payload)):
        result = client.execute("SELECT * FROM x")

    assert result.error == "Table 'x' doesn't exist"


def test_test_connection_true_on_success(client):
    """A successful probe reports True."""
    with patch.object(
        requests.Session, "post", return_value=_response(payload={"rows": [{"test": 1}]})
    ) as post:
        assert client.test_connection() is True

    assert post.call_args.kwargs["json"] == {"query": "SELECT 1 as test;"}


def test_test_connection_false_on_error(client):
    """Failed probes report False."""
    with patch.object(requests.Session, "post", side_effect=requests.ConnectionError("down")):
        assert client.test_connection() is False


def test_test_connection_swallows_unexpected_errors(client):
    """Even unexpected exceptions from execute are swallowed."""
    with patch.object(ForgeClient, "execute", side_effect=RuntimeError("bug")):
        assert client.test_connection() is False


def test_query_result_from_payload_ignores_bad_shapes():
    """Malformed fields are dropped rather than trusted."""
    result = QueryResult.from_payload(
        {"rows": "nope", "affectedRows": True, "metadata": []}
    )
    assert result.rows is None
    assert result.affected_rows is None
    assert result.metadata == {}


def test_client_context_manager_closes_session():
    """Leaving the context closes the HTTP session."""
    session = MagicMock()
    with ForgeClient(URL, session=session) as client:
        assert client.session is session
    session.close.assert_called_once()


def test_query_result_rejects_non_object_rows():
    """Rows that are not JSON objects become an error result."""
    result = QueryResult.from_payload({"rows": [[1, 2], [3, 4]]})
    assert result.ok is False
    assert result.error == "Invalid response: rows must be JSON objects"
    assert result.rows is None


def test_query_result_keeps_endpoint_error_over_row_shape():
    """An error reported by the endpoint wins over the row-shape message."""
    result = QueryResult.from_payload({"rows": [1], "error": "denied"})
    assert result.error == "denied"


def test_non_object_rows_from_endpoint_become_error(client):
    """The client never hands malformed rows to callers."""
    with patch.object(
        requests.Session, "post", return_value=_response(payload={"rows": [[1, 2]]})
    ):
        result = client.execute("SELECT 1")

    assert result.error == "Invalid response: rows must be JSON objects"


@pytest.mark.parametrize("timeout", [0, -1])
def test_invalid_timeout_becomes_error(timeout):
    """A timeout urllib3 refuses is reported, not raised."""
    error = ValueError(
        f"Attempted to set connect timeout to {timeout}, but the timeout cannot be set "
        "to a value less than or equal to 0."
    )
    bad_client = ForgeClient(URL, timeout=timeout)
    with patch.object(requests.Session, "post", side_effect=error):
        result = bad_client.execute("SELECT 1")
        connected = bad_client.test_connection()

    assert result.ok is False
    assert result.error.startswith("Invalid request: Attempted to set connect timeout")
    assert connected is False
