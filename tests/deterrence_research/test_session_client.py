"""Test the session store client with a fake HTTP session."""

from typing import Any, List, Optional

import pytest
import requests

from src.functions.deterrence_research.core.fetching import (
    ReportExportError,
    SessionClient,
    SessionFetchError,
    SessionNotFoundError,
)
from tests.deterrence_research.fixtures import session_record


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, content: bytes = b""):
        self.status_code = status_code
        self._payload = payload
        self.content = content

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeHttpSession:
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, *responses):
        self.headers = {}
        self._responses = list(responses)
        self.calls: List[tuple] = []

    def _next(self):
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url: str, timeout: Optional[int] = None):
        self.calls.append(("GET", url, timeout))
        return self._next()

    def post(self, url: str, json: Any = None, timeout: Optional[int] = None):
        self.calls.append(("POST", url, json))
        return self._next()


def make_client(*responses) -> SessionClient:
    return SessionClient("http://store.test/", timeout=7, session=FakeHttpSession(*responses))


class TestSessionClient:
    """Test session listing and lookup."""

    def test_list_sessions(self):
        client = make_client(FakeResponse(payload=[session_record("Alpha"), session_record("Bravo")]))

        sessions = client.list_sessions()

        assert [s.session_name for s in sessions] == ["Alpha", "Bravo"]
        assert client.session.calls == [("GET", "http://store.test/api/sessions", 7)]
        assert client.session.headers["Accept"] == "application/json"

    def test_get_session_quotes_name(self):
        client = make_client(FakeResponse(payload=session_record("Exercise Alpha")))

        session = client.get_session("Exercise Alpha")

        assert session.session_name == "Exercise Alpha"
        assert client.session.calls[0][1] == (
            "http://store.test/api/sessions/by-name/Exercise%20Alpha"
        )

    def test_missing_session(self):
        client = make_client(FakeResponse(status_code=404))

        with pytest.raises(SessionNotFoundError, match="Session not found: Ghost"):
            client.get_session("Ghost")

    def test_server_error(self):
        client = make_client(FakeResponse(status_code=500))

        with pytest.raises(SessionFetchError) as exc_info:
            client.list_sessions()

        assert exc_info.value.status_code == 500

    def test_network_error(self):
        client = make_client(requests.ConnectionError("connection refused"))

        with pytest.raises(SessionFetchError, match="request failed"):
            client.list_sessions()

    def test_non_json_body(self):
        client = make_client(FakeResponse(payload=None))

        with pytest.raises(SessionFetchError, match="non-JSON"):
            client.list_sessions()

    def test_invalid_session_payload(self):
        client = make_client(FakeResponse(payload={"sessions": []}))

        with pytest.raises(SessionFetchError, match="invalid data"):
            client.list_sessions()

    def test_get_sessions_fetches_each_name_once(self):
        client = make_client(
            FakeResponse(payload=session_record("Charlie")),
            FakeResponse(payload=session_record("Alpha")),
        )

        sessions = client.get_sessions(["Charlie", "Alpha", "Charlie"])

        assert [s.session_name for s in sessions] == ["Charlie", "Alpha"]
        assert [call[1] for call in client.session.calls] == [
            "http://store.test/api/sessions/by-name/Charlie",
            "http://store.test/api/sessions/by-name/Alpha",
        ]

    def test_get_sessions_stops_at_first_missing(self):
        client = make_client(
            FakeResponse(payload=session_record("Alpha")),
            FakeResponse(status_code=404),
        )

        with pytest.raises(SessionNotFoundError) as exc_info:
            client.get_sessions(["Alpha", "Zulu", "Yankee"])

        assert exc_info.value.session_name == "Zulu"
        assert len(client.session.calls) == 2


class TestReportExport:
    """Test the Word report export call."""

    def test_returns_document_bytes(self):
        client = make_client(FakeResponse(content=b"PK\x03\x04docx"))

        document = client.generate_word_report({"methodology": "One-Way ANOVA"})

        assert document == b"PK\x03\x04docx"
        method, url, body = client.session.calls[0]
        assert (method, url) == ("POST", "http://store.test/api/generate-word-report")
        assert body == {"methodology": "One-Way ANOVA"}

    def test_error_status(self):
        client = make_client(FakeResponse(status_code=500))

        with pytest.raises(ReportExportError) as exc_info:
            client.generate_word_report({})

        assert exc_info.value.status_code == 500

    def test_unreachable_exporter(self):
        client = make_client(requests.Timeout("timed out"))

        with pytest.raises(ReportExportError, match="timed out"):
            client.generate_word_report({})
