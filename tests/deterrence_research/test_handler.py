"""Test the HTTP entry point with Flask request contexts."""

import json

import flask
import pytest

from src.functions.deterrence_research.core.fetching import SessionFetchError, SessionNotFoundError
from src.functions.deterrence_research.functions import main as handler_module
from src.functions.deterrence_research.functions.main import health_check, research_handler
from tests.deterrence_research.fixtures import make_session, session_record

app = flask.Flask(__name__)


def call(method="POST", body=None, data=None, handler=research_handler):
    kwargs = {"method": method}
    if body is not None:
        kwargs["json"] = body
    elif data is not None:
        kwargs["data"] = data
        kwargs["content_type"] = "application/json"
    with app.test_request_context("/", **kwargs):
        response = handler(flask.request)
    payload = json.loads(response.get_data(as_text=True)) if response.get_data() else None
    return response, payload


class FakeSessionClient:
    """Stands in for the session store client."""
    sessions = []
    error = None

    def __init__(self, base_url, timeout=30):
        self.base_url = base_url

    def list_sessions(self):
        if self.error:
            raise self.error
        return list(self.sessions)

    def get_sessions(self, names):
        if self.error:
            raise self.error
        by_name = {s.session_name: s for s in self.sessions}
        for name in names:
            if name not in by_name:
                raise SessionNotFoundError(name)
        return [by_name[name] for name in names]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SESSION_API_URL", "SESSION_API_TIMEOUT", "CARD_CATALOG_PATH", "DEFAULT_TEAM_FILTER"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_client(monkeypatch):
    FakeSessionClient.sessions = [
        make_session("Alpha", nato_total=120, russia_total=90),
        make_session("Bravo", nato_total=80, russia_total=110),
    ]
    FakeSessionClient.error = None
    monkeypatch.setattr(handler_module, "SessionClient", FakeSessionClient)
    return FakeSessionClient


class TestResearchHandler:
    """Test status codes and response bodies."""

    def test_options_preflight(self):
        response, _ = call(method="OPTIONS")

        assert response.status_code == 204
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_method_not_allowed(self):
        response, payload = call(method="GET")

        assert response.status_code == 405
        assert "POST" in payload["error"]

    def test_invalid_json(self):
        response, payload = call(data="{not json")

        assert response.status_code == 400
        assert payload["error"].startswith("Invalid JSON")

    def test_non_object_body(self):
        response, _ = call(body=["Alpha"])

        assert response.status_code == 400

    def test_inline_sessions(self):
        body = {
            "sessions": [
                session_record("Alpha", nato_total=120, russia_total=90),
                session_record("Bravo", nato_total=80, russia_total=110),
            ],
            "variables": ["nato_total"],
            "grouping_variable": "winner",
        }

        response, payload = call(body=body)

        assert response.status_code == 200
        assert response.headers["Content-Type"] == "application/json"
        assert payload["status"] == "success"
        assert payload["selection"]["session_count"] == 2
        assert payload["summary_stats"]["nato_total"]["mean"] == "100.00"

    def test_invalid_selection(self):
        response, payload = call(body={"sessions": [], "comparison_type": "mixed"})

        assert response.status_code == 422
        assert "comparison type" in payload["error"]

    def test_invalid_inline_sessions(self):
        response, _ = call(body={"sessions": [{"gameState": {}}]})

        assert response.status_code == 422

    def test_fetches_named_sessions(self, fake_client):
        response, payload = call(body={"session_names": ["Bravo"], "question": "Who won?"})

        assert response.status_code == 200
        assert payload["selection"]["session_count"] == 1
        assert "• Russia victories: 1" in payload["answer"]

    def test_pattern_analysis(self, fake_client):
        response, payload = call(body={"pattern_analysis": "generic"})

        assert response.status_code == 200
        analysis = payload["pattern_analysis"]
        assert analysis["headline_insight"].startswith("Comprehensive analysis of 2 sessions")
        assert analysis["patterns"][0] == (
            "Winners average 115 total deterrence vs losers' 85 - a 30 point gap"
        )
        assert len(analysis["visual_suggestions"]) == 6

    def test_unknown_pattern_analysis(self):
        response, payload = call(body={"sessions": [], "pattern_analysis": "deep"})

        assert response.status_code == 422
        assert "pattern analysis" in payload["error"]

    def test_fetches_all_sessions(self, fake_client):
        response, payload = call(body={"variables": ["turn_count"]})

        assert response.status_code == 200
        assert payload["selection"]["session_count"] == 2

    def test_missing_session(self, fake_client):
        response, payload = call(body={"session_names": ["Zulu"]})

        assert response.status_code == 404
        assert payload["error"] == "Session not found: Zulu"

    def test_session_store_down(self, fake_client):
        fake_client.error = SessionFetchError("Session store returned HTTP 503", status_code=503)

        response, payload = call(body={})

        assert response.status_code == 502
        assert "Session store unavailable" in payload["error"]

    def test_misconfiguration(self, monkeypatch):
        monkeypatch.setenv("SESSION_API_TIMEOUT", "forever")

        response, payload = call(body={"sessions": []})

        assert response.status_code == 500
        assert payload["error"] == "Service is misconfigured"

    def test_nan_values_serialize_as_null(self):
        body = {
            "sessions": [
                session_record("A", nato_total=1, russia_total=0),
                session_record("B", nato_total=1, russia_total=0),
                session_record("C", nato_total=5, russia_total=9),
                session_record("D", nato_total=5, russia_total=9),
            ],
            "variables": ["nato_total"],
            "grouping_variable": "winner",
            "methodology": "One-Way ANOVA",
        }

        response, payload = call(body=body)

        assert response.status_code == 200
        assert payload["report"]["inferentialData"]["f_statistic"] is None

    def test_health_check(self):
        response, payload = call(method="GET", handler=health_check)

        assert response.status_code == 200
        assert payload == {"status": "healthy", "service": "deterrence_research"}

    def test_root_deployment_wrapper_exposes_handlers(self):
        import main as deployment

        assert deployment.research_handler is research_handler
        assert deployment.health_check is health_check
