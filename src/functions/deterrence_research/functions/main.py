"""
Cloud Function HTTP entry point for research analytics.

Exposes the research pipeline as an HTTP API endpoint. Accepts POST requests
with a research selection and either inline sessions or session names to
fetch from the session store.
"""

import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import flask
import functions_framework

# From functions/main.py: functions -> deterrence_research -> functions -> src -> project_root
project_root = Path(__file__).parent.parent.parent.parent.parent.absolute()
sys.path.insert(0, str(project_root))

from src.shared.utils.env import load_env
from src.shared.utils.logging import setup_logging

load_env()
setup_logging()

logger = logging.getLogger(__name__)

from src.shared.utils.config_validator import ConfigurationError
from src.functions.deterrence_research.core.config import load_settings, ResearchSettings
from src.functions.deterrence_research.core.contracts import (
    CardCatalog,
    SessionValidationError,
    parse_sessions,
)
from src.functions.deterrence_research.core.fetching import (
    SessionClient,
    SessionFetchError,
    SessionNotFoundError,
)
from src.functions.deterrence_research.core.pipeline import (
    ResearchPipeline,
    ResearchSelection,
    SelectionError,
)
from src.functions.deterrence_research.core.utils import json_dumps_safe


@lru_cache(maxsize=4)
def _load_catalog(path: Optional[str]) -> CardCatalog:
    """Card catalogs are read once per path and reused across requests."""
    if not path:
        logger.warning("CARD_CATALOG_PATH not set; card names fall back to ids")
        return CardCatalog()
    return CardCatalog.load(path)


@functions_framework.http
def research_handler(request: flask.Request) -> flask.Response:
    """
    HTTP Cloud Function entry point for research analytics.

    Handles:
    - OPTIONS: CORS preflight requests
    - POST: Research analysis requests

    Args:
        request: Flask request object

    Returns:
        Flask Response with JSON data
    """
    if request.method == 'OPTIONS':
        return _cors_response({}, status=204)

    if request.method != 'POST':
        logger.warning(f"Method not allowed: {request.method}")
        return _error_response('Method not allowed. Use POST to submit a research selection.', status=405)

    try:
        try:
            request_data = request.get_json(force=True)
            if not isinstance(request_data, dict):
                raise ValueError("JSON body must be an object")
        except Exception as e:
            logger.error(f"JSON parse error: {e}")
            return _error_response(f'Invalid JSON: {str(e)}', status=400)

        settings = load_settings()

        try:
            selection = ResearchSelection.from_dict(
                request_data, default_team_filter=settings.default_team_filter
            )
        except SelectionError as e:
            logger.warning(f"Invalid selection: {e}")
            return _error_response(str(e), status=422)

        inline_sessions = request_data.get('sessions')
        if inline_sessions is not None:
            try:
                sessions = parse_sessions(inline_sessions)
            except SessionValidationError as e:
                logger.warning(f"Invalid inline sessions: {e}")
                return _error_response(str(e), status=422)
            logger.info(f"Processing research request with {len(sessions)} inline sessions")
        else:
            sessions = _fetch_sessions(settings, selection)
            logger.info(f"Processing research request with {len(sessions)} fetched sessions")

        pipeline = ResearchPipeline(catalog=_load_catalog(settings.card_catalog_path))
        result = pipeline.process(sessions, selection)

        logger.info(
            f"Research request complete [{result.correlation_id}] - Status: {result.status}"
        )
        return _cors_response(result.to_dict())

    except SessionNotFoundError as e:
        logger.warning(str(e))
        return _error_response(str(e), status=404)
    except SessionFetchError as e:
        logger.error(f"Session store error: {e}")
        return _error_response(f'Session store unavailable: {e}', status=502)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return _error_response('Service is misconfigured', status=500)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return _error_response('An unexpected error occurred processing your request', status=500)


@functions_framework.http
def health_check(request: flask.Request) -> flask.Response:
    """Health check endpoint."""
    return _cors_response({"status": "healthy", "service": "deterrence_research"})


def _fetch_sessions(settings: ResearchSettings, selection: ResearchSelection):
    client = SessionClient(settings.session_api_url, timeout=settings.request_timeout_seconds)
    if selection.session_names:
        return client.get_sessions(selection.session_names)
    return client.list_sessions()


def _cors_response(body: dict[str, Any], status: int = 200) -> flask.Response:
    """Create a CORS-enabled response."""
    response = flask.make_response(json_dumps_safe(body, ensure_ascii=False), status)
    response.headers["Content-Type"] = "application/json"
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "POST,OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


def _error_response(message: str, status: int) -> flask.Response:
    """Create an error response."""
    return _cors_response({"error": message}, status=status)
