"""
HTTP client for the game session store and the Word report exporter.

The session store is the only source of session data. Failures are raised as
distinct exception types so callers can tell a missing session from a broken
upstream; nothing is retried.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote
import logging

import requests

from ..contracts.game_session import (
    GameSession,
    SessionValidationError,
    parse_sessions,
    validate_game_session,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class SessionClientError(Exception):
    """Base class for session store failures."""
    pass


class SessionNotFoundError(SessionClientError):
    """Raised when the store has no session with the requested name."""

    def __init__(self, session_name: str):
        self.session_name = session_name
        super().__init__(f"Session not found: {session_name}")


class SessionFetchError(SessionClientError):
    """Raised on network errors, unexpected statuses or unreadable bodies."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ReportExportError(Exception):
    """Raised when the Word report could not be generated."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class SessionClient:
    """
    Reads sessions from the session store API.

    Example:
        client = SessionClient("http://localhost:5000")
        sessions = client.list_sessions()
        session = client.get_session("Exercise Alpha")
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Session store root, e.g. ``http://localhost:5000``
            timeout: Request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def list_sessions(self) -> List[GameSession]:
        """
        Fetch every stored session.

        Raises:
            SessionFetchError: If the request fails or the body is not a
                               valid session array
        """
        payload = self._get_json(f"{self.base_url}/api/sessions")
        try:
            sessions = parse_sessions(payload)
        except SessionValidationError as e:
            raise SessionFetchError(f"Session store returned invalid data: {e}") from e

        logger.info(f"Fetched {len(sessions)} sessions from {self.base_url}")
        return sessions

    def get_session(self, session_name: str) -> GameSession:
        """
        Fetch one session by name.

        Raises:
            SessionNotFoundError: If the store answers 404
            SessionFetchError: On any other failure
        """
        url = f"{self.base_url}/api/sessions/by-name/{quote(session_name, safe='')}"
        payload = self._get_json(url, session_name=session_name)
        try:
            return validate_game_session(payload)
        except SessionValidationError as e:
            raise SessionFetchError(f"Session store returned invalid data: {e}") from e

    def get_sessions(self, session_names: List[str]) -> List[GameSession]:
        """
        Fetch the named sessions one at a time, in the requested order.

        Repeated names are fetched once. The first missing name stops the
        lookup with SessionNotFoundError.
        """
        sessions = [self.get_session(name) for name in dict.fromkeys(session_names)]
        logger.info(f"Fetched {len(sessions)} named sessions from {self.base_url}")
        return sessions

    def generate_word_report(self, report: Dict[str, Any]) -> bytes:
        """
        POST prepared report data and return the generated document.

        Raises:
            ReportExportError: If the exporter is unreachable or answers an error
        """
        url = f"{self.base_url}/api/generate-word-report"
        try:
            response = self.session.post(url, json=report, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Report export request failed: {e}")
            raise ReportExportError(f"Report export failed: {e}") from e

        if not response.ok:
            logger.error(f"Report export returned HTTP {response.status_code}")
            raise ReportExportError(
                f"Report export failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        logger.info(f"Generated Word report ({len(response.content)} bytes)")
        return response.content

    def _get_json(self, url: str, session_name: Optional[str] = None) -> Any:
        logger.debug(f"Fetching {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Session store request failed: {e}")
            raise SessionFetchError(f"Session store request failed: {e}") from e

        if response.status_code == 404 and session_name is not None:
            raise SessionNotFoundError(session_name)
        if not response.ok:
            logger.warning(f"Session store returned HTTP {response.status_code} for {url}")
            raise SessionFetchError(
                f"Session store returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise SessionFetchError(f"Session store returned non-JSON body: {e}") from e
