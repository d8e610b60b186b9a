"""Session store and report exporter access."""

from .session_client import (
    SessionClient,
    SessionClientError,
    SessionNotFoundError,
    SessionFetchError,
    ReportExportError,
)

__all__ = [
    "SessionClient",
    "SessionClientError",
    "SessionNotFoundError",
    "SessionFetchError",
    "ReportExportError",
]
