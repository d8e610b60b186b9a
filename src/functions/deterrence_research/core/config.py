"""Settings for the research analytics service."""

from __future__ import annotations

from typing import Literal, Optional
import logging
import os

from pydantic import BaseModel, Field, field_validator

from src.shared.utils.config_validator import validate_choice_env, validate_int_env
from src.shared.utils.env import load_env
from .processing.card_purchases import TEAM_FILTERS

logger = logging.getLogger(__name__)

DEFAULT_SESSION_API_URL = "http://localhost:5000"


class ResearchSettings(BaseModel):
    """Where sessions come from and how the analytics are parameterised."""

    session_api_url: str = Field(
        default=DEFAULT_SESSION_API_URL,
        description="Root URL of the game session store API",
    )
    request_timeout_seconds: int = Field(
        default=30,
        ge=1,
        le=120,
        description="Timeout for session store and report export calls",
    )
    card_catalog_path: Optional[str] = Field(
        default=None,
        description="Path to a JSON array of card records",
    )
    default_team_filter: Literal["both", "NATO", "Russia"] = Field(
        default="both",
        description="Team filter used when a request does not set one",
    )

    @field_validator("session_api_url")
    @classmethod
    def _validate_session_api_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            msg = "session_api_url must start with http:// or https://"
            raise ValueError(msg)
        return value


def load_settings(env_file: Optional[str] = None) -> ResearchSettings:
    """
    Build settings from the environment (after loading .env files).

    Reads SESSION_API_URL, SESSION_API_TIMEOUT, CARD_CATALOG_PATH and
    DEFAULT_TEAM_FILTER.

    Raises:
        ConfigurationError: If a variable holds an unusable value
        pydantic.ValidationError: If the combined settings are invalid
    """
    load_env(env_file)

    settings = ResearchSettings(
        session_api_url=os.getenv("SESSION_API_URL") or DEFAULT_SESSION_API_URL,
        request_timeout_seconds=validate_int_env(
            "SESSION_API_TIMEOUT", default=30, min_value=1, max_value=120
        ),
        card_catalog_path=os.getenv("CARD_CATALOG_PATH") or None,
        default_team_filter=validate_choice_env(
            "DEFAULT_TEAM_FILTER", list(TEAM_FILTERS), default="both"
        ),
    )
    logger.debug(f"Loaded research settings: {settings.model_dump()}")
    return settings
