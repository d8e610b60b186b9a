"""
Environment variable validation with readable errors.

Used by the settings loaders to turn raw environment strings into typed
values before they reach pydantic models.
"""

import os
from typing import Optional, Sequence


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def require_env(name: str, description: Optional[str] = None) -> str:
    """
    Return a required environment variable.

    Raises:
        ConfigurationError: If the variable is not set or empty
    """
    value = os.getenv(name)
    if not value:
        desc_msg = f" ({description})" if description else ""
        raise ConfigurationError(
            f"Missing required environment variable: {name}{desc_msg}\n"
            f"Please set {name} in your .env file or environment."
        )
    return value


def validate_int_env(
    name: str,
    default: Optional[int] = None,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> int:
    """
    Read an integer environment variable within optional bounds.

    Raises:
        ConfigurationError: If the value is missing without a default, not an
                            integer, or out of bounds
    """
    value_str = os.getenv(name)
    if not value_str:
        if default is None:
            raise ConfigurationError(f"Missing required integer environment variable: {name}")
        return default

    try:
        value = int(value_str)
    except ValueError:
        raise ConfigurationError(
            f"Invalid integer value for {name}: '{value_str}'\n"
            f"Expected an integer value."
        )

    if min_value is not None and value < min_value:
        raise ConfigurationError(
            f"Value for {name} ({value}) is below minimum allowed value ({min_value})"
        )
    if max_value is not None and value > max_value:
        raise ConfigurationError(
            f"Value for {name} ({value}) exceeds maximum allowed value ({max_value})"
        )
    return value


def validate_choice_env(
    name: str,
    choices: Sequence[str],
    default: Optional[str] = None,
) -> str:
    """
    Read an environment variable restricted to ``choices``.

    Matching is case-insensitive; the canonical spelling from ``choices`` is
    returned.

    Raises:
        ConfigurationError: If the value is missing without a default or not allowed
    """
    value = os.getenv(name)
    if not value:
        if default is None:
            raise ConfigurationError(f"Missing required environment variable: {name}")
        return default

    by_lower = {choice.lower(): choice for choice in choices}
    if value.lower() not in by_lower:
        raise ConfigurationError(
            f"Invalid value for {name}: '{value}'\n"
            f"Allowed values: {', '.join(choices)}"
        )
    return by_lower[value.lower()]
