"""Environment variable loading from .env files."""

from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _candidate_env_files(start: Path) -> List[Path]:
    """.env files from the filesystem root down to ``start``, outermost first."""
    candidates = []
    for directory in list(reversed(start.parents)) + [start]:
        candidate = directory / ".env"
        if candidate.exists():
            candidates.append(candidate)
    return candidates


def load_env(env_file: Optional[str] = None, override: bool = False) -> None:
    """Load environment variables from .env files.

    Args:
        env_file: Explicit .env path. If None, every .env between the
                  filesystem root and the working directory is loaded,
                  innermost last.
        override: Whether to override variables already in the environment.
    """
    if env_file:
        env_paths = [Path(env_file)] if Path(env_file).exists() else []
    else:
        env_paths = _candidate_env_files(Path.cwd())

    if not env_paths:
        logger.debug("No .env file found, using system environment")
        return

    for path in dict.fromkeys(env_paths):
        load_dotenv(path, override=override)
        logger.debug(f"Loaded environment from {path}")
