"""Deployment wrapper for the deterrence research Cloud Function.

Cloud Functions deploys from the repository root; set the entry point to
``research_handler`` (or ``health_check`` for the liveness check).
"""

from __future__ import annotations

import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.functions.deterrence_research.functions.main import health_check, research_handler

__all__ = ["research_handler", "health_check"]
