"""
Bootstrap for CLI environment setup.

Puts the project root on the Python path and loads the environment before a
CLI script imports anything from ``src``. Import it at the top of every CLI
script.
"""

import sys
from pathlib import Path

# scripts -> deterrence_research -> functions -> src -> project_root
project_root = Path(__file__).resolve().parents[4]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.shared.utils.env import load_env
from src.shared.utils.logging import setup_logging

load_env()
setup_logging()
