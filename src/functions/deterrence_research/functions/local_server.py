"""
Local development server for the research analytics Cloud Function.

This file is ONLY for local testing and should NOT be deployed.
"""

import os
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent.parent.parent.parent.absolute()
sys.path.insert(0, str(project_root))

from flask import Flask, request

from src.functions.deterrence_research.functions.main import research_handler

app = Flask(__name__)


@app.route('/', methods=['POST', 'OPTIONS'])
def local_handler():
    """Local development handler that wraps the Cloud Function."""
    return research_handler(request)


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 8080))
    print(f"Starting local server on http://localhost:{port}")
    print(
        f"Test with: curl -X POST http://localhost:{port} -H 'Content-Type: application/json' "
        f"-d '{{\"variables\": [\"nato_total\"], \"grouping_variable\": \"winner\"}}'"
    )
    print("")
    app.run(host='0.0.0.0', port=port, debug=True)
