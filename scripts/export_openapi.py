#!/usr/bin/env python3
"""Export the API's OpenAPI document.

Usage:
    python scripts/export_openapi.py [output-path]

Writes public/api-documentation/openapi.json by default.
"""

import json
import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from account_api.main import app

DEFAULT_OUTPUT = Path("public/api-documentation/openapi.json")


def export_openapi(output: Path = DEFAULT_OUTPUT) -> Path:
    """Write the OpenAPI schema to a file and return its path."""
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(app.openapi(), indent=2))
    return output


if __name__ == "__main__":
    path = export_openapi(Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_OUTPUT)
    print(f"Api documentation generated successfully! ({path})")
