#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Starts the API with auto-reload. The weekly reset scheduler starts with the
application unless WEEKLY_RESET_ENABLED=false.
"""
import os
from pathlib import Path
import sys

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print(f"Starting study room API at http://localhost:{port} (docs: /docs)")

    uvicorn.run(
        "studyroom.main:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level="info",
        timeout_graceful_shutdown=5,
    )
