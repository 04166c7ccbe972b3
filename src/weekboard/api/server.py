"""
ASGI Entry Point for the Weekboard API.

This module exposes the `app` object required by ASGI servers (Uvicorn/Gunicorn).
It loads environment variables from `.env` first so `WEEKBOARD_STATE_DIR` and
friends are in place before the factory opens the persisted state.

Usage
-----
Run via the module entry point:
    $ python -m weekboard.api.server

Or via uvicorn directly (one worker: the engine lives in process memory):
    $ uvicorn weekboard.api.server:app
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

# Load .env BEFORE importing the factory: settings are read at import time.
load_dotenv(dotenv_path=Path(".env"))

from weekboard.api.app import create_app  # noqa: E402

app = create_app()


def main(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Run the API server locally."""
    uvicorn.run(app, host=host, port=port, workers=1, log_level="info")


if __name__ == "__main__":
    main()
