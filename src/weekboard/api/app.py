"""
FastAPI Application Factory & Configuration.

This module builds the HTTP surface over one planner engine. It is responsible for:
1.  **Middleware Setup**: CORS for a browser frontend served from another origin.
2.  **Exception Handling**: caller errors (``ValueError``) become structured 400 JSON.
3.  **Routing**: Mounting the history and planner routers.
4.  **Engine ownership**: the engine lives on ``app.state`` for the app's lifetime.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`). Tests inject an
engine backed by a :class:`~weekboard.core.persistence.MemoryStore`; the server
entry point lets the factory open the file-backed default.

Route handlers are plain ``def`` functions that FastAPI runs in a thread pool;
they take ``app.state.engine_lock`` around every engine call, and the server
runs a single worker.
"""

from __future__ import annotations

import threading

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from weekboard import __version__
from weekboard.api.routers import history, planner
from weekboard.core.settings import get_logger, load_settings
from weekboard.planner import PlannerEngine, open_planner

logger = get_logger("weekboard.api")


def create_app(engine: PlannerEngine | None = None) -> FastAPI:
    """
    Construct and configure the Weekboard FastAPI application.

    Parameters
    ----------
    engine : PlannerEngine | None
        Engine to serve; when omitted one is opened from settings.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    app = FastAPI(
        title="Weekboard API",
        description="Weekly task board with history preview and rollback",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.engine = engine if engine is not None else open_planner()
    app.state.engine_lock = threading.Lock()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Map Python ValueErrors (rejected commands) to HTTP 400 Bad Request."""
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=400,
            content={
                "error": "Bad Request",
                "detail": str(exc),
            },
        )

    app.include_router(history.router)
    app.include_router(planner.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness probe."""
        return {
            "status": "ok",
            "environment": load_settings().environment,
            "version": __version__,
        }

    return app


__all__ = ["create_app"]
