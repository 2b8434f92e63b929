"""FastAPI application bootstrap."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .dependencies import config, get_query_engine, get_task_store
from .routes import register_stats_routes, register_task_routes
from .schemas import HealthResponse

__all__ = ["app", "create_app", "get_query_engine", "get_task_store"]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Task Tracker API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Liveness probe."""
        return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc).isoformat())

    register_task_routes(app)
    register_stats_routes(app)

    return app


app = create_app()
