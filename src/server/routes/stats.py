"""Statistics endpoints."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException

from src.tasks import ValidationError

from ..dependencies import (
    get_query_engine,
    serialize_stats,
    serialize_tag_stats,
    serialize_tasks,
    serialize_trend,
)
from ..schemas import (
    CompletionTrendResponse,
    OverdueResponse,
    PriorityTasksResponse,
    StatsResponse,
    StatusTasksResponse,
    TagStatsResponse,
)
from .tasks import validation_failed

logger = logging.getLogger(__name__)


def register_stats_routes(app: FastAPI) -> None:
    """Register aggregation endpoints."""

    @app.get("/api/stats", response_model=StatsResponse)
    async def get_stats() -> StatsResponse:
        """Status/priority breakdown, overdue count and completion rate."""
        engine = get_query_engine()
        try:
            stats = await asyncio.to_thread(engine.stats, datetime.now(timezone.utc))
            return serialize_stats(stats)
        except Exception as exc:
            logger.exception("Failed to compute stats: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to retrieve statistics") from exc

    @app.get("/api/stats/overdue", response_model=OverdueResponse)
    async def get_overdue() -> OverdueResponse:
        """Tasks past their due date that are not completed."""
        engine = get_query_engine()
        try:
            tasks = await asyncio.to_thread(engine.overdue_tasks, datetime.now(timezone.utc))
            return OverdueResponse(count=len(tasks), tasks=serialize_tasks(tasks))
        except Exception as exc:
            logger.exception("Failed to list overdue tasks: %s", exc)
            raise HTTPException(
                status_code=500, detail="Failed to retrieve overdue tasks"
            ) from exc

    @app.get("/api/stats/status/{status}", response_model=StatusTasksResponse)
    async def get_tasks_by_status(status: str) -> StatusTasksResponse:
        """All tasks with the given status."""
        engine = get_query_engine()
        try:
            tasks = await asyncio.to_thread(engine.tasks_with_status, status)
            return StatusTasksResponse(
                status=status, count=len(tasks), tasks=serialize_tasks(tasks)
            )
        except ValidationError as exc:
            raise validation_failed(exc) from exc
        except Exception as exc:
            logger.exception("Failed to list tasks by status: %s", exc)
            raise HTTPException(
                status_code=500, detail="Failed to retrieve tasks by status"
            ) from exc

    @app.get("/api/stats/priority/{priority}", response_model=PriorityTasksResponse)
    async def get_tasks_by_priority(priority: str) -> PriorityTasksResponse:
        """All tasks with the given priority."""
        engine = get_query_engine()
        try:
            tasks = await asyncio.to_thread(engine.tasks_with_priority, priority)
            return PriorityTasksResponse(
                priority=priority, count=len(tasks), tasks=serialize_tasks(tasks)
            )
        except ValidationError as exc:
            raise validation_failed(exc) from exc
        except Exception as exc:
            logger.exception("Failed to list tasks by priority: %s", exc)
            raise HTTPException(
                status_code=500, detail="Failed to retrieve tasks by priority"
            ) from exc

    @app.get("/api/stats/tags", response_model=TagStatsResponse)
    async def get_tag_stats() -> TagStatsResponse:
        """Tag usage counts, most used first."""
        engine = get_query_engine()
        try:
            stats = await asyncio.to_thread(engine.tag_stats)
            return serialize_tag_stats(stats)
        except Exception as exc:
            logger.exception("Failed to compute tag stats: %s", exc)
            raise HTTPException(
                status_code=500, detail="Failed to retrieve tag statistics"
            ) from exc

    @app.get("/api/stats/completion-trend", response_model=CompletionTrendResponse)
    async def get_completion_trend() -> CompletionTrendResponse:
        """Completion figures per creation day."""
        engine = get_query_engine()
        try:
            rows = await asyncio.to_thread(engine.completion_trend)
            return serialize_trend(rows)
        except Exception as exc:
            logger.exception("Failed to compute completion trend: %s", exc)
            raise HTTPException(
                status_code=500, detail="Failed to retrieve completion trend"
            ) from exc
