"""Dependency helpers shared across FastAPI routes."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List

from src.task_tracker.config import Config
from src.task_tracker.logger import setup_logger
from src.tasks import QueryEngine, Task, TaskPage, TaskStore, seed_sample_tasks
from src.tasks.analytics import TagStats, TaskStats, TrendRow

from .schemas import (
    CompletionTrendResponse,
    PaginationResponse,
    StatsResponse,
    TagStatResponse,
    TagStatsResponse,
    TaskListResponse,
    TaskResponse,
    TrendRowResponse,
)

logger = logging.getLogger(__name__)

config = Config.load()
setup_logger(log_level=config.log_level, log_file=config.log_file)


@lru_cache(maxsize=1)
def get_task_store() -> TaskStore:
    """Singleton TaskStore, seeded with sample tasks when enabled."""
    store = TaskStore()
    if config.seed_sample_data:
        seed_sample_tasks(store)
        logger.info("Seeded %d sample tasks", store.count())
    return store


@lru_cache(maxsize=1)
def get_query_engine() -> QueryEngine:
    """Singleton QueryEngine bound to the shared TaskStore."""
    return QueryEngine(get_task_store())


def serialize_task(task: Task) -> TaskResponse:
    """Convert domain Task to API response."""
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status.value,
        priority=task.priority.value,
        due_date=task.due_date.isoformat() if task.due_date else None,
        tags=list(task.tags),
        created_at=task.created_at.isoformat(),
        updated_at=task.updated_at.isoformat(),
    )


def serialize_tasks(tasks: List[Task]) -> List[TaskResponse]:
    return [serialize_task(task) for task in tasks]


def serialize_page(page: TaskPage) -> TaskListResponse:
    """Convert a TaskPage to the list response."""
    pagination = page.pagination
    return TaskListResponse(
        tasks=serialize_tasks(page.tasks),
        pagination=PaginationResponse(
            page=pagination.page,
            limit=pagination.limit,
            total=pagination.total,
            total_pages=pagination.total_pages,
            has_next=pagination.has_next,
            has_prev=pagination.has_prev,
        ),
    )


def serialize_stats(stats: TaskStats) -> StatsResponse:
    return StatsResponse(
        total=stats.total,
        by_status=stats.by_status,
        by_priority=stats.by_priority,
        overdue=stats.overdue,
        completion_rate=stats.completion_rate,
    )


def serialize_tag_stats(stats: TagStats) -> TagStatsResponse:
    return TagStatsResponse(
        total_tags=stats.total_tags,
        tag_counts=stats.tag_counts,
        tag_stats=[TagStatResponse(tag=item.tag, count=item.count) for item in stats.tag_stats],
    )


def serialize_trend(rows: List[TrendRow]) -> CompletionTrendResponse:
    return CompletionTrendResponse(
        trend_data=[
            TrendRowResponse(
                date=row.date,
                total=row.total,
                completed=row.completed,
                completion_rate=row.completion_rate,
            )
            for row in rows
        ],
        total_days=len(rows),
    )
