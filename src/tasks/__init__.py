"""Task store and query/aggregation engine shared by the API server."""

from .exceptions import NotFoundError, TaskError, ValidationError
from .models import Task, TaskPriority, TaskStatus
from .query import QueryEngine, SortField, SortOrder, TaskPage, TaskQuery
from .store import TaskStore, seed_sample_tasks

__all__ = [
    "NotFoundError",
    "QueryEngine",
    "SortField",
    "SortOrder",
    "Task",
    "TaskError",
    "TaskPage",
    "TaskPriority",
    "TaskQuery",
    "TaskStatus",
    "TaskStore",
    "ValidationError",
    "seed_sample_tasks",
]
