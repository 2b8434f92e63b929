"""Route registration helpers."""

from .stats import register_stats_routes
from .tasks import register_task_routes

__all__ = [
    "register_stats_routes",
    "register_task_routes",
]
