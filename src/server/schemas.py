"""Pydantic schemas for the FastAPI server."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases while accepting snake_case names."""

    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str
    timestamp: str


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class TaskResponse(CamelModel):
    """Serialized task."""

    id: str
    title: str
    description: str
    status: str
    priority: str
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    tags: List[str]
    created_at: str = Field(..., alias="createdAt")
    updated_at: str = Field(..., alias="updatedAt")


class TaskWriteModel(BaseModel):
    """Base for write bodies.

    Fields are untyped and extra keys are kept: TaskStore checks types, lengths,
    enums, dates and unknown or read-only fields, and reports every violation
    together.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_payload(self) -> Dict[str, Any]:
        """Fields sent by the client, including unrecognised ones."""
        return self.model_dump(exclude_unset=True)


class TaskCreateRequest(TaskWriteModel):
    """Request body for creating a task."""

    title: Any = None
    description: Any = None
    status: Any = None
    priority: Any = None
    due_date: Any = Field(default=None, alias="dueDate", description="ISO 8601")
    tags: Any = None


class TaskUpdateRequest(TaskWriteModel):
    """Request body for updating a task. Only the fields sent are changed."""

    title: Any = None
    description: Any = None
    status: Any = None
    priority: Any = None
    due_date: Any = Field(default=None, alias="dueDate", description="ISO 8601 or null")
    tags: Any = None


class PaginationResponse(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int = Field(..., alias="totalPages")
    has_next: bool = Field(..., alias="hasNext")
    has_prev: bool = Field(..., alias="hasPrev")


class TaskListResponse(BaseModel):
    """Response for the filtered, paginated task list."""

    tasks: List[TaskResponse]
    pagination: PaginationResponse


class StatsResponse(CamelModel):
    """Overall task statistics."""

    total: int
    by_status: Dict[str, int] = Field(..., alias="byStatus")
    by_priority: Dict[str, int] = Field(..., alias="byPriority")
    overdue: int
    completion_rate: float = Field(..., alias="completionRate")


class OverdueResponse(BaseModel):
    count: int
    tasks: List[TaskResponse]


class StatusTasksResponse(BaseModel):
    status: str
    count: int
    tasks: List[TaskResponse]


class PriorityTasksResponse(BaseModel):
    priority: str
    count: int
    tasks: List[TaskResponse]


class TagStatResponse(BaseModel):
    tag: str
    count: int


class TagStatsResponse(CamelModel):
    """Tag usage frequency, most used first."""

    total_tags: int = Field(..., alias="totalTags")
    tag_counts: Dict[str, int] = Field(..., alias="tagCounts")
    tag_stats: List[TagStatResponse] = Field(..., alias="tagStats")


class TrendRowResponse(CamelModel):
    date: str
    total: int
    completed: int
    completion_rate: float = Field(..., alias="completionRate")


class CompletionTrendResponse(CamelModel):
    """Per-day completion figures for tasks grouped by creation date."""

    trend_data: List[TrendRowResponse] = Field(..., alias="trendData")
    total_days: int = Field(..., alias="totalDays")
