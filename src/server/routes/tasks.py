"""Task endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query

from src.tasks import NotFoundError, TaskQuery, ValidationError

from ..dependencies import get_query_engine, get_task_store, serialize_page, serialize_task
from ..schemas import (
    MessageResponse,
    TaskCreateRequest,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
)

logger = logging.getLogger(__name__)


def validation_failed(exc: ValidationError) -> HTTPException:
    """Build the 400 response carrying every violated rule."""
    return HTTPException(
        status_code=400,
        detail={"error": "Validation failed", "details": exc.errors},
    )


def task_not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Task not found")


def register_task_routes(app: FastAPI) -> None:
    """Register task CRUD and listing endpoints."""

    @app.get("/api/tasks", response_model=TaskListResponse)
    async def list_tasks(
        status: Optional[str] = Query(default=None),
        priority: Optional[str] = Query(default=None),
        search: Optional[str] = Query(default=None),
        tags: Optional[List[str]] = Query(default=None),
        sort_by: Optional[str] = Query(default=None, alias="sortBy"),
        sort_order: Optional[str] = Query(default=None, alias="sortOrder"),
        page: Optional[str] = Query(default=None),
        limit: Optional[str] = Query(default=None),
    ) -> TaskListResponse:
        """List tasks with filtering, sorting and pagination."""
        engine = get_query_engine()
        try:
            query = TaskQuery.from_params(
                status=status,
                priority=priority,
                search=search,
                tags=tags,
                sort_by=sort_by,
                sort_order=sort_order,
                page=page,
                limit=limit,
            )
            result = await asyncio.to_thread(engine.list_tasks, query)
            return serialize_page(result)
        except ValidationError as exc:
            raise validation_failed(exc) from exc
        except Exception as exc:
            logger.exception("Failed to list tasks: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to retrieve tasks") from exc

    @app.get("/api/tasks/{task_id}", response_model=TaskResponse)
    async def get_task(task_id: str) -> TaskResponse:
        """Fetch a single task."""
        store = get_task_store()
        try:
            task = await asyncio.to_thread(store.get, task_id)
            return serialize_task(task)
        except NotFoundError as exc:
            raise task_not_found() from exc
        except Exception as exc:
            logger.exception("Failed to get task %s: %s", task_id, exc)
            raise HTTPException(status_code=500, detail="Failed to retrieve task") from exc

    @app.post("/api/tasks", response_model=TaskResponse, status_code=201)
    async def create_task(request: TaskCreateRequest) -> TaskResponse:
        """Create a new task."""
        store = get_task_store()
        try:
            payload = request.to_payload()
            task = await asyncio.to_thread(store.create, payload)
            return serialize_task(task)
        except ValidationError as exc:
            raise validation_failed(exc) from exc
        except Exception as exc:
            logger.exception("Failed to create task: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to create task") from exc

    async def _update(task_id: str, request: TaskUpdateRequest) -> TaskResponse:
        store = get_task_store()
        try:
            payload = request.to_payload()
            task = await asyncio.to_thread(store.update, task_id, payload)
            return serialize_task(task)
        except NotFoundError as exc:
            raise task_not_found() from exc
        except ValidationError as exc:
            raise validation_failed(exc) from exc
        except Exception as exc:
            logger.exception("Failed to update task %s: %s", task_id, exc)
            raise HTTPException(status_code=500, detail="Failed to update task") from exc

    @app.put("/api/tasks/{task_id}", response_model=TaskResponse)
    async def replace_task(task_id: str, request: TaskUpdateRequest) -> TaskResponse:
        """Update an existing task."""
        return await _update(task_id, request)

    @app.patch("/api/tasks/{task_id}", response_model=TaskResponse)
    async def update_task(task_id: str, request: TaskUpdateRequest) -> TaskResponse:
        """Partially update an existing task."""
        return await _update(task_id, request)

    @app.delete("/api/tasks/{task_id}", response_model=MessageResponse)
    async def delete_task(task_id: str) -> MessageResponse:
        """Delete a task."""
        store = get_task_store()
        try:
            await asyncio.to_thread(store.delete, task_id)
            return MessageResponse(message="Task deleted successfully")
        except NotFoundError as exc:
            raise task_not_found() from exc
        except Exception as exc:
            logger.exception("Failed to delete task %s: %s", task_id, exc)
            raise HTTPException(status_code=500, detail="Failed to delete task") from exc

    @app.delete("/api/tasks", response_model=MessageResponse)
    async def clear_tasks() -> MessageResponse:
        """Delete every task."""
        store = get_task_store()
        try:
            await asyncio.to_thread(store.clear)
            return MessageResponse(message="All tasks cleared")
        except Exception as exc:
            logger.exception("Failed to clear tasks: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to clear tasks") from exc
