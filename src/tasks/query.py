"""Task Query Engine

TaskStore のスナップショットに対して 絞り込み -> 並べ替え -> ページ分割 を行い、
統計（analytics.py）の計算も取りまとめます。状態を持たず、入力を変更しません。

Related Classes: TaskStore (store.py)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Sequence

from . import analytics
from .exceptions import ValidationError
from .models import Task, TaskPriority, TaskStatus
from .store import TaskStore

SEARCH_MAX_LENGTH = 100
MAX_LIMIT = 100
DEFAULT_LIMIT = 10

# dueDate 未設定のタスクは最も遠い未来として扱う
_NO_DUE_DATE = datetime.max.replace(tzinfo=timezone.utc)


class SortField(str, Enum):
    TITLE = "title"
    PRIORITY = "priority"
    DUE_DATE = "dueDate"
    CREATED_AT = "createdAt"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


_SORT_KEYS: dict[SortField, Callable[[Task], Any]] = {
    SortField.TITLE: lambda task: task.title.lower(),
    SortField.PRIORITY: lambda task: task.priority.rank,
    SortField.DUE_DATE: lambda task: task.due_date or _NO_DUE_DATE,
    SortField.CREATED_AT: lambda task: task.created_at,
}


def _parse_enum(
    enum_cls: type[Enum], value: Any, label: str, errors: List[str]
) -> Optional[Enum]:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        allowed = ", ".join(member.value for member in enum_cls)
        errors.append(f"Invalid {label} value: {value!r} (expected one of: {allowed})")
        return None


def _parse_int(value: Any, label: str, errors: List[str]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        errors.append(f"{label} must be an integer")
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        errors.append(f"{label} must be an integer")
        return None


@dataclass(frozen=True)
class TaskQuery:
    """一覧取得のパラメータ。未指定の項目はデフォルト値。"""

    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    search: Optional[str] = None
    tags: tuple[str, ...] = ()
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.ASC
    page: int = 1
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_params(
        cls,
        *,
        status: Any = None,
        priority: Any = None,
        search: Any = None,
        tags: Optional[Iterable[Any]] = None,
        sort_by: Any = None,
        sort_order: Any = None,
        page: Any = None,
        limit: Any = None,
    ) -> "TaskQuery":
        """生のパラメータを検証して TaskQuery を組み立てる

        不正な値はデフォルトに置き換えず、すべての違反をまとめて ValidationError で返します。
        """
        errors: List[str] = []

        parsed_status = _parse_enum(TaskStatus, status, "status", errors)
        parsed_priority = _parse_enum(TaskPriority, priority, "priority", errors)
        parsed_sort_by = _parse_enum(SortField, sort_by, "sortBy", errors)
        parsed_sort_order = _parse_enum(SortOrder, sort_order, "sortOrder", errors)

        parsed_search = None
        if search is not None:
            if not isinstance(search, str):
                errors.append("Search term must be a string")
            else:
                parsed_search = search.strip()
                if not 1 <= len(parsed_search) <= SEARCH_MAX_LENGTH:
                    errors.append(f"Search term must be 1-{SEARCH_MAX_LENGTH} characters")

        parsed_tags: tuple[str, ...] = ()
        if tags is not None:
            if isinstance(tags, str) or not all(isinstance(tag, str) for tag in tags):
                errors.append("Tags must be an array of strings")
            else:
                parsed_tags = tuple(tags)

        parsed_page = _parse_int(page, "Page", errors)
        if parsed_page is not None and parsed_page < 1:
            errors.append("Page must be a positive integer")

        parsed_limit = _parse_int(limit, "Limit", errors)
        if parsed_limit is not None and not 1 <= parsed_limit <= MAX_LIMIT:
            errors.append(f"Limit must be 1-{MAX_LIMIT}")

        if errors:
            raise ValidationError(errors)

        return cls(
            status=parsed_status,
            priority=parsed_priority,
            search=parsed_search,
            tags=parsed_tags,
            sort_by=parsed_sort_by or SortField.CREATED_AT,
            sort_order=parsed_sort_order or SortOrder.ASC,
            page=parsed_page or 1,
            limit=parsed_limit or DEFAULT_LIMIT,
        )


@dataclass
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


@dataclass
class TaskPage:
    tasks: List[Task] = field(default_factory=list)
    pagination: Optional[Pagination] = None


def matches(task: Task, query: TaskQuery) -> bool:
    """タスクがすべての絞り込み条件を満たすか"""
    if query.status is not None and task.status is not query.status:
        return False
    if query.priority is not None and task.priority is not query.priority:
        return False
    if query.search:
        term = query.search.lower()
        haystack = [task.title.lower(), task.description.lower()]
        haystack.extend(tag.lower() for tag in task.tags)
        if not any(term in text for text in haystack):
            return False
    if query.tags and not set(query.tags).intersection(task.tags):
        return False
    return True


def filter_tasks(tasks: Iterable[Task], query: TaskQuery) -> List[Task]:
    return [task for task in tasks if matches(task, query)]


def sort_tasks(
    tasks: Sequence[Task], sort_by: SortField, sort_order: SortOrder
) -> List[Task]:
    # sorted() は reverse=True でも同値要素の相対順序を保つ
    return sorted(
        tasks,
        key=_SORT_KEYS[sort_by],
        reverse=sort_order is SortOrder.DESC,
    )


def paginate(tasks: Sequence[Task], page: int, limit: int) -> TaskPage:
    total = len(tasks)
    start = (page - 1) * limit
    end = start + limit
    return TaskPage(
        tasks=list(tasks[start:end]),
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
            has_next=end < total,
            has_prev=page > 1,
        ),
    )


class QueryEngine:
    """TaskStore のスナップショットに対する検索・集計"""

    def __init__(self, store: TaskStore) -> None:
        self.store = store

    def list_tasks(self, query: Optional[TaskQuery] = None) -> TaskPage:
        query = query or TaskQuery()
        snapshot = self.store.list_all()
        selected = filter_tasks(snapshot, query)
        ordered = sort_tasks(selected, query.sort_by, query.sort_order)
        return paginate(ordered, query.page, query.limit)

    def tasks_with_status(self, status: Any) -> List[Task]:
        query = TaskQuery.from_params(status=status)
        return filter_tasks(self.store.list_all(), query)

    def tasks_with_priority(self, priority: Any) -> List[Task]:
        query = TaskQuery.from_params(priority=priority)
        return filter_tasks(self.store.list_all(), query)

    def stats(self, now: Optional[datetime] = None) -> analytics.TaskStats:
        return analytics.summarize(self.store.list_all(), now or _utcnow())

    def overdue_tasks(self, now: Optional[datetime] = None) -> List[Task]:
        return analytics.overdue(self.store.list_all(), now or _utcnow())

    def tag_stats(self) -> analytics.TagStats:
        return analytics.tag_frequency(self.store.list_all())

    def completion_trend(self) -> List[analytics.TrendRow]:
        return analytics.completion_trend(self.store.list_all())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
