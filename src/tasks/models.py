from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import List, Optional


class TaskStatus(str, Enum):
    """タスクの進捗ステータス"""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """タスクの優先度。rank が大きいほど優先度が高い。"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    TaskPriority.LOW: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.HIGH: 3,
}


@dataclass(slots=True)
class Task:
    """保存済みタスクの表現。タイムスタンプはすべてUTCのaware datetime。"""

    id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    tags: List[str] = field(default_factory=list)

    def is_overdue(self, now: datetime) -> bool:
        """期限切れ判定。完了済みタスクは期限を過ぎていても対象外。"""
        if self.due_date is None or self.status is TaskStatus.COMPLETED:
            return False
        return now > self.due_date

    def copy(self) -> "Task":
        return replace(self, tags=list(self.tags))
