"""Task Store

インメモリのタスクコレクション。作成・取得・更新・削除・一覧・全削除を提供します。
すべての操作はひとつのロックで直列化され、返すレコードは常にコピーです。

Related Classes: Task (models.py), QueryEngine (query.py)
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from .exceptions import NotFoundError
from .models import Task
from .validator import WRITABLE_FIELDS, validate_task_fields

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class TaskStore:
    """スレッドセーフなインメモリのタスク管理"""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._lock = threading.RLock()
        self._tasks: Dict[str, Task] = {}
        self._clock = clock or self._now

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def create(self, fields: Mapping[str, Any]) -> Task:
        """新規タスクを作成

        Args:
            fields: title, description, status, priority, due_date, tags

        Returns:
            作成されたTaskのコピー

        Raises:
            ValidationError: いずれかのフィールドが不正な場合
        """
        values = validate_task_fields(fields)
        with self._lock:
            now = self._clock()
            task = Task(
                id=str(uuid.uuid4()),
                created_at=now,
                updated_at=now,
                **values,
            )
            self._tasks[task.id] = task
        logger.info("Task created: %s", task.id)
        return task.copy()

    def get(self, task_id: str) -> Task:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise NotFoundError(task_id)
            return task.copy()

    def update(self, task_id: str, changes: Mapping[str, Any]) -> Task:
        """既存タスクに部分更新をマージする

        マージ後のレコード全体を再検証し、通過した場合のみ置き換えます。

        Raises:
            NotFoundError: タスクが存在しない場合
            ValidationError: マージ結果が不正な場合（既存レコードは変更されない）
        """
        with self._lock:
            current = self._tasks.get(task_id)
            if current is None:
                raise NotFoundError(task_id)

            base = {key: getattr(current, key) for key in WRITABLE_FIELDS}
            values = validate_task_fields(changes, base=base)
            updated = Task(
                id=current.id,
                created_at=current.created_at,
                updated_at=max(self._clock(), current.created_at),
                **values,
            )
            self._tasks[task_id] = updated
        logger.info("Task updated: %s", task_id)
        return updated.copy()

    def delete(self, task_id: str) -> None:
        with self._lock:
            if self._tasks.pop(task_id, None) is None:
                raise NotFoundError(task_id)
        logger.info("Task deleted: %s", task_id)

    def list_all(self) -> List[Task]:
        """全タスクのスナップショット（挿入順、各レコードはコピー）"""
        with self._lock:
            return [task.copy() for task in self._tasks.values()]

    def clear(self) -> None:
        with self._lock:
            removed = len(self._tasks)
            self._tasks.clear()
        logger.info("All tasks cleared (%d removed)", removed)

    def count(self) -> int:
        with self._lock:
            return len(self._tasks)


def seed_sample_tasks(store: TaskStore, now: Optional[datetime] = None) -> List[Task]:
    """デモ用のサンプルタスクを投入する"""
    now = now or datetime.now(timezone.utc)
    samples = [
        {
            "title": "Complete project documentation",
            "description": "Write comprehensive documentation for the task management API",
            "status": "in_progress",
            "priority": "high",
            "due_date": now + timedelta(days=7),
            "tags": ["documentation", "api"],
        },
        {
            "title": "Review code changes",
            "description": "Perform code review for the latest pull request",
            "status": "todo",
            "priority": "medium",
            "due_date": now + timedelta(days=2),
            "tags": ["code-review", "quality"],
        },
        {
            "title": "Setup testing environment",
            "description": "Configure pytest and the test client for the project",
            "status": "completed",
            "priority": "low",
            "due_date": now - timedelta(days=1),
            "tags": ["testing", "setup"],
        },
    ]
    return [store.create(item) for item in samples]
