"""タスク管理のカスタム例外定義

TaskStore と QueryEngine が送出する例外クラスを定義します。
どちらも呼び出し側で回復可能なエラーで、HTTP層で 400 / 404 に変換されます。
"""

from __future__ import annotations

from typing import Iterable, List


class TaskError(Exception):
    """タスク管理の基底例外"""

    pass


class ValidationError(TaskError):
    """入力値（レコードのフィールド、クエリパラメータ）の検証エラー

    最初に見つかった違反だけでなく、違反したルールをすべて保持します。
    """

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors: List[str] = list(errors)
        super().__init__("Validation failed: " + "; ".join(self.errors))


class NotFoundError(TaskError):
    """指定IDのタスクが存在しない"""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")
