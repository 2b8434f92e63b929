"""タスク統計の集計

ステータス・優先度の内訳、期限切れ件数、完了率、タグ頻度、日別の完了推移を計算します。
空の入力でも例外は出さず、率はすべて 0 になります。

完了推移は作成日ごとのコホートに対して「現在の」ステータスで完了数を数えるため、
過去時点のスナップショットではありません。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Sequence

from .models import Task, TaskPriority, TaskStatus


def completion_rate(completed: int, total: int) -> float:
    """完了率（%、小数第1位まで）。total が 0 の場合は 0。"""
    if total == 0:
        return 0.0
    return round(completed / total * 100, 1)


@dataclass
class TaskStats:
    total: int
    by_status: Dict[str, int]
    by_priority: Dict[str, int]
    overdue: int
    completion_rate: float


@dataclass
class TagStat:
    tag: str
    count: int


@dataclass
class TagStats:
    tag_stats: List[TagStat] = field(default_factory=list)

    @property
    def total_tags(self) -> int:
        return len(self.tag_stats)

    @property
    def tag_counts(self) -> Dict[str, int]:
        return {item.tag: item.count for item in self.tag_stats}


@dataclass
class TrendRow:
    date: str
    total: int
    completed: int
    completion_rate: float


def overdue(tasks: Iterable[Task], now: datetime) -> List[Task]:
    return [task for task in tasks if task.is_overdue(now)]


def summarize(tasks: Sequence[Task], now: datetime) -> TaskStats:
    """全体統計を計算する。now は呼び出しごとに一度だけ取得した時刻。"""
    by_status = {status.value: 0 for status in TaskStatus}
    by_priority = {priority.value: 0 for priority in TaskPriority}
    overdue_count = 0

    for task in tasks:
        by_status[task.status.value] += 1
        by_priority[task.priority.value] += 1
        if task.is_overdue(now):
            overdue_count += 1

    total = len(tasks)
    return TaskStats(
        total=total,
        by_status=by_status,
        by_priority=by_priority,
        overdue=overdue_count,
        completion_rate=completion_rate(by_status[TaskStatus.COMPLETED.value], total),
    )


def tag_frequency(tasks: Iterable[Task]) -> TagStats:
    """タグごとのタスク数。同じタグを重複して持つタスクも1件と数える。

    件数の降順、同数の場合は最初に出現した順。
    """
    counts: Dict[str, int] = {}
    for task in tasks:
        for tag in dict.fromkeys(task.tags):
            counts[tag] = counts.get(tag, 0) + 1

    ordered = sorted(counts.items(), key=lambda item: -item[1])
    return TagStats(tag_stats=[TagStat(tag=tag, count=count) for tag, count in ordered])


def completion_trend(tasks: Iterable[Task]) -> List[TrendRow]:
    """作成日（UTC）ごとの件数・完了数・完了率。日付の昇順。"""
    cohorts: Dict[str, List[int]] = {}
    for task in tasks:
        day = task.created_at.astimezone(timezone.utc).date().isoformat()
        totals = cohorts.setdefault(day, [0, 0])
        totals[0] += 1
        if task.status is TaskStatus.COMPLETED:
            totals[1] += 1

    return [
        TrendRow(
            date=day,
            total=total,
            completed=completed,
            completion_rate=completion_rate(completed, total),
        )
        for day, (total, completed) in sorted(cohorts.items())
    ]
