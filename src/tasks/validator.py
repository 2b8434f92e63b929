"""タスクレコードの検証

作成・更新時にマージ後のレコード全体を検証し、正規化した値を返します。
違反はすべて収集してから ValidationError として一度に送出します。
値を黙って補正することはしません。
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from .exceptions import ValidationError
from .models import TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
TAG_MAX_LENGTH = 50

WRITABLE_FIELDS = ("title", "description", "status", "priority", "due_date", "tags")

DEFAULT_FIELDS: Dict[str, Any] = {
    "description": "",
    "status": TaskStatus.TODO,
    "priority": TaskPriority.MEDIUM,
    "due_date": None,
    "tags": [],
}


def parse_due_date(value: Any) -> Optional[datetime]:
    """期限日時をUTCのaware datetimeに変換する

    Args:
        value: ISO 8601 文字列、datetime、date、または None

    Returns:
        UTC datetime（None の場合は None）

    Raises:
        ValueError: 文字列が日時として解釈できない場合
        TypeError: 対応していない型の場合
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.strip())
    else:
        raise TypeError(f"unsupported due date type: {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _check_title(value: Any, errors: List[str]) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        errors.append("Title is required")
    elif not isinstance(value, str):
        errors.append("Title must be a string")
    elif len(value) > TITLE_MAX_LENGTH:
        errors.append(f"Title must be {TITLE_MAX_LENGTH} characters or less")


def _check_description(value: Any, errors: List[str]) -> None:
    if not isinstance(value, str):
        errors.append("Description must be a string")
    elif len(value) > DESCRIPTION_MAX_LENGTH:
        errors.append(f"Description must be {DESCRIPTION_MAX_LENGTH} characters or less")


def _check_tags(value: Any, errors: List[str]) -> Optional[List[str]]:
    if not isinstance(value, (list, tuple)):
        errors.append("Tags must be an array")
        return None
    for tag in value:
        if not isinstance(tag, str):
            errors.append("Each tag must be a string")
        elif not tag or len(tag) > TAG_MAX_LENGTH:
            errors.append(f"Each tag must be 1-{TAG_MAX_LENGTH} characters: {tag!r}")
    return list(value)


def validate_task_fields(
    fields: Mapping[str, Any], base: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """フィールドを base にマージし、レコード全体を検証する

    Args:
        fields: 書き込み要求のフィールド
        base: マージ元の値（作成時はデフォルト値、更新時は既存レコード）

    Returns:
        正規化済みのフィールド辞書（WRITABLE_FIELDS のみ）

    Raises:
        ValidationError: ひとつでも違反がある場合（全違反を列挙）
    """
    errors: List[str] = []

    for key in fields:
        if key not in WRITABLE_FIELDS:
            errors.append(f"Unknown or read-only field: {key}")

    merged: Dict[str, Any] = dict(DEFAULT_FIELDS if base is None else base)
    merged.update({k: v for k, v in fields.items() if k in WRITABLE_FIELDS})

    _check_title(merged.get("title"), errors)
    _check_description(merged.get("description"), errors)

    status = None
    try:
        status = TaskStatus(merged.get("status"))
    except (ValueError, TypeError):
        allowed = ", ".join(s.value for s in TaskStatus)
        errors.append(f"Status must be one of: {allowed}")

    priority = None
    try:
        priority = TaskPriority(merged.get("priority"))
    except (ValueError, TypeError):
        allowed = ", ".join(p.value for p in TaskPriority)
        errors.append(f"Priority must be one of: {allowed}")

    due_date = None
    try:
        due_date = parse_due_date(merged.get("due_date"))
    except (ValueError, TypeError, OverflowError):
        errors.append("Due date must be a valid ISO 8601 date")

    tags = _check_tags(merged.get("tags"), errors)

    if errors:
        logger.warning("Task validation failed: %s", "; ".join(errors))
        raise ValidationError(errors)

    return {
        "title": merged["title"],
        "description": merged["description"],
        "status": status,
        "priority": priority,
        "due_date": due_date,
        "tags": tags,
    }
