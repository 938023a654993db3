"""
Поля документа с точки зрения таблицы: виды полей, подписи, форматирование
и валидаторы значений перед отправкой на сервер.

Ключи полей совпадают с ключами JSON API (camelCase), атрибуты Python-моделей
в snake_case: соответствие задано в DOCUMENT_ATTRS.
"""

import enum
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Dict, Optional

from prdstudio.domains.documents.entities import DocumentPriority, DocumentStatus, unique_tags


class FieldKind(str, enum.Enum):
    TITLE = "title"
    STATUS = "status"
    PRIORITY = "priority"
    TAGS = "tags"
    ASSIGNEE = "assignee"
    DUE_DATE = "due_date"
    TIMESTAMP = "timestamp"
    DERIVED = "derived"


FIELD_KINDS: Dict[str, FieldKind] = {
    "title": FieldKind.TITLE,
    "status": FieldKind.STATUS,
    "priority": FieldKind.PRIORITY,
    "tags": FieldKind.TAGS,
    "assignedTo": FieldKind.ASSIGNEE,
    "dueDate": FieldKind.DUE_DATE,
    "updatedAt": FieldKind.TIMESTAMP,
    "createdAt": FieldKind.TIMESTAMP,
}

DOCUMENT_ATTRS: Dict[str, str] = {
    "id": "id",
    "title": "title",
    "content": "content",
    "projectId": "project_id",
    "emoji": "emoji",
    "status": "status",
    "priority": "priority",
    "tags": "tags",
    "favorite": "favorite",
    "assignedTo": "assigned_to",
    "dueDate": "due_date",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

STATUS_VALUES = tuple(s.value for s in DocumentStatus)
PRIORITY_VALUES = tuple(p.value for p in DocumentPriority)

STATUS_TONES = {
    "draft": "yellow",
    "in-progress": "blue",
    "in-review": "purple",
    "complete": "green",
    "archived": "gray",
}

PRIORITY_TONES = {
    "low": "blue",
    "medium": "yellow",
    "high": "red",
}

DEFAULT_EMOJI = "📄"


def field_kind(key: str) -> FieldKind:
    """Вид поля по ключу колонки; неизвестные ключи считаются производными"""
    return FIELD_KINDS.get(key, FieldKind.DERIVED)


def format_status_label(status: str) -> str:
    # "in-review" -> "In Review", остальные с заглавной буквы
    if status == DocumentStatus.IN_REVIEW.value:
        return "In Review"
    return status[:1].upper() + status[1:]


def format_priority_label(priority: Optional[str]) -> str:
    return priority.capitalize() if priority else "None"


def status_tone(status: Optional[str]) -> str:
    return STATUS_TONES.get(status, "gray")


def priority_tone(priority: Optional[str]) -> str:
    return PRIORITY_TONES.get(priority, "gray")


def format_date(value: datetime) -> str:
    """Дата в виде "October 19, 2026" """
    return f"{value:%B} {value.day}, {value.year}"


def initials(name: Optional[str]) -> str:
    if not name:
        return "?"
    return "".join(part[0] for part in name.split() if part)


def truncate_text(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max(max_chars - 1, 1)].rstrip() + "…"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Наивные даты с сервера считаем UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Валидаторы: возвращают нормализованное значение или поднимают ValueError

def validate_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Title cannot be empty")
    value = value.strip()
    if len(value) > 255:
        raise ValueError("Title is too long")
    return value


def validate_status(value: Any) -> str:
    if value not in STATUS_VALUES:
        raise ValueError(f"Unknown status: {value!r}")
    return value


def validate_priority(value: Any) -> Optional[str]:
    if value is None:
        return None
    if value not in PRIORITY_VALUES:
        raise ValueError(f"Unknown priority: {value!r}")
    return value


def validate_tags(value: Any) -> list:
    if value is None:
        return []
    if not isinstance(value, (list, tuple, set)) or not all(isinstance(tag, str) for tag in value):
        raise ValueError("Tags must be a list of strings")
    return unique_tags(list(value))


def validate_assignee(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Assignee must be a non-empty name")
    return value.strip()


def validate_due_date(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if not isinstance(value, datetime):
        raise ValueError("Due date must be a date")
    return as_utc(value)


def validate_favorite(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError("Favorite must be a boolean")
    return value


def validate_text(value: Any) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValueError("Value must be a string")
    return value


def validate_emoji(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError("Emoji cannot be empty")
    return value


FIELD_VALIDATORS: Dict[str, Callable[[Any], Any]] = {
    "title": validate_title,
    "status": validate_status,
    "priority": validate_priority,
    "tags": validate_tags,
    "assignedTo": validate_assignee,
    "dueDate": validate_due_date,
    "favorite": validate_favorite,
    "content": validate_text,
    "emoji": validate_emoji,
}


def validate_field_value(field: str, value: Any) -> Any:
    """Проверка значения перед отправкой; только изменяемые поля документа"""
    validator = FIELD_VALIDATORS.get(field)
    if validator is None:
        raise ValueError(f"Field {field!r} is read-only")
    return validator(value)
