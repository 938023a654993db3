import enum
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class DocumentStatus(str, enum.Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in-progress"
    IN_REVIEW = "in-review"
    COMPLETE = "complete"
    ARCHIVED = "archived"


class DocumentPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_TAG_RE = re.compile(r"<[^>]+>")

# Поля, которые клиент не может менять напрямую
READ_ONLY_FIELDS = frozenset({"id", "created_at", "updated_at"})


def strip_html(content: Optional[str]) -> str:
    """Удаление HTML-разметки из содержимого"""
    if not content:
        return ""
    return _TAG_RE.sub(" ", content)


def count_words(content: Optional[str]) -> int:
    """Число слов в HTML-содержимом документа"""
    return len(strip_html(content).split())


def unique_tags(tags: Optional[List[str]]) -> List[str]:
    """Теги без дубликатов с сохранением порядка"""
    result: List[str] = []
    for tag in tags or []:
        tag = tag.strip()
        if tag and tag not in result:
            result.append(tag)
    return result


class Document:
    """Сущность документа (PRD)"""

    def __init__(
        self,
        id: Optional[int],
        title: str,
        project_id: int,
        content: Optional[str] = None,
        emoji: str = "📄",
        status: str = DocumentStatus.DRAFT.value,
        priority: Optional[str] = DocumentPriority.MEDIUM.value,
        tags: Optional[List[str]] = None,
        favorite: bool = False,
        assigned_to: Optional[str] = None,
        due_date: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.title = title
        self.project_id = project_id
        self.content = content
        self.emoji = emoji
        self.status = status
        self.priority = priority
        self.tags = unique_tags(tags)
        self.favorite = favorite
        self.assigned_to = assigned_to
        self.due_date = due_date
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    def apply_changes(self, changes: Dict[str, Any]) -> List[str]:
        """Частичное обновление полей; updated_at обновляется всегда"""
        applied = []
        for name, value in changes.items():
            if name in READ_ONLY_FIELDS:
                continue
            if name == "tags":
                value = unique_tags(value)
            setattr(self, name, value)
            applied.append(name)

        self.updated_at = datetime.now(timezone.utc)
        return applied

    @classmethod
    def create_document(cls, title: str, project_id: int, **fields: Any) -> "Document":
        """Создание нового документа"""
        return cls(id=None, title=title, project_id=project_id, **fields)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"Document(id={self.id}, title={self.title}, status={self.status})"
