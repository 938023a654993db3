"""
Редакторы ячеек. Редактор создается при входе ячейки в режим редактирования
и работает поверх EditSessionStore: промежуточное значение хранится в сессии,
сохранение идет через store.commit.

Закрытие редактора без явной отмены (close) для title, status, priority и tags
сохраняет текущее значение; для assignedTo и dueDate закрытие без выбора
отменяет редактирование.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Optional, Sequence, Tuple, Union

from prdstudio.domains.documents.entities import unique_tags
from prdstudio.domains.documents.schemas import DocumentResponse
from prdstudio.domains.table.cache import DocumentRow
from prdstudio.domains.table.edit_session import EditSessionStore
from prdstudio.domains.table.fields import (
    PRIORITY_VALUES, STATUS_VALUES, format_priority_label, format_status_label,
    priority_tone, status_tone
)

COMMON_TAGS: Tuple[str, ...] = ("Product", "Feature", "UX", "Technical", "Marketing")


@dataclass(frozen=True)
class TeamMember:
    id: int
    name: str
    initials: str
    email: str = ""


DEFAULT_ROSTER: Tuple[TeamMember, ...] = (
    TeamMember(1, "Alex Johnson", "AJ", "aj@example.com"),
    TeamMember(2, "Sarah Lee", "SL", "sarah@example.com"),
    TeamMember(3, "David Kim", "DK", "david@example.com"),
    TeamMember(4, "Emily Chen", "EC", "emily@example.com"),
)


@dataclass(frozen=True)
class EditorContext:
    common_tags: Tuple[str, ...] = COMMON_TAGS
    roster: Tuple[TeamMember, ...] = DEFAULT_ROSTER


@dataclass(frozen=True)
class Option:
    value: Optional[str]
    label: str
    tone: str


class CellEditor:
    """Базовый редактор ячейки"""

    def __init__(self, store: EditSessionStore, row: DocumentRow, field: str, context: EditorContext):
        self.store = store
        self.row = row
        self.field = field
        self.context = context

    @property
    def document_id(self) -> int:
        return self.row.id

    @property
    def value(self) -> Any:
        return self.store.edit_value

    @property
    def is_open(self) -> bool:
        return self.store.is_editing(self.document_id, self.field)

    async def commit(self, value: Any) -> Optional[DocumentResponse]:
        return await self.store.commit(self.document_id, self.field, value)

    async def close(self) -> Optional[DocumentResponse]:
        """Закрытие редактора сохраняет текущее значение"""
        if not self.is_open:
            return None
        return await self.store.close()

    def cancel(self) -> None:
        if self.is_open:
            self.store.cancel()


class TitleEditor(CellEditor):
    """Текстовое поле: Enter и потеря фокуса сохраняют, Escape возвращает исходное"""

    def __init__(self, store, row, field, context):
        super().__init__(store, row, field, context)
        self.original = row.document.title

    def set_text(self, text: str) -> None:
        self.store.set_edit_value(text)

    async def press_enter(self) -> Optional[DocumentResponse]:
        return await self.commit(self.value)

    async def blur(self) -> Optional[DocumentResponse]:
        return await self.close()

    async def press_escape(self) -> Optional[DocumentResponse]:
        # Явный возврат исходного значения, а не просто отмена
        self.store.set_edit_value(self.original)
        return await self.commit(self.original)


class StatusEditor(CellEditor):
    """Список из пяти статусов"""

    def options(self) -> List[Option]:
        return [Option(s, format_status_label(s), status_tone(s)) for s in STATUS_VALUES]

    def highlight(self, status: str) -> None:
        """Выбор без подтверждения (например, стрелками)"""
        self.store.set_edit_value(status)

    async def select(self, status: str) -> Optional[DocumentResponse]:
        if status == self.row.document.status:
            # Текущий статус: без запроса
            self.cancel()
            return None
        self.store.set_edit_value(status)
        return await self.commit(status)


class PriorityEditor(CellEditor):
    """Три приоритета и отдельное действие "убрать приоритет" """

    def options(self) -> List[Option]:
        return [Option(p, format_priority_label(p), priority_tone(p)) for p in PRIORITY_VALUES]

    def highlight(self, priority: Optional[str]) -> None:
        self.store.set_edit_value(priority)

    async def select(self, priority: Optional[str]) -> Optional[DocumentResponse]:
        self.store.set_edit_value(priority)
        return await self.commit(priority)

    async def remove(self) -> Optional[DocumentResponse]:
        return await self.select(None)


class TagsEditor(CellEditor):
    """Выбор тегов с поиском; сохранение только при закрытии"""

    def __init__(self, store, row, field, context):
        super().__init__(store, row, field, context)
        self.query = ""

    @property
    def tags(self) -> List[str]:
        return list(self.value or [])

    def set_query(self, query: str) -> None:
        self.query = query

    def suggestions(self) -> List[str]:
        """Общие теги, которых еще нет, с фильтром по строке поиска"""
        needle = self.query.strip().casefold()
        return [
            tag for tag in self.context.common_tags
            if tag not in self.tags and (not needle or needle in tag.casefold())
        ]

    def add(self, tag: str) -> bool:
        tag = tag.strip()
        if not tag or tag in self.tags:
            # Дубликаты молча игнорируются
            return False
        self.store.set_edit_value(unique_tags(self.tags + [tag]))
        self.query = ""
        return True

    def remove(self, tag: str) -> None:
        self.store.set_edit_value([t for t in self.tags if t != tag])

    def press_enter(self) -> bool:
        return self.add(self.query)

    async def done(self) -> Optional[DocumentResponse]:
        return await self.close()

    async def press_escape(self) -> Optional[DocumentResponse]:
        return await self.close()


class AssigneeEditor(CellEditor):
    """Выбор исполнителя из фиксированного списка"""

    def options(self) -> Sequence[TeamMember]:
        return self.context.roster

    async def select(self, name: str) -> Optional[DocumentResponse]:
        self.store.set_edit_value(name)
        return await self.commit(name)

    async def close(self) -> Optional[DocumentResponse]:
        self.cancel()
        return None


class DueDateEditor(CellEditor):
    """Выбор даты; "без даты" сохраняет null"""

    async def select(self, value: Optional[Union[date, datetime]]) -> Optional[DocumentResponse]:
        self.store.set_edit_value(value)
        return await self.commit(value)

    async def clear(self) -> Optional[DocumentResponse]:
        return await self.select(None)

    async def close(self) -> Optional[DocumentResponse]:
        self.cancel()
        return None
