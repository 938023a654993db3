"""
Фильтрация и сортировка строк таблицы.

Чистые функции: результат зависит только от аргументов, входной список
не изменяется.
"""

import enum
import unicodedata
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from prdstudio.domains.table.cache import DocumentRow

PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}

SORTABLE_FIELDS = ("title", "updatedAt", "createdAt", "priority", "dueDate")


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class SortState:
    field: str = "updatedAt"
    direction: SortDirection = SortDirection.DESC

    def toggle(self, field: str) -> "SortState":
        """Повторный клик меняет направление, новая колонка сортируется по возрастанию"""
        if field == self.field:
            return replace(self, direction=self.direction.flipped())
        return SortState(field=field, direction=SortDirection.ASC)


@dataclass(frozen=True)
class FilterState:
    search_query: str = ""
    active_tags: Tuple[str, ...] = ()
    active_status: Optional[str] = None
    active_priority: Optional[str] = None

    def with_search(self, query: str) -> "FilterState":
        return replace(self, search_query=query)

    def toggle_tag(self, tag: str) -> "FilterState":
        if tag in self.active_tags:
            return replace(self, active_tags=tuple(t for t in self.active_tags if t != tag))
        return replace(self, active_tags=self.active_tags + (tag,))

    def toggle_status(self, status: str) -> "FilterState":
        return replace(self, active_status=None if self.active_status == status else status)

    def toggle_priority(self, priority: str) -> "FilterState":
        return replace(self, active_priority=None if self.active_priority == priority else priority)

    def clear(self) -> "FilterState":
        return FilterState()

    @property
    def is_active(self) -> bool:
        return bool(self.search_query or self.active_tags or self.active_status or self.active_priority)


def matches_filters(
    row: DocumentRow,
    search_query: str = "",
    active_tags: Iterable[str] = (),
    active_status: Optional[str] = None,
    active_priority: Optional[str] = None
) -> bool:
    """И между измерениями фильтра, ИЛИ внутри набора тегов"""
    document = row.document
    if search_query and search_query.casefold() not in document.title.casefold():
        return False

    active_tags = list(active_tags)
    if active_tags and not any(tag in document.tags for tag in active_tags):
        return False

    if active_status and document.status != active_status:
        return False
    if active_priority and document.priority != active_priority:
        return False
    return True


def filter_documents(
    rows: Sequence[DocumentRow],
    search_query: str = "",
    active_tags: Iterable[str] = (),
    active_status: Optional[str] = None,
    active_priority: Optional[str] = None
) -> List[DocumentRow]:
    active_tags = tuple(active_tags)
    return [
        row for row in rows
        if matches_filters(row, search_query, active_tags, active_status, active_priority)
    ]


def _title_key(row: DocumentRow):
    title = row.document.title
    # Без учета регистра и диакритики, исходная строка разрешает равенство
    folded = "".join(
        ch for ch in unicodedata.normalize("NFKD", title) if not unicodedata.combining(ch)
    ).casefold()
    return folded, title


def _timestamp(value: Optional[datetime]) -> float:
    return value.timestamp() if value is not None else float("-inf")


SORT_KEYS: Dict[str, Callable[[DocumentRow], object]] = {
    "title": _title_key,
    "updatedAt": lambda row: _timestamp(row.document.updated_at),
    "createdAt": lambda row: _timestamp(row.document.created_at),
    "dueDate": lambda row: _timestamp(row.document.due_date),
    "priority": lambda row: PRIORITY_ORDER.get(row.document.priority, 0),
}


def sort_documents(
    rows: Sequence[DocumentRow],
    sort_field: str,
    sort_direction: SortDirection = SortDirection.ASC
) -> List[DocumentRow]:
    """Стабильная сортировка; неизвестное поле сохраняет исходный порядок"""
    key = SORT_KEYS.get(sort_field)
    if key is None:
        return list(rows)
    return sorted(rows, key=key, reverse=SortDirection(sort_direction) is SortDirection.DESC)


def derive_rows(rows: Sequence[DocumentRow], filters: FilterState, sort: SortState) -> List[DocumentRow]:
    """Видимые строки в порядке отображения"""
    filtered = filter_documents(
        rows,
        filters.search_query,
        filters.active_tags,
        filters.active_status,
        filters.active_priority,
    )
    return sort_documents(filtered, sort.field, sort.direction)
