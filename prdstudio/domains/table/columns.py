import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

MIN_COLUMN_WIDTH = 80
TITLE_KEY = "title"


@dataclass
class ColumnDescriptor:
    id: str
    name: str
    key: str
    visible: bool = True
    width: int = 150

    @property
    def is_title(self) -> bool:
        return self.key == TITLE_KEY


DEFAULT_COLUMNS: Tuple[ColumnDescriptor, ...] = (
    ColumnDescriptor("col-1", "Title", "title", True, 300),
    ColumnDescriptor("col-2", "Status", "status", True, 120),
    ColumnDescriptor("col-3", "Last Updated", "updatedAt", True, 150),
    ColumnDescriptor("col-4", "Tags", "tags", True, 180),
    ColumnDescriptor("col-5", "Priority", "priority", True, 120),
    ColumnDescriptor("col-6", "Assignee", "assignedTo", True, 150),
    ColumnDescriptor("col-7", "Due Date", "dueDate", False, 120),
    ColumnDescriptor("col-8", "Created At", "createdAt", False, 150),
    ColumnDescriptor("col-9", "Created By", "createdBy", False, 150),
    ColumnDescriptor("col-10", "Comments", "comments", False, 100),
)


class ColumnModel:
    """Упорядоченный набор колонок одной таблицы; не сохраняется между запусками"""

    def __init__(self, columns: Optional[Iterable[ColumnDescriptor]] = None):
        defaults = list(columns) if columns is not None else list(DEFAULT_COLUMNS)
        if not any(c.is_title for c in defaults):
            raise ValueError("Column set must contain the title column")
        self._defaults = [self._normalize(c) for c in defaults]
        self._columns = [replace(c) for c in self._defaults]

    @property
    def columns(self) -> List[ColumnDescriptor]:
        return [replace(c) for c in self._columns]

    def visible_columns(self) -> List[ColumnDescriptor]:
        return [replace(c) for c in self._columns if c.visible]

    def get(self, column_id: str) -> ColumnDescriptor:
        return replace(self._find(column_id))

    def toggle_visibility(self, column_id: str, visible: bool) -> bool:
        """Показ/скрытие колонки; колонку title скрыть нельзя"""
        column = self._find(column_id)
        if column.is_title and not visible:
            logger.debug("Ignoring request to hide the title column")
            return column.visible
        column.visible = visible
        return column.visible

    def resize(self, column_id: str, width: int) -> int:
        """Новая ширина не меньше MIN_COLUMN_WIDTH"""
        column = self._find(column_id)
        column.width = max(MIN_COLUMN_WIDTH, int(width))
        return column.width

    def reorder(self, from_index: int, to_index: int) -> None:
        """Обмен местами двух видимых колонок; скрытые остаются на своих позициях"""
        slots = [i for i, c in enumerate(self._columns) if c.visible]
        for index in (from_index, to_index):
            if not 0 <= index < len(slots):
                raise IndexError(f"Visible column index out of range: {index}")

        a, b = slots[from_index], slots[to_index]
        self._columns[a], self._columns[b] = self._columns[b], self._columns[a]

    def reset_to_default(self) -> None:
        self._columns = [replace(c) for c in self._defaults]

    def _find(self, column_id: str) -> ColumnDescriptor:
        for column in self._columns:
            if column.id == column_id:
                return column
        raise KeyError(f"Unknown column: {column_id}")

    @staticmethod
    def _normalize(column: ColumnDescriptor) -> ColumnDescriptor:
        return replace(
            column,
            visible=True if column.is_title else column.visible,
            width=max(MIN_COLUMN_WIDTH, column.width),
        )
