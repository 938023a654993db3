"""
Отрисовка таблицы документов: заголовок, строки и ячейки.

Вид ячейки определяется реестром FIELD_REGISTRY по виду поля: как показывать
значение, каким редактором править, каким действием открывать редактор.
Ячейка находится в режиме отображения, пока EditSessionStore не указывает на нее.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Type

from prdstudio.domains.table.cache import DocumentRow
from prdstudio.domains.table.columns import ColumnDescriptor
from prdstudio.domains.table.edit_session import CellKey, EditPhase, EditSessionStore
from prdstudio.domains.table.editors import (
    AssigneeEditor, CellEditor, DueDateEditor, EditorContext, PriorityEditor,
    StatusEditor, TagsEditor, TitleEditor
)
from prdstudio.domains.table.fields import (
    DEFAULT_EMOJI, FieldKind, field_kind, format_date, format_priority_label,
    format_status_label, initials, priority_tone, status_tone, truncate_text
)
from prdstudio.domains.table.sorting import SORTABLE_FIELDS, SortState

logger = logging.getLogger(__name__)

# Ширина символа и отступ под emoji для обрезки заголовка по ширине колонки
CHAR_WIDTH_PX = 8
TITLE_PADDING_PX = 48
TITLE_MIN_CHARS = 8
TAGS_SHOWN = 2


class EditTrigger(str, enum.Enum):
    NONE = "none"
    CLICK = "click"
    DOUBLE_CLICK = "double_click"


@dataclass(frozen=True)
class CellView:
    document_id: int
    column_id: str
    key: str
    kind: FieldKind
    text: str
    phase: EditPhase = EditPhase.DISPLAY
    placeholder: bool = False
    tone: Optional[str] = None
    badges: Sequence[str] = ()
    overflow: int = 0
    editable: bool = False


@dataclass(frozen=True)
class HeaderView:
    column_id: str
    label: str
    key: str
    width: int
    sortable: bool
    sort_direction: Optional[str] = None


@dataclass(frozen=True)
class RowView:
    document_id: int
    favorite: bool
    cells: List[CellView]


# Отображение: (строка, колонка) -> параметры CellView
Display = Callable[[DocumentRow, ColumnDescriptor], Dict[str, Any]]


def title_max_chars(width: int) -> int:
    return max(TITLE_MIN_CHARS, (width - TITLE_PADDING_PX) // CHAR_WIDTH_PX)


def _display_title(row: DocumentRow, column: ColumnDescriptor) -> Dict[str, Any]:
    document = row.document
    emoji = document.emoji or DEFAULT_EMOJI
    return {"text": f"{emoji} {truncate_text(document.title, title_max_chars(column.width))}"}


def _display_status(row: DocumentRow, column: ColumnDescriptor) -> Dict[str, Any]:
    status = row.document.status
    return {"text": format_status_label(status), "tone": status_tone(status)}


def _display_priority(row: DocumentRow, column: ColumnDescriptor) -> Dict[str, Any]:
    priority = row.document.priority
    if not priority:
        return {"text": "Set priority", "placeholder": True}
    return {"text": format_priority_label(priority), "tone": priority_tone(priority)}


def _display_tags(row: DocumentRow, column: ColumnDescriptor) -> Dict[str, Any]:
    tags = list(row.document.tags or [])
    if not tags:
        return {"text": "Add tags", "placeholder": True}
    # Не больше двух бейджей; иначе первый тег и счетчик остальных
    shown = tags if len(tags) <= TAGS_SHOWN else tags[:1]
    overflow = len(tags) - len(shown)
    text = ", ".join(shown) + (f" +{overflow}" if overflow else "")
    return {"text": text, "badges": tuple(shown), "overflow": overflow}


def _display_assignee(row: DocumentRow, column: ColumnDescriptor) -> Dict[str, Any]:
    name = row.document.assigned_to
    if not name:
        return {"text": "Unassigned", "placeholder": True}
    return {"text": name, "badges": (initials(name),)}


def _display_due_date(row: DocumentRow, column: ColumnDescriptor) -> Dict[str, Any]:
    due = row.document.due_date
    if due is None:
        return {"text": "No date", "placeholder": True}
    return {"text": format_date(due)}


def _display_timestamp(row: DocumentRow, column: ColumnDescriptor) -> Dict[str, Any]:
    value = row.value(column.key)
    return {"text": format_date(value) if value is not None else ""}


def _display_derived(row: DocumentRow, column: ColumnDescriptor) -> Dict[str, Any]:
    value = row.value(column.key)
    return {"text": "" if value is None else str(value)}


@dataclass(frozen=True)
class FieldCapability:
    kind: FieldKind
    display: Display
    editor: Optional[Type[CellEditor]] = None
    trigger: EditTrigger = EditTrigger.NONE

    @property
    def editable(self) -> bool:
        return self.editor is not None and self.trigger is not EditTrigger.NONE


FIELD_REGISTRY: Dict[FieldKind, FieldCapability] = {
    FieldKind.TITLE: FieldCapability(FieldKind.TITLE, _display_title, TitleEditor, EditTrigger.DOUBLE_CLICK),
    FieldKind.STATUS: FieldCapability(FieldKind.STATUS, _display_status, StatusEditor, EditTrigger.DOUBLE_CLICK),
    FieldKind.PRIORITY: FieldCapability(
        FieldKind.PRIORITY, _display_priority, PriorityEditor, EditTrigger.DOUBLE_CLICK
    ),
    FieldKind.TAGS: FieldCapability(FieldKind.TAGS, _display_tags, TagsEditor, EditTrigger.CLICK),
    FieldKind.ASSIGNEE: FieldCapability(
        FieldKind.ASSIGNEE, _display_assignee, AssigneeEditor, EditTrigger.DOUBLE_CLICK
    ),
    FieldKind.DUE_DATE: FieldCapability(
        FieldKind.DUE_DATE, _display_due_date, DueDateEditor, EditTrigger.DOUBLE_CLICK
    ),
    FieldKind.TIMESTAMP: FieldCapability(FieldKind.TIMESTAMP, _display_timestamp),
    FieldKind.DERIVED: FieldCapability(FieldKind.DERIVED, _display_derived),
}


def capability_for(key: str) -> FieldCapability:
    return FIELD_REGISTRY[field_kind(key)]


class CellRenderer:
    """Отрисовка ячеек и передача действий пользователя в EditSessionStore"""

    def __init__(
        self,
        store: EditSessionStore,
        context: Optional[EditorContext] = None,
        on_navigate: Optional[Callable[[int], None]] = None,
        lookup: Optional[Callable[[int], Optional[DocumentRow]]] = None
    ):
        self.store = store
        self.context = context or EditorContext()
        self.on_navigate = on_navigate
        # Актуальная строка из кэша; нужна после сохранения по клику
        self.lookup = lookup
        self.editor: Optional[CellEditor] = None
        store.subscribe(self._on_session_change)

    def header(self, columns: Sequence[ColumnDescriptor], sort: SortState) -> List[HeaderView]:
        return [
            HeaderView(
                column_id=column.id,
                label=column.name,
                key=column.key,
                width=column.width,
                sortable=column.key in SORTABLE_FIELDS,
                sort_direction=sort.direction.value if sort.field == column.key else None,
            )
            for column in columns
        ]

    def render_cell(self, row: DocumentRow, column: ColumnDescriptor) -> CellView:
        capability = capability_for(column.key)
        try:
            params = capability.display(row, column)
        except (KeyError, AttributeError, TypeError, ValueError) as e:
            # Битые данные строки не должны ронять таблицу
            logger.warning(
                "Cannot render %s: %s", column.key, e,
                extra={"document_id": row.id, "field": column.key}
            )
            params = {"text": ""}

        phase = EditPhase.EDITING if self.store.is_editing(row.id, column.key) else EditPhase.DISPLAY
        return CellView(
            document_id=row.id,
            column_id=column.id,
            key=column.key,
            kind=capability.kind,
            phase=phase,
            editable=capability.editable,
            **params,
        )

    def render_row(self, row: DocumentRow, columns: Sequence[ColumnDescriptor]) -> RowView:
        return RowView(
            document_id=row.id,
            favorite=row.document.favorite,
            cells=[self.render_cell(row, column) for column in columns],
        )

    async def click(self, row: DocumentRow, key: str) -> Optional[CellEditor]:
        """Одиночный клик: навигация по title, редактор для полей с CLICK"""
        await self.store.handle_pointer_down(CellKey(row.id, key))
        row = self._fresh(row)
        capability = capability_for(key)

        if capability.kind is FieldKind.TITLE:
            if self.on_navigate is not None:
                self.on_navigate(row.id)
            return None
        if capability.trigger is EditTrigger.CLICK:
            return self._open_editor(row, key, capability)
        return None

    async def double_click(self, row: DocumentRow, key: str) -> Optional[CellEditor]:
        await self.store.handle_pointer_down(CellKey(row.id, key))
        row = self._fresh(row)
        capability = capability_for(key)
        if capability.trigger is EditTrigger.DOUBLE_CLICK:
            return self._open_editor(row, key, capability)
        return None

    def _fresh(self, row: DocumentRow) -> DocumentRow:
        if self.lookup is None:
            return row
        return self.lookup(row.id) or row

    def _open_editor(self, row: DocumentRow, key: str, capability: FieldCapability) -> CellEditor:
        if self.editor is not None and self.store.is_editing(row.id, key):
            return self.editor
        self.store.start_edit(row.id, key, row.value(key))
        self.editor = capability.editor(self.store, row, key, self.context)
        return self.editor

    def _on_session_change(self, phase: EditPhase, session) -> None:
        if phase is EditPhase.DISPLAY:
            self.editor = None
        elif self.editor is not None and not self.store.is_editing(self.editor.document_id, self.editor.field):
            self.editor = None
