import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, List, Optional

import httpx

from prdstudio.core.config import settings
from prdstudio.domains.documents.schemas import DocumentResponse
from prdstudio.domains.table.cache import DocumentCache, DocumentRow
from prdstudio.domains.table.cells import CellRenderer, HeaderView, RowView
from prdstudio.domains.table.columns import ColumnDescriptor, ColumnModel
from prdstudio.domains.table.edit_session import CellKey, EditSessionStore
from prdstudio.domains.table.editors import (
    COMMON_TAGS, DEFAULT_ROSTER, CellEditor, EditorContext, TeamMember
)
from prdstudio.domains.table.exceptions import FieldUpdateError
from prdstudio.domains.table.gateway import FieldUpdateGateway
from prdstudio.domains.table.sorting import FilterState, SortState, derive_rows

logger = logging.getLogger(__name__)


class DocumentTableView:
    """
    Таблица документов одного проекта.

    Собирает вместе кэш документов, gateway обновлений, сессию редактирования,
    модель колонок и состояние сортировки/фильтров. Не рисует сама,
    а отдает HeaderView/RowView для любого представления.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        project_id: Optional[int] = None,
        columns: Optional[Iterable[ColumnDescriptor]] = None,
        common_tags: Iterable[str] = COMMON_TAGS,
        roster: Iterable[TeamMember] = DEFAULT_ROSTER,
        timeout: Optional[float] = None
    ):
        self.cache = DocumentCache(client, project_id)
        self.gateway = FieldUpdateGateway(client, self.cache, timeout=timeout)
        self.store = EditSessionStore(self.gateway)
        self.columns = ColumnModel(columns)
        self.filters = FilterState()
        self.sort = SortState()
        self.selected_document_id: Optional[int] = None
        self.renderer = CellRenderer(
            self.store,
            EditorContext(tuple(common_tags), tuple(roster)),
            on_navigate=self.navigate,
            lookup=self.cache.get,
        )

    async def load(self) -> List[DocumentRow]:
        return await self.cache.fetch()

    def visible_rows(self) -> List[DocumentRow]:
        return derive_rows(self.cache.rows(), self.filters, self.sort)

    def header(self) -> List[HeaderView]:
        return self.renderer.header(self.columns.visible_columns(), self.sort)

    def render(self) -> List[RowView]:
        columns = self.columns.visible_columns()
        return [self.renderer.render_row(row, columns) for row in self.visible_rows()]

    def toggle_sort(self, field: str) -> SortState:
        self.sort = self.sort.toggle(field)
        return self.sort

    def set_search(self, query: str) -> None:
        self.filters = self.filters.with_search(query)

    def toggle_tag_filter(self, tag: str) -> None:
        self.filters = self.filters.toggle_tag(tag)

    def toggle_status_filter(self, status: str) -> None:
        self.filters = self.filters.toggle_status(status)

    def toggle_priority_filter(self, priority: str) -> None:
        self.filters = self.filters.toggle_priority(priority)

    def clear_filters(self) -> None:
        self.filters = self.filters.clear()

    def common_tags(self) -> List[str]:
        """Общие теги и все теги, встречающиеся в документах, без повторов"""
        tags = list(self.renderer.context.common_tags)
        for row in self.cache.rows():
            tags.extend(t for t in row.document.tags if t not in tags)
        return tags

    async def click_cell(self, document_id: int, key: str) -> Optional[CellEditor]:
        return await self.renderer.click(self._row(document_id), key)

    async def double_click_cell(self, document_id: int, key: str) -> Optional[CellEditor]:
        return await self.renderer.double_click(self._row(document_id), key)

    async def pointer_down(self, document_id: Optional[int] = None, key: Optional[str] = None) -> bool:
        """Клик в любом месте страницы; без аргументов это клик вне таблицы"""
        target = CellKey(document_id, key) if document_id is not None and key else None
        return await self.store.handle_pointer_down(target)

    @property
    def editor(self) -> Optional[CellEditor]:
        return self.renderer.editor

    async def toggle_favorite(self, document_id: int) -> Optional[DocumentResponse]:
        row = self._row(document_id)
        try:
            return await self.gateway.update_field(document_id, "favorite", not row.document.favorite)
        except FieldUpdateError as e:
            logger.error("%s", e, extra={"document_id": document_id, "field": "favorite"})
            return None

    def navigate(self, document_id: int) -> None:
        self.selected_document_id = document_id
        logger.debug("Open document", extra={"document_id": document_id})

    def _row(self, document_id: int) -> DocumentRow:
        row = self.cache.get(document_id)
        if row is None:
            raise KeyError(f"Document {document_id} is not loaded")
        return row


@asynccontextmanager
async def open_table(
    project_id: Optional[int] = None,
    base_url: Optional[str] = None,
    **kwargs
) -> AsyncIterator[DocumentTableView]:
    """Таблица с собственным HTTP-клиентом к API"""
    async with httpx.AsyncClient(
        base_url=base_url or settings.api_base_url,
        timeout=settings.request_timeout,
    ) as client:
        view = DocumentTableView(client, project_id=project_id, **kwargs)
        await view.load()
        yield view
