"""
Состояние редактирования ячеек одной таблицы.

В каждый момент открыта не больше чем одна сессия редактирования.
Переходы явные: DISPLAY -> EDITING через start_edit, EDITING -> DISPLAY
через commit, close (сохранение при закрытии) или cancel.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from prdstudio.domains.documents.schemas import DocumentResponse
from prdstudio.domains.table.exceptions import FieldUpdateError
from prdstudio.domains.table.gateway import FieldUpdateGateway

logger = logging.getLogger(__name__)


class EditPhase(str, enum.Enum):
    DISPLAY = "display"
    EDITING = "editing"


@dataclass(frozen=True)
class CellKey:
    document_id: int
    field: str


@dataclass
class EditSession:
    cell: CellKey
    edit_value: Any
    original_value: Any


Listener = Callable[[EditPhase, Optional[EditSession]], None]


class EditSessionStore:
    """Единственная сессия редактирования в пределах экземпляра таблицы"""

    def __init__(self, gateway: FieldUpdateGateway):
        self.gateway = gateway
        self._session: Optional[EditSession] = None
        self._listeners: List[Listener] = []

    @property
    def phase(self) -> EditPhase:
        return EditPhase.EDITING if self._session else EditPhase.DISPLAY

    @property
    def session(self) -> Optional[EditSession]:
        return self._session

    @property
    def editing_cell(self) -> Optional[CellKey]:
        return self._session.cell if self._session else None

    @property
    def edit_value(self) -> Any:
        return self._session.edit_value if self._session else None

    def is_editing(self, document_id: int, field: str) -> bool:
        return self.editing_cell == CellKey(document_id, field)

    def start_edit(self, document_id: int, field: str, initial_value: Any) -> EditSession:
        """Открытие сессии; предыдущая сессия отбрасывается"""
        if field == "tags" and initial_value is None:
            # Редактор тегов всегда работает со списком
            initial_value = []

        if self._session is not None:
            logger.debug("Replacing edit session on %s", self._session.cell)

        self._session = EditSession(
            cell=CellKey(document_id, field),
            edit_value=initial_value,
            original_value=initial_value,
        )
        self._emit()
        return self._session

    def set_edit_value(self, value: Any) -> None:
        """Новое промежуточное значение, без валидации"""
        if self._session is None:
            return
        self._session.edit_value = value
        self._emit()

    async def commit(self, document_id: int, field: str, value: Any) -> Optional[DocumentResponse]:
        """Сохранение через gateway; сессия закрывается в любом случае"""
        # Сессия закрывается до запроса, чтобы не закрыть сессию, открытую во время ожидания
        self._end_session()

        try:
            return await self.gateway.update_field(document_id, field, value)
        except FieldUpdateError as e:
            logger.error("%s", e, extra={"document_id": document_id, "field": field})
            return None

    async def close(self) -> Optional[DocumentResponse]:
        """Закрытие без отмены сохраняет текущее значение"""
        if self._session is None:
            return None
        cell = self._session.cell
        return await self.commit(cell.document_id, cell.field, self._session.edit_value)

    def cancel(self) -> None:
        """Отмена без сохранения"""
        self._end_session()

    async def handle_pointer_down(self, target: Optional[CellKey]) -> bool:
        """Клик вне редактируемой ячейки сохраняет непустое значение"""
        session = self._session
        if session is None or target == session.cell:
            return False
        if session.edit_value is None:
            return False

        await self.commit(session.cell.document_id, session.cell.field, session.edit_value)
        return True

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _end_session(self) -> None:
        if self._session is None:
            return
        self._session = None
        self._emit()

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self.phase, self._session)
