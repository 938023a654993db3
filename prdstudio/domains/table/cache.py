import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import httpx
from pydantic import ValidationError

from prdstudio.domains.documents.entities import count_words
from prdstudio.domains.documents.schemas import DocumentResponse
from prdstudio.domains.table.exceptions import CacheFetchError
from prdstudio.domains.table.fields import DOCUMENT_ATTRS, as_utc, format_date

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200

Observer = Callable[[List["DocumentRow"]], None]


def build_custom_data(document: DocumentResponse) -> Dict[str, Any]:
    """Производные данные строки: число слов, время чтения, дата правки"""
    word_count = count_words(document.content)
    return {
        "wordCount": word_count,
        "estimatedReadTime": f"{max(1, math.ceil(word_count / WORDS_PER_MINUTE))} min",
        "lastEdited": format_date(document.updated_at),
    }


@dataclass
class DocumentRow:
    """Строка таблицы: авторитетный документ с сервера и производные данные"""
    document: DocumentResponse
    custom: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, document: DocumentResponse) -> "DocumentRow":
        document = document.model_copy(update={
            "created_at": as_utc(document.created_at),
            "updated_at": as_utc(document.updated_at),
            "due_date": as_utc(document.due_date),
        })
        return cls(document=document, custom=build_custom_data(document))

    @property
    def id(self) -> int:
        return self.document.id

    def value(self, key: str) -> Any:
        """Значение ячейки: поле документа или запись из custom"""
        attr = DOCUMENT_ATTRS.get(key)
        if attr is not None:
            return getattr(self.document, attr)
        return self.custom.get(key)


class DocumentCache:
    """Общий кэш документов проекта; все таблицы читают строки отсюда"""

    def __init__(self, client: httpx.AsyncClient, project_id: Optional[int] = None):
        self.client = client
        self.project_id = project_id
        self.fetch_count = 0
        self.loaded = False
        self._rows: List[DocumentRow] = []
        self._observers: List[Observer] = []

    async def fetch(self) -> List[DocumentRow]:
        """Загрузка GET /api/documents и уведомление наблюдателей"""
        params = {"projectId": self.project_id} if self.project_id is not None else None
        self.fetch_count += 1

        try:
            response = await self.client.get("/api/documents", params=params)
        except httpx.HTTPError as e:
            logger.error("Document list request failed: %s", e, extra={"project_id": self.project_id})
            raise CacheFetchError(f"Document list request failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                "Document list request returned %s", response.status_code,
                extra={"project_id": self.project_id}
            )
            raise CacheFetchError(
                f"Unexpected status {response.status_code}", status_code=response.status_code
            )

        try:
            documents = [DocumentResponse.model_validate(item) for item in response.json()]
        except (ValueError, ValidationError) as e:
            raise CacheFetchError(f"Malformed document list: {e}") from e

        self._rows = [DocumentRow.from_document(doc) for doc in documents]
        self.loaded = True
        logger.debug("Document cache refreshed: %d rows", len(self._rows))
        self._notify()
        return self.rows()

    async def invalidate(self) -> List[DocumentRow]:
        """Сброс и повторная загрузка после изменения на сервере"""
        self.loaded = False
        return await self.fetch()

    def rows(self) -> List[DocumentRow]:
        return list(self._rows)

    def get(self, document_id: int) -> Optional[DocumentRow]:
        for row in self._rows:
            if row.id == document_id:
                return row
        return None

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Подписка на обновления; возвращает функцию отписки"""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        rows = self.rows()
        for observer in list(self._observers):
            observer(rows)
