import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

import httpx
from pydantic import ValidationError
from pydantic_core import to_jsonable_python

from prdstudio.domains.documents.schemas import DocumentResponse
from prdstudio.domains.table.cache import DocumentCache
from prdstudio.domains.table.exceptions import (
    CacheFetchError, DocumentMissingError, FieldUpdateError, FieldValidationError
)
from prdstudio.domains.table.fields import validate_field_value

logger = logging.getLogger(__name__)

_MISSING = object()


class FieldUpdateGateway:
    """
    Сохранение одного поля документа через PATCH /api/documents/{id}.

    Если в кэше уже лежит то же значение, запрос не отправляется:
    повторный commit без изменений стоит ноль запросов.
    Обновления одного поля одного документа отправляются по очереди,
    так что на сервере остается значение последнего commit.
    После успешного ответа кэш перезагружается, чтобы все наблюдатели
    увидели авторитетную строку.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: DocumentCache,
        timeout: Optional[float] = None
    ):
        self.client = client
        self.cache = cache
        self.timeout = timeout
        self.request_count = 0
        self._locks: Dict[Tuple[int, str], asyncio.Lock] = {}
        # Отправленные значения, которых еще нет в кэше
        self._unreconciled: Dict[Tuple[int, str], Any] = {}

    async def update_field(self, document_id: int, field: str, value: Any) -> DocumentResponse:
        """Отправка частичного обновления {field: value}"""
        try:
            value = validate_field_value(field, value)
        except (ValueError, TypeError) as e:
            raise FieldValidationError(document_id, field, value, str(e)) from e

        key = (document_id, field)
        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            row = self.cache.get(document_id)
            current = self._unreconciled.get(key, _MISSING)
            if current is _MISSING and row is not None:
                current = row.value(field)
            if row is not None and current == value:
                logger.debug(
                    "Skipping unchanged %s", field,
                    extra={"document_id": document_id, "field": field}
                )
                return row.document

            response = await self._send(document_id, field, value)
            try:
                updated = DocumentResponse.model_validate(response.json())
            except (ValueError, ValidationError) as e:
                raise FieldUpdateError(document_id, field, f"malformed response: {e}") from e

            logger.info("Field updated", extra={"document_id": document_id, "field": field})

            self._unreconciled[key] = value
            try:
                await self.cache.invalidate()
            except CacheFetchError as e:
                # Обновление прошло; строка обновится при следующей загрузке
                logger.warning("Cache refresh after update failed: %s", e, extra={"document_id": document_id})
            else:
                self._unreconciled.pop(key, None)

        return updated

    async def _send(self, document_id: int, field: str, value: Any) -> httpx.Response:
        body = to_jsonable_python({field: value})
        kwargs = {"timeout": self.timeout} if self.timeout is not None else {}
        self.request_count += 1

        try:
            response = await self.client.patch(f"/api/documents/{document_id}", json=body, **kwargs)
        except httpx.HTTPError as e:
            raise FieldUpdateError(document_id, field, f"transport error: {e}") from e

        if response.status_code == 404:
            raise DocumentMissingError(document_id, field)
        if response.status_code in (400, 422):
            raise FieldValidationError(
                document_id, field, value, _error_message(response), status_code=response.status_code
            )
        if not response.is_success:
            raise FieldUpdateError(
                document_id, field, _error_message(response), status_code=response.status_code
            )
        return response


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        return str(payload.get("message") or payload.get("detail") or payload)
    return str(payload)
