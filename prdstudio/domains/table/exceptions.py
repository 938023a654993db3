"""
Ошибки клиентской части таблицы документов.

Gateway поднимает их наружу, EditSessionStore перехватывает на границе
commit и только логирует: таблица не падает из-за неудачного обновления.
"""

from typing import Any, Optional


class TableError(Exception):
    """Базовая ошибка таблицы документов"""


class CacheFetchError(TableError):
    """Не удалось загрузить список документов"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class FieldUpdateError(TableError):
    """Не удалось сохранить значение поля"""

    def __init__(
        self,
        document_id: int,
        field: str,
        message: str,
        status_code: Optional[int] = None
    ):
        super().__init__(f"Failed to update {field} of document {document_id}: {message}")
        self.document_id = document_id
        self.field = field
        self.status_code = status_code


class FieldValidationError(FieldUpdateError):
    """Значение отклонено валидатором поля или сервером"""

    def __init__(self, document_id: int, field: str, value: Any, message: str, status_code: Optional[int] = None):
        super().__init__(document_id, field, message, status_code)
        self.value = value


class DocumentMissingError(FieldUpdateError):
    """Документ удален другим пользователем"""

    def __init__(self, document_id: int, field: str):
        super().__init__(document_id, field, "document not found", status_code=404)
