import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from prdstudio.core.config import settings
from prdstudio.db.repositories.document_repository import DocumentRepository
from prdstudio.db.repositories.project_repository import ProjectRepository
from prdstudio.domains.documents.entities import Document
from prdstudio.domains.documents.exceptions import DocumentNotFoundError, ProjectNotFoundError
from prdstudio.domains.documents.schemas import DocumentCreate, DocumentUpdate

logger = logging.getLogger(__name__)


class DocumentService:
    """Сервис для работы с документами"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)
        self.project_repository = ProjectRepository(session)

    async def create_document(self, document_data: DocumentCreate) -> Document:
        """Создание нового документа"""
        project_id = document_data.project_id or settings.default_project_id
        if not await self.project_repository.get_by_id(project_id):
            raise ProjectNotFoundError(project_id)

        fields = document_data.model_dump(exclude={"title", "project_id"})
        document = Document.create_document(
            title=document_data.title,
            project_id=project_id,
            **fields
        )

        created = await self.document_repository.create(document)
        logger.info("Document created", extra={"document_id": created.id, "project_id": project_id})
        return created

    async def get_document(self, document_id: int) -> Document:
        """Получение документа по id"""
        document = await self.document_repository.get_by_id(document_id)
        if not document:
            raise DocumentNotFoundError(document_id)
        return document

    async def list_project_documents(self, project_id: int) -> List[Document]:
        """Получение документов проекта"""
        return await self.document_repository.get_by_project(project_id)

    async def update_document(self, document_id: int, update_data: DocumentUpdate) -> Document:
        """Частичное обновление документа; updatedAt пересчитывается сервером"""
        document = await self.get_document(document_id)

        applied = document.apply_changes(update_data.changes())
        updated = await self.document_repository.update(document)
        if not updated:
            # Документ удален между чтением и записью
            raise DocumentNotFoundError(document_id)

        logger.info(
            "Document updated: fields=%s", ",".join(applied) or "-",
            extra={"document_id": document_id}
        )
        return updated

    async def delete_document(self, document_id: int) -> None:
        """Удаление документа"""
        if not await self.document_repository.delete(document_id):
            raise DocumentNotFoundError(document_id)
        logger.info("Document deleted", extra={"document_id": document_id})
