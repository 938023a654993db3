from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from prdstudio.db.models.document import Document as DocumentModel

if TYPE_CHECKING:
    from prdstudio.domains.documents.entities import Document


class DocumentRepository:
    """Репозиторий для работы с документами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: "Document") -> "Document":
        """Создание нового документа"""
        db_document = DocumentModel(
            title=document.title,
            content=document.content,
            project_id=document.project_id,
            emoji=document.emoji,
            status=document.status,
            priority=document.priority,
            tags=list(document.tags),
            favorite=document.favorite,
            assigned_to=document.assigned_to,
            due_date=document.due_date,
            created_at=document.created_at,
            updated_at=document.updated_at
        )

        self.session.add(db_document)
        try:
            await self.session.commit()
            await self.session.refresh(db_document)
            return self._to_domain(db_document)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Invalid project_id")

    async def get_by_id(self, document_id: int) -> Optional["Document"]:
        """Получение документа по id"""
        result = await self.session.execute(
            select(DocumentModel).where(DocumentModel.id == document_id)
        )
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def get_by_project(self, project_id: int) -> List["Document"]:
        """Получение документов проекта в порядке создания"""
        result = await self.session.execute(
            select(DocumentModel)
            .where(DocumentModel.project_id == project_id)
            .order_by(DocumentModel.id)
        )
        db_documents = result.scalars().all()
        return [self._to_domain(doc) for doc in db_documents]

    async def update(self, document: "Document") -> Optional["Document"]:
        """Сохранение всех изменяемых полей документа"""
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.id == document.id)
            .values(
                title=document.title,
                content=document.content,
                emoji=document.emoji,
                status=document.status,
                priority=document.priority,
                tags=list(document.tags),
                favorite=document.favorite,
                assigned_to=document.assigned_to,
                due_date=document.due_date,
                updated_at=document.updated_at
            )
        )

        await self.session.execute(stmt)
        await self.session.commit()

        return await self.get_by_id(document.id)

    async def delete(self, document_id: int) -> bool:
        """Удаление документа"""
        stmt = delete(DocumentModel).where(DocumentModel.id == document_id)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(DocumentModel.id)))
        return result.scalar()

    def _to_domain(self, db_document: DocumentModel) -> "Document":
        """Преобразование модели БД в доменную сущность"""
        from prdstudio.domains.documents.entities import Document

        return Document(
            id=db_document.id,
            title=db_document.title,
            project_id=db_document.project_id,
            content=db_document.content,
            emoji=db_document.emoji,
            status=db_document.status,
            priority=db_document.priority,
            tags=db_document.tags,
            favorite=bool(db_document.favorite),
            assigned_to=db_document.assigned_to,
            due_date=db_document.due_date,
            created_at=db_document.created_at,
            updated_at=db_document.updated_at
        )
