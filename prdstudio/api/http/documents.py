from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from prdstudio.core.config import settings
from prdstudio.core.db import get_db
from prdstudio.domains.documents.exceptions import DocumentNotFoundError, ProjectNotFoundError
from prdstudio.domains.documents.schemas import DocumentCreate, DocumentResponse, DocumentUpdate
from prdstudio.domains.documents.services import DocumentService

router = APIRouter(prefix="/api/documents", tags=["documents"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")


@router.get("", response_model=List[DocumentResponse])
async def list_documents(
    project_id: Optional[str] = Query(None, alias="projectId"),
    db: AsyncSession = Depends(get_db)
):
    """Получение документов проекта"""
    if project_id is None:
        # Без projectId отдаем проект по умолчанию
        resolved_id = settings.default_project_id
    else:
        try:
            resolved_id = int(project_id)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid project ID")

    document_service = DocumentService(db)
    documents = await document_service.list_project_documents(resolved_id)
    return [DocumentResponse.model_validate(doc) for doc in documents]


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Получение документа по id"""
    document_service = DocumentService(db)

    try:
        document = await document_service.get_document(document_id)
    except DocumentNotFoundError:
        raise _not_found()

    return DocumentResponse.model_validate(document)


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    db: AsyncSession = Depends(get_db)
):
    """Создание нового документа"""
    document_service = DocumentService(db)

    try:
        document = await document_service.create_document(document_data)
    except (ProjectNotFoundError, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid project ID")

    return DocumentResponse.model_validate(document)


@router.patch("/{document_id}", response_model=DocumentResponse)
async def patch_document(
    document_id: int,
    update_data: DocumentUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Частичное обновление: в теле только измененные поля"""
    document_service = DocumentService(db)

    try:
        document = await document_service.update_document(document_id, update_data)
    except DocumentNotFoundError:
        raise _not_found()

    return DocumentResponse.model_validate(document)


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: int,
    update_data: DocumentUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Обновление документа из полного редактора"""
    # Старые клиенты отправляют через PUT частичные тела, семантика та же что у PATCH
    document_service = DocumentService(db)

    try:
        document = await document_service.update_document(document_id, update_data)
    except DocumentNotFoundError:
        raise _not_found()

    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Удаление документа"""
    document_service = DocumentService(db)

    try:
        await document_service.delete_document(document_id)
    except DocumentNotFoundError:
        raise _not_found()

    return Response(status_code=status.HTTP_204_NO_CONTENT)
