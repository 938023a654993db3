import logging

from sqlalchemy.ext.asyncio import AsyncSession

from prdstudio.db.repositories.document_repository import DocumentRepository
from prdstudio.db.repositories.project_repository import ProjectRepository
from prdstudio.domains.documents.entities import Document
from prdstudio.domains.projects.entities import Project

logger = logging.getLogger(__name__)


async def seed_demo_data(session: AsyncSession) -> bool:
    """Демо-проект и документ для пустой базы"""
    project_repository = ProjectRepository(session)
    if await project_repository.count() > 0:
        return False

    project = await project_repository.create(Project(
        id=None,
        name="Mobile App Redesign",
        description="Redesign of the mobile app with enhanced UX"
    ))
    await DocumentRepository(session).create(Document.create_document(
        title="Mobile App Redesign PRD",
        project_id=project.id,
        content=""
    ))

    logger.info("Demo data seeded", extra={"project_id": project.id})
    return True
