import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from prdstudio.db.repositories.project_repository import ProjectRepository
from prdstudio.domains.projects.entities import Project
from prdstudio.domains.projects.schemas import ProjectCreate

logger = logging.getLogger(__name__)


class ProjectService:
    """Сервис для работы с проектами"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.project_repository = ProjectRepository(session)

    async def create_project(self, project_data: ProjectCreate) -> Project:
        project = Project(id=None, name=project_data.name, description=project_data.description)
        created = await self.project_repository.create(project)
        logger.info("Project created: id=%s name=%s", created.id, created.name)
        return created

    async def get_project(self, project_id: int) -> Optional[Project]:
        return await self.project_repository.get_by_id(project_id)

    async def list_projects(self) -> List[Project]:
        return await self.project_repository.get_all()
