from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from prdstudio.db.models.project import Project as ProjectModel

if TYPE_CHECKING:
    from prdstudio.domains.projects.entities import Project


class ProjectRepository:
    """Репозиторий для работы с проектами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, project: "Project") -> "Project":
        db_project = ProjectModel(
            name=project.name,
            description=project.description,
            created_at=project.created_at
        )
        self.session.add(db_project)
        await self.session.commit()
        await self.session.refresh(db_project)
        return self._to_domain(db_project)

    async def get_by_id(self, project_id: int) -> Optional["Project"]:
        result = await self.session.execute(
            select(ProjectModel).where(ProjectModel.id == project_id)
        )
        db_project = result.scalar_one_or_none()
        return self._to_domain(db_project) if db_project else None

    async def get_all(self) -> List["Project"]:
        result = await self.session.execute(select(ProjectModel).order_by(ProjectModel.id))
        return [self._to_domain(p) for p in result.scalars().all()]

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(ProjectModel.id)))
        return result.scalar()

    def _to_domain(self, db_project: ProjectModel) -> "Project":
        """Преобразование модели БД в доменную сущность"""
        from prdstudio.domains.projects.entities import Project

        return Project(
            id=db_project.id,
            name=db_project.name,
            description=db_project.description,
            created_at=db_project.created_at
        )
