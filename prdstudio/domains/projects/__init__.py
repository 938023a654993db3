from prdstudio.domains.projects.entities import Project
from prdstudio.domains.projects.schemas import ProjectCreate, ProjectResponse
from prdstudio.domains.projects.services import ProjectService

__all__ = [
    "Project",
    "ProjectCreate", "ProjectResponse",
    "ProjectService",
]
