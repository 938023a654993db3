from prdstudio.db.repositories.document_repository import DocumentRepository
from prdstudio.db.repositories.project_repository import ProjectRepository

__all__ = [
    "DocumentRepository",
    "ProjectRepository",
]
