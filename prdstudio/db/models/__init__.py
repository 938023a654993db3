from prdstudio.db.models.project import Project
from prdstudio.db.models.document import Document

__all__ = [
    "Project",
    "Document",
]
