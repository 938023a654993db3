from prdstudio.domains.documents.entities import Document, DocumentPriority, DocumentStatus
from prdstudio.domains.documents.exceptions import (
    DocumentServiceError, DocumentNotFoundError, ProjectNotFoundError
)
from prdstudio.domains.documents.schemas import (
    DocumentBase, DocumentCreate, DocumentUpdate, DocumentResponse
)
from prdstudio.domains.documents.services import DocumentService

__all__ = [
    "Document", "DocumentPriority", "DocumentStatus",
    "DocumentServiceError", "DocumentNotFoundError", "ProjectNotFoundError",
    "DocumentBase", "DocumentCreate", "DocumentUpdate", "DocumentResponse",
    "DocumentService"
]
