class DocumentServiceError(Exception):
    """Базовая ошибка сервиса документов"""


class DocumentNotFoundError(DocumentServiceError):
    def __init__(self, document_id: int):
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class ProjectNotFoundError(DocumentServiceError):
    def __init__(self, project_id: int):
        super().__init__(f"Project {project_id} not found")
        self.project_id = project_id
