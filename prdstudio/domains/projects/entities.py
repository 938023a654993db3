from datetime import datetime, timezone
from typing import Optional


class Project:
    """Сущность проекта: коллекция документов"""

    def __init__(
        self,
        id: Optional[int],
        name: str,
        description: Optional[str] = None,
        created_at: Optional[datetime] = None
    ):
        self.id = id
        self.name = name
        self.description = description
        self.created_at = created_at or datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return f"Project(id={self.id}, name={self.name})"
