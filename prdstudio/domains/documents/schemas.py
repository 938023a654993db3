from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from prdstudio.domains.documents.entities import DocumentPriority, DocumentStatus, unique_tags


class CamelModel(BaseModel):
    """Базовая схема: camelCase в JSON, snake_case в Python"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class DocumentBase(CamelModel):
    """Базовая схема документа"""
    title: str = Field(..., min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, max_length=1000000)
    emoji: str = Field(default="📄", max_length=16)
    status: DocumentStatus = DocumentStatus.DRAFT
    priority: Optional[DocumentPriority] = DocumentPriority.MEDIUM
    tags: List[str] = Field(default_factory=list)
    favorite: bool = False
    assigned_to: Optional[str] = Field(default=None, max_length=255)
    due_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return unique_tags(v)


class DocumentCreate(DocumentBase):
    """Схема для создания документа"""
    project_id: Optional[int] = None


class DocumentUpdate(CamelModel):
    """Частичное обновление: передаются только изменяемые поля"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, max_length=1000000)
    emoji: Optional[str] = Field(None, max_length=16)
    status: Optional[DocumentStatus] = None
    priority: Optional[DocumentPriority] = None
    tags: Optional[List[str]] = None
    favorite: Optional[bool] = None
    assigned_to: Optional[str] = Field(None, max_length=255)
    due_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is None or not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("status", "emoji", "favorite")
    @classmethod
    def reject_null(cls, v, info):
        # null допустим только для priority, assignedTo, dueDate, content
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return unique_tags(v)

    def changes(self) -> dict:
        """Только явно переданные поля"""
        return self.model_dump(exclude_unset=True)


class DocumentResponse(CamelModel):
    """Схема для ответа с данными документа"""
    id: int
    title: str
    content: Optional[str] = None
    project_id: int
    emoji: Optional[str] = "📄"
    status: str
    priority: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    favorite: bool = False
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
