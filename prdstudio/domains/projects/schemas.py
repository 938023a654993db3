from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from prdstudio.domains.documents.schemas import CamelModel


class ProjectCreate(CamelModel):
    """Схема для создания проекта"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class ProjectResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
