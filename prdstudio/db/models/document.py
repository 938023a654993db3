from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from prdstudio.db.base import BaseModel, utcnow


class Document(BaseModel):
    __tablename__ = "documents"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    emoji = Column(String(16), default="📄")
    status = Column(String(32), default="draft", nullable=False)
    priority = Column(String(16), default="medium", nullable=True)
    tags = Column(JSON, default=list)
    favorite = Column(Boolean, default=False)
    assigned_to = Column(String(255), nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    # Обновляется сервисом при каждом изменении
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    project = relationship("Project", back_populates="documents")
