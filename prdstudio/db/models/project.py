from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from prdstudio.db.base import BaseModel


class Project(BaseModel):
    __tablename__ = "projects"

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Relationships
    documents = relationship("Document", back_populates="project", cascade="all, delete-orphan")
