"""
Form Module Model
Folder-like container that groups forms and can nest other modules.
"""

from sqlalchemy import Column, String, ForeignKey, Boolean, Integer, Text, JSON
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class FormModule(BaseModel):
    __tablename__ = "form_modules"

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(50), nullable=True)
    color = Column(String(50), nullable=True)
    settings = Column(JSON, nullable=False, default=dict)

    # Hierarchy
    parent_id = Column(
        String(255),
        ForeignKey("form_modules.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    module_type = Column(String(20), nullable=False, default="standard")  # master, child, standard
    level = Column(Integer, nullable=False, default=0)
    path = Column(String(1000), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    # Relationships
    parent = relationship("FormModule", remote_side="FormModule.id", back_populates="children")
    children = relationship("FormModule", back_populates="parent", cascade="all, delete-orphan")
    forms = relationship(
        "Form",
        back_populates="module",
        cascade="all, delete-orphan",
        order_by="Form.created_at"
    )

    def __repr__(self):
        return f"<FormModule(id={self.id}, name='{self.name}')>"
