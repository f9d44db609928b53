"""
Form Section and Subform Models

Sections group fields on a form. A subform is a repeatable group of fields
nested inside a section; its fields belong to the form through the section.
"""

from sqlalchemy import Column, String, ForeignKey, Boolean, Integer, Text
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class FormSection(BaseModel):
    __tablename__ = "form_sections"

    form_id = Column(
        String(255),
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0)
    columns = Column(Integer, nullable=False, default=1)
    visible = Column(Boolean, nullable=False, default=True)
    collapsible = Column(Boolean, nullable=False, default=False)
    collapsed = Column(Boolean, nullable=False, default=False)

    # Relationships
    form = relationship("Form", back_populates="sections")
    fields = relationship(
        "FormField",
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="FormField.order"
    )
    subforms = relationship("Subform", back_populates="section", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<FormSection(id={self.id}, title='{self.title}')>"


class Subform(BaseModel):
    __tablename__ = "subforms"

    section_id = Column(
        String(255),
        ForeignKey("form_sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(255), nullable=False)
    order = Column(Integer, nullable=False, default=0)

    # Relationships
    section = relationship("FormSection", back_populates="subforms")
    fields = relationship(
        "FormField",
        back_populates="subform",
        cascade="all, delete-orphan",
        order_by="FormField.order"
    )

    def __repr__(self):
        return f"<Subform(id={self.id}, name='{self.name}')>"
