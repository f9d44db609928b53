"""
Form Model
A user-defined input schema composed of sections and fields.
Published forms accept public submissions (records).
"""

from sqlalchemy import Column, String, ForeignKey, Boolean, Integer, Text, JSON, DateTime
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class Form(BaseModel):
    __tablename__ = "forms"

    module_id = Column(
        String(255),
        ForeignKey("form_modules.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    settings = Column(JSON, nullable=False, default=dict)

    # Publishing
    is_published = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    form_url = Column(String(500), nullable=True)
    allow_anonymous = Column(Boolean, nullable=False, default=True)
    require_login = Column(Boolean, nullable=False, default=False)
    max_submissions = Column(Integer, nullable=True)
    submission_message = Column(Text, nullable=True)

    # Relationships
    module = relationship("FormModule", back_populates="forms")
    sections = relationship(
        "FormSection",
        back_populates="form",
        cascade="all, delete-orphan",
        order_by="FormSection.order"
    )
    records = relationship("FormRecord", back_populates="form", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Form(id={self.id}, name='{self.name}')>"
