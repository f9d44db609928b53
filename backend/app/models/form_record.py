"""
Form Record Model

A submitted record. Answers are stored keyed by field id, each carrying the
field's metadata at submission time:

    {"<field_id>": {"label": "Name", "type": "text", "value": "Acme Co"}}
"""

from datetime import datetime, timezone

from sqlalchemy import Column, String, ForeignKey, JSON, DateTime
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class FormRecord(BaseModel):
    __tablename__ = "form_records"

    form_id = Column(
        String(255),
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    record_data = Column(JSON, nullable=False, default=dict)
    submitted_by = Column(String(255), nullable=True, default="anonymous")
    submitted_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True
    )

    # Relationships
    form = relationship("Form", back_populates="records")

    def __repr__(self):
        return f"<FormRecord(id={self.id}, form_id={self.form_id})>"
