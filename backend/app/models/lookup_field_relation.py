"""
Lookup Field Relation Model

Reverse index of "which field looks up into which source". The id is
derived from (lookup_source_id, form_field_id), so saving the same field
twice upserts one row instead of accumulating duplicates.
"""

from sqlalchemy import Column, String, ForeignKey, Boolean, JSON
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class LookupFieldRelation(BaseModel):
    __tablename__ = "lookup_field_relations"

    lookup_source_id = Column(
        String(255),
        ForeignKey("lookup_sources.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    form_field_id = Column(String(255), nullable=False, index=True)
    form_id = Column(String(255), nullable=False, index=True)
    module_id = Column(String(255), nullable=False, index=True)

    display_field = Column(String(255), nullable=True)
    value_field = Column(String(255), nullable=True)
    multiple = Column(Boolean, nullable=True)
    searchable = Column(Boolean, nullable=True)
    filters = Column(JSON, nullable=False, default=dict)

    # Relationships
    lookup_source = relationship("LookupSource", back_populates="relations")

    def __repr__(self):
        return f"<LookupFieldRelation(id={self.id}, source={self.lookup_source_id}, field={self.form_field_id})>"
