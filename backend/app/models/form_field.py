"""
Form Field Model

A single input on a form. Lookup-type fields embed their lookup
configuration as a JSON blob:

    {
        "sourceId": "form_<id>" | "module_<id>" | "lookup_<name>",
        "sourceType": "form" | "module" | "static",
        "multiple": false,
        "searchable": true,
        "fieldMapping": {"display": ..., "value": ..., "store": ..., "description": ...},
        "useIdField": false,
        "idFieldName": null,
        "allowCustomValues": true
    }

The flat source_module/source_form/display_field/... columns are derived
from that blob on save and kept for older readers.
"""

from sqlalchemy import Column, String, ForeignKey, Boolean, Integer, Text, JSON
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class FormField(BaseModel):
    __tablename__ = "form_fields"

    # A field lives either directly in a section or inside a subform
    section_id = Column(
        String(255),
        ForeignKey("form_sections.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    subform_id = Column(
        String(255),
        ForeignKey("subforms.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )

    type = Column(String(50), nullable=False)
    label = Column(String(255), nullable=False)
    placeholder = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    default_value = Column(String(500), nullable=True)
    options = Column(JSON, nullable=False, default=list)
    validation = Column(JSON, nullable=False, default=dict)
    visible = Column(Boolean, nullable=False, default=True)
    readonly = Column(Boolean, nullable=False, default=False)
    width = Column(String(20), nullable=False, default="full")
    order = Column(Integer, nullable=False, default=0)

    # Lookup configuration
    lookup = Column(JSON, nullable=True)
    source_module = Column(String(255), nullable=True)
    source_form = Column(String(255), nullable=True)
    display_field = Column(String(255), nullable=True)
    value_field = Column(String(255), nullable=True)
    multiple = Column(Boolean, nullable=True)
    searchable = Column(Boolean, nullable=True)
    filters = Column(JSON, nullable=True)

    # Relationships
    section = relationship("FormSection", back_populates="fields")
    subform = relationship("Subform", back_populates="fields")

    def __repr__(self):
        return f"<FormField(id={self.id}, type='{self.type}', label='{self.label}')>"
