"""
Lookup Source Model

Catalog entry describing one referenceable origin for lookup fields:
- static: built-in list stored in `data` (id "lookup_<name>")
- module: every form under a module (id "module_<module_id>")
- form: one form's submitted records (id "form_<form_id>")

Exactly one of data / source_module_id / source_form_id is populated,
matching `type`. Sources are never hard-deleted, only deactivated.
"""

from sqlalchemy import Column, String, Boolean, Text, JSON
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class LookupSource(BaseModel):
    __tablename__ = "lookup_sources"

    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False, index=True)  # static, module, form
    static_source_name = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    icon = Column(String(50), nullable=True)
    data = Column(JSON, nullable=True)

    # Plain columns, not FKs: the source must outlive the module/form it points at
    source_module_id = Column(String(255), nullable=True, index=True)
    source_form_id = Column(String(255), nullable=True, index=True)

    active = Column(Boolean, nullable=False, default=True)

    # Relationships
    relations = relationship("LookupFieldRelation", back_populates="lookup_source")

    def __repr__(self):
        return f"<LookupSource(id={self.id}, type='{self.type}', name='{self.name}')>"
