"""
Database Models Module
Contains SQLAlchemy ORM models for all database tables.

All models must be imported here to be registered with SQLAlchemy
and created during Base.metadata.create_all().
"""

from app.db.base import Base
from app.models.base import BaseModel
from app.models.form_module import FormModule
from app.models.form import Form
from app.models.form_section import FormSection, Subform
from app.models.form_field import FormField
from app.models.form_record import FormRecord
from app.models.lookup_source import LookupSource
from app.models.lookup_field_relation import LookupFieldRelation
from app.models.error_log import ErrorLog

__all__ = [
    "Base",
    "BaseModel",
    "FormModule",
    "Form",
    "FormSection",
    "Subform",
    "FormField",
    "FormRecord",
    "LookupSource",
    "LookupFieldRelation",
    "ErrorLog",
]
