"""
Field Service - Business Logic Layer
Save path for form fields. Derives the flat lookup columns from the
lookup blob; the router commits and then hands the field to
LookupRelationService for relation maintenance.
"""

import logging
from typing import Optional, Dict

from sqlalchemy.orm import Session

from app.core.constants import SOURCE_TYPE_MODULE, SOURCE_TYPE_FORM
from app.models.form_field import FormField
from app.models.form_section import FormSection, Subform
from app.schemas.field import FieldCreate, FieldUpdate
from app.services.lookup_relation_service import LookupRelationService
from app.services.lookup_source_service import parse_source_id

logger = logging.getLogger(__name__)


LOOKUP_COLUMNS = (
    "source_module",
    "source_form",
    "display_field",
    "value_field",
    "multiple",
    "searchable",
    "filters",
)


def extract_lookup_columns(lookup: Optional[dict]) -> dict:
    """
    Flat lookup columns implied by a lookup blob.

    Example:
        extract_lookup_columns({"sourceId": "form_abc", "fieldMapping": {"display": "Name"}})
        -> {"source_module": None, "source_form": "abc", "display_field": "Name", ...}
    """
    if not lookup:
        return {column: None for column in LOOKUP_COLUMNS}

    kind, target = parse_source_id(lookup.get("sourceId"))
    mapping = lookup.get("fieldMapping") or {}
    return {
        "source_module": target if kind == SOURCE_TYPE_MODULE else None,
        "source_form": target if kind == SOURCE_TYPE_FORM else None,
        "display_field": mapping.get("display"),
        "value_field": mapping.get("value"),
        "multiple": lookup.get("multiple"),
        "searchable": lookup.get("searchable"),
        "filters": lookup.get("filters"),
    }


def _apply_lookup(field: FormField, lookup: Optional[dict], explicit: dict) -> None:
    field.lookup = lookup
    for column, derived in extract_lookup_columns(lookup).items():
        value = explicit.get(column)
        setattr(field, column, value if value is not None else derived)


class FieldService:

    @staticmethod
    def get_field(db: Session, field_id: str) -> Optional[FormField]:
        return db.get(FormField, field_id)

    @staticmethod
    def create_field(db: Session, data: FieldCreate) -> Optional[FormField]:
        """Create a field under a section or subform. None if the parent does not exist."""
        if data.section_id and not db.get(FormSection, data.section_id):
            return None
        if data.subform_id and not db.get(Subform, data.subform_id):
            return None

        values = data.model_dump(exclude={"lookup"})
        explicit = {column: values.pop(column) for column in LOOKUP_COLUMNS}

        field = FormField(**values)
        _apply_lookup(field, data.lookup.to_blob() if data.lookup else None, explicit)

        db.add(field)
        db.flush()
        logger.info(f"[Field] Created {field.type} field {field.id} ({field.label})")
        return field

    @staticmethod
    def update_field(db: Session, field_id: str, data: FieldUpdate) -> Optional[FormField]:
        field = FieldService.get_field(db, field_id)
        if not field:
            return None

        update_data = data.model_dump(exclude_unset=True, exclude={"lookup"})
        explicit = {column: update_data.pop(column) for column in LOOKUP_COLUMNS if column in update_data}
        for key, value in update_data.items():
            setattr(field, key, value)

        if "lookup" in data.model_fields_set:
            _apply_lookup(field, data.lookup.to_blob() if data.lookup else None, explicit)
        else:
            for column, value in explicit.items():
                setattr(field, column, value)

        db.flush()
        logger.info(f"[Field] Updated field {field.id}")
        return field

    @staticmethod
    def delete_field(db: Session, field_id: str) -> Dict:
        field = FieldService.get_field(db, field_id)
        if not field:
            return {"error": "Field not found"}

        LookupRelationService.delete_field_relations(db, field_id)
        db.delete(field)
        db.flush()
        logger.info(f"[Field] Deleted field {field_id}")
        return {"success": True}
