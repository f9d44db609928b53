"""
Record Service - Business Logic Layer
Record submission. A lookup field configured with useIdField/idFieldName
turns the submission into an update of the source-form record carrying
the same id, instead of an insert.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

from sqlalchemy.orm import Session

from app.core.constants import SOURCE_TYPE_FORM
from app.models.form import Form
from app.models.form_field import FormField
from app.models.form_record import FormRecord
from app.schemas.record import RecordSubmit
from app.services.lookup_relation_service import form_fields, lookup_source_of
from app.services.lookup_source_service import parse_source_id

logger = logging.getLogger(__name__)


def _has_answer(answer: Any) -> bool:
    value = answer.get("value") if isinstance(answer, dict) else answer
    return value not in (None, "", [], {})


def _source_form_of(field: FormField) -> Optional[str]:
    if field.source_form:
        return field.source_form
    kind, target = parse_source_id(lookup_source_of(field))
    return target if kind == SOURCE_TYPE_FORM else None


def _submitted_id(field: FormField, record_data: dict, id_field_name: str) -> Any:
    """Id carried by the submitted lookup answer, looked up by field id then label."""
    answer = record_data.get(field.id, record_data.get(field.label))
    if not isinstance(answer, dict):
        return None
    selected = answer.get("value")
    if not isinstance(selected, dict):
        return None
    return selected.get(id_field_name) or None


def _find_by_id_field(db: Session, form_id: str, id_field_name: str, id_value: Any) -> Optional[FormRecord]:
    records = db.query(FormRecord).filter(
        FormRecord.form_id == form_id
    ).order_by(FormRecord.submitted_at.asc(), FormRecord.created_at.asc()).all()
    for record in records:
        answer = (record.record_data or {}).get(id_field_name)
        if isinstance(answer, dict) and answer.get("value") == id_value:
            return record
    return None


class RecordService:

    @staticmethod
    def find_record_to_update(db: Session, form: Form, record_data: dict) -> Optional[FormRecord]:
        """First source-form record matched through a lookup field's id field, if any."""
        for field in form_fields(form):
            config = field.lookup if isinstance(field.lookup, dict) else {}
            if not lookup_source_of(field) or not config.get("useIdField") or not config.get("idFieldName"):
                continue

            source_form_id = _source_form_of(field)
            if not source_form_id:
                continue

            id_field_name = config["idFieldName"]
            id_value = _submitted_id(field, record_data, id_field_name)
            if id_value is None:
                continue

            existing = _find_by_id_field(db, source_form_id, id_field_name, id_value)
            if existing:
                logger.info(f"[Record] Found record {existing.id} with {id_field_name}={id_value}")
                return existing
        return None

    @staticmethod
    def submit_record(db: Session, form_id: str, data: RecordSubmit) -> Union[None, dict, tuple[FormRecord, bool]]:
        """
        Store a submission.

        Returns:
            None if the form does not exist, {"error": ...} for empty data,
            otherwise (record, updated)
        """
        form = db.get(Form, form_id)
        if not form:
            return None

        if not any(_has_answer(answer) for answer in data.record_data.values()):
            return {"error": "Record data is empty"}

        submitted_by = data.submitted_by or "anonymous"
        existing = RecordService.find_record_to_update(db, form, data.record_data)
        if existing:
            existing.record_data = data.record_data
            existing.submitted_by = submitted_by
            db.flush()
            logger.info(f"[Record] Updated record {existing.id}")
            return existing, True

        record = FormRecord(
            form_id=form.id,
            record_data=data.record_data,
            submitted_by=submitted_by,
            submitted_at=datetime.now(timezone.utc),
        )
        db.add(record)
        db.flush()
        logger.info(f"[Record] Created record {record.id} for form {form.id}")
        return record, False
