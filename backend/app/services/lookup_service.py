"""
Lookup Service

Serves candidate records and discoverable field names for a lookup source.

Source ids carry their kind as a prefix:
- lookup_<name>: static catalog, filtered and sliced in memory
- form_<id>: one form's submitted records, newest first
- module_<id>: every form of a module, limit // 10 records per form

Unknown ids resolve to empty results, never to an error.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from app.core.constants import (
    SOURCE_TYPE_STATIC,
    SOURCE_TYPE_MODULE,
    SOURCE_TYPE_FORM,
    IMPLICIT_SOURCE_FIELDS,
    MODULE_PER_FORM_DIVISOR,
)
from app.models.form import Form
from app.models.form_module import FormModule
from app.models.form_record import FormRecord
from app.models.lookup_source import LookupSource
from app.services.lookup_normalize import normalize_record_data, matches_search, stringify
from app.services.lookup_source_service import parse_source_id, get_builtin_static

logger = logging.getLogger(__name__)


def _recent_records(db: Session, form_id: str, limit: int, offset: int = 0) -> list[FormRecord]:
    if limit <= 0:
        return []
    return db.query(FormRecord).filter(
        FormRecord.form_id == form_id
    ).order_by(
        FormRecord.submitted_at.desc(),
        FormRecord.created_at.desc(),
    ).offset(offset).limit(limit).all()


def _latest_record(db: Session, form_id: str) -> Optional[FormRecord]:
    records = _recent_records(db, form_id, 1)
    return records[0] if records else None


def _static_items(db: Session, source_id: str, name: str) -> list[dict]:
    source = db.get(LookupSource, source_id)
    if source and source.type == SOURCE_TYPE_STATIC:
        return list(source.data or [])
    definition = get_builtin_static(name)
    return list(definition["data"]) if definition else []


def _label_union(labels: list[str], record: Optional[FormRecord]) -> None:
    if not record or not isinstance(record.record_data, dict):
        return
    for key, answer in record.record_data.items():
        label = answer.get("label") if isinstance(answer, dict) else None
        label = label or key
        if label not in labels:
            labels.append(label)


class LookupService:

    @staticmethod
    def normalize_record(record: FormRecord, search: Optional[str] = None) -> Optional[dict]:
        """
        Flatten a stored record into the normalized lookup shape.
        Returns None when a search is given and no field value matches it.
        """
        fields = normalize_record_data(record.record_data)
        if not matches_search(fields, search):
            return None

        normalized = {
            "record_id": record.id,
            "submitted_at": record.submitted_at.isoformat() if record.submitted_at else None,
        }
        for key, entry in fields.items():
            normalized[key] = entry.to_dict()
        return normalized

    @staticmethod
    def get_static_data(db: Session, source_id: str, name: str, search: Optional[str], limit: int, offset: int) -> list[dict]:
        items = _static_items(db, source_id, name)
        if search:
            needle = search.lower()
            items = [
                item for item in items
                if any(needle in stringify(value).lower() for value in item.values())
            ]

        result = []
        for item in items[offset:offset + limit]:
            row = dict(item)
            row["record_id"] = item.get("id") or uuid.uuid4().hex
            result.append(row)
        return result

    @staticmethod
    def get_form_data(db: Session, form_id: str, search: Optional[str], limit: int, offset: int) -> list[dict]:
        form = db.get(Form, form_id)
        if not form:
            logger.info(f"[LookupData] Form not found: {form_id}")
            return []

        result = []
        for record in _recent_records(db, form.id, limit, offset):
            normalized = LookupService.normalize_record(record, search)
            if normalized is not None:
                result.append(normalized)
        return result

    @staticmethod
    def get_module_data(db: Session, module_id: str, search: Optional[str], limit: int) -> list[dict]:
        module = db.get(FormModule, module_id)
        if not module:
            logger.info(f"[LookupData] Module not found: {module_id}")
            return []

        per_form = limit // MODULE_PER_FORM_DIVISOR
        result = []
        for form in module.forms:
            for record in _recent_records(db, form.id, per_form):
                normalized = LookupService.normalize_record(record, search)
                if normalized is None:
                    continue
                normalized["form_id"] = form.id
                normalized["form_name"] = form.name
                normalized["module_id"] = module.id
                result.append(normalized)
        return result[:limit]

    @staticmethod
    def get_data(
        db: Session,
        source_id: str,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict]:
        """
        Candidate records for a lookup source.

        Args:
            db: Database session
            source_id: Prefixed source id
            search: Case-insensitive substring; non-matching records are dropped
            limit: Maximum number of records returned
            offset: Records to skip (static and form sources)

        Returns:
            Static items (each with record_id) or normalized records
        """
        kind, target = parse_source_id(source_id)
        search = search.strip() if search else None

        if kind == SOURCE_TYPE_STATIC:
            data = LookupService.get_static_data(db, source_id, target, search, limit, offset)
        elif kind == SOURCE_TYPE_FORM:
            data = LookupService.get_form_data(db, target, search, limit, offset)
        elif kind == SOURCE_TYPE_MODULE:
            data = LookupService.get_module_data(db, target, search, limit)
        else:
            logger.info(f"[LookupData] Unknown source id: {source_id}")
            data = []

        logger.debug(f"[LookupData] {source_id}: {len(data)} records (search={search!r}, limit={limit}, offset={offset})")
        return data

    @staticmethod
    def get_fields(db: Session, source_id: str) -> list[str]:
        """
        Field names discoverable on a lookup source.

        Static sources expose the keys of their first item. Form and module
        sources expose the labels of the latest record (of each child form,
        for modules) plus the implicit id/name/title/description/createdAt/updatedAt.
        """
        kind, target = parse_source_id(source_id)

        if kind == SOURCE_TYPE_STATIC:
            items = _static_items(db, source_id, target)
            return list(items[0].keys()) if items else []

        if kind == SOURCE_TYPE_FORM:
            form = db.get(Form, target)
            if not form:
                return []
            labels: list[str] = []
            _label_union(labels, _latest_record(db, form.id))
            return labels + [f for f in IMPLICIT_SOURCE_FIELDS if f not in labels]

        if kind == SOURCE_TYPE_MODULE:
            module = db.get(FormModule, target)
            if not module:
                return []
            labels = []
            for form in module.forms:
                _label_union(labels, _latest_record(db, form.id))
            return labels + [f for f in IMPLICIT_SOURCE_FIELDS if f not in labels]

        return []
