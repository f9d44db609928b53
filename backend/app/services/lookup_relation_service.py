"""
Lookup Relation Service

Keeps the LookupFieldRelation reverse index in step with lookup fields,
and answers "which forms reference this form" from it.

Relation maintenance is best-effort: a failure is logged and the field
save that triggered it still succeeds. Treat the index as advisory.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.constants import (
    FIELD_TYPE_LOOKUP,
    RELATION_ID_PREFIX,
    SOURCE_TYPE_FORM,
    SOURCE_TYPE_MODULE,
)
from app.models.form import Form
from app.models.form_field import FormField
from app.models.form_module import FormModule
from app.models.form_record import FormRecord
from app.models.form_section import FormSection, Subform
from app.models.lookup_field_relation import LookupFieldRelation
from app.services.error_logging import error_logger
from app.services.lookup_source_service import (
    LookupSourceService,
    parse_source_id,
    form_source_id,
)

logger = logging.getLogger(__name__)


def relation_id(source_id: str, field_id: str) -> str:
    """Deterministic relation id; one relation per (source, field) pair."""
    return f"{RELATION_ID_PREFIX}{source_id}_{field_id}"


def lookup_source_of(field: FormField) -> Optional[str]:
    """Source id configured on a lookup field, if any."""
    if field.type != FIELD_TYPE_LOOKUP or not isinstance(field.lookup, dict):
        return None
    return field.lookup.get("sourceId") or None


def form_fields(form: Form) -> list[FormField]:
    """All fields of a form, including those nested in subforms."""
    fields = []
    for section in form.sections:
        fields.extend(section.fields)
        for subform in section.subforms:
            fields.extend(subform.fields)
    return fields


class LookupRelationService:

    @staticmethod
    def resolve_field_owner(db: Session, field: FormField) -> tuple[Optional[str], Optional[str]]:
        """
        Walk field -> section -> form -> module (or field -> subform ->
        section -> form -> module) and return (form_id, module_id).
        Returns (None, None) for orphaned fields.
        """
        section = None
        if field.section_id:
            section = db.get(FormSection, field.section_id)
        elif field.subform_id:
            subform = db.get(Subform, field.subform_id)
            if subform:
                section = db.get(FormSection, subform.section_id)

        if not section:
            return None, None

        form = db.get(Form, section.form_id)
        if not form or not db.get(FormModule, form.module_id):
            return None, None

        return form.id, form.module_id

    @staticmethod
    def sync_field_relation(db: Session, field: FormField) -> Optional[LookupFieldRelation]:
        """
        Upsert the relation for a lookup field. Only flushes.

        Returns None without writing when the field is not a configured
        lookup, has no resolvable owner, or points at a source that cannot
        be found or created.
        """
        source_id = lookup_source_of(field)
        if not source_id:
            logger.info(f"[LookupRelation] Field {field.id} has no lookup source, skipping")
            return None

        form_id, module_id = LookupRelationService.resolve_field_owner(db, field)
        if not form_id or not module_id:
            logger.warning(f"[LookupRelation] Could not determine form/module for field {field.id}")
            return None

        source = LookupSourceService.ensure_source(db, source_id)
        if not source:
            logger.warning(f"[LookupRelation] Failed to create/find lookup source {source_id}")
            return None

        config = field.lookup or {}
        mapping = config.get("fieldMapping") or {}
        rid = relation_id(source_id, field.id)

        relation = db.get(LookupFieldRelation, rid)
        if not relation:
            relation = LookupFieldRelation(id=rid)
            db.add(relation)

        relation.lookup_source_id = source_id
        relation.form_field_id = field.id
        relation.form_id = form_id
        relation.module_id = module_id
        relation.display_field = field.display_field or mapping.get("display")
        relation.value_field = field.value_field or mapping.get("value")
        relation.multiple = field.multiple if field.multiple is not None else config.get("multiple")
        relation.searchable = field.searchable if field.searchable is not None else config.get("searchable")
        relation.filters = field.filters or config.get("filters") or {}

        # A field points at one source; drop relations left from an earlier source
        db.query(LookupFieldRelation).filter(
            LookupFieldRelation.form_field_id == field.id,
            LookupFieldRelation.id != rid,
        ).delete(synchronize_session=False)

        db.flush()
        logger.info(f"[LookupRelation] Created/updated relation {rid}")
        return relation

    @staticmethod
    def maintain_field_relation(db: Session, field: FormField) -> Optional[LookupFieldRelation]:
        """
        Best-effort relation maintenance after a field has been committed.

        Lookup fields get their relation upserted; fields that are no longer
        lookups lose theirs. Failures are rolled back and logged, never raised.
        """
        field_id = field.id
        try:
            if lookup_source_of(field):
                relation = LookupRelationService.sync_field_relation(db, field)
            else:
                LookupRelationService.delete_field_relations(db, field_id)
                relation = None
            db.commit()
            return relation
        except Exception as e:
            db.rollback()
            error_logger.log_error(
                e,
                severity="warning",
                context={"operation": "maintain_field_relation", "field_id": field_id},
            )
            return None

    @staticmethod
    def delete_field_relations(db: Session, field_id: str) -> int:
        """Remove every relation of a field (called when the field is deleted)."""
        deleted = db.query(LookupFieldRelation).filter(
            LookupFieldRelation.form_field_id == field_id
        ).delete(synchronize_session=False)
        if deleted:
            logger.info(f"[LookupRelation] Deleted {deleted} relations for field {field_id}")
        return deleted

    @staticmethod
    def get_relations_for_source(db: Session, source_id: str) -> list[LookupFieldRelation]:
        return db.query(LookupFieldRelation).filter(
            LookupFieldRelation.lookup_source_id == source_id
        ).order_by(LookupFieldRelation.created_at.asc()).all()

    @staticmethod
    def _form_summary(db: Session, form: Form) -> dict:
        module = form.module
        return {
            "id": form.id,
            "name": form.name,
            "description": form.description,
            "record_count": db.query(FormRecord).filter(FormRecord.form_id == form.id).count(),
            "module_id": module.id if module else None,
            "module_name": module.name if module else None,
            "breadcrumb": f"{module.name if module else ''} > {form.name}",
            "is_published": form.is_published,
            "field_count": len(form_fields(form)),
            "created_at": form.created_at,
            "updated_at": form.updated_at,
        }

    @staticmethod
    def get_linked_forms(db: Session, form_id: str) -> list[dict]:
        """
        Forms whose lookup fields draw from this form, read from the
        relation index. Self-references are skipped.
        """
        relations = LookupRelationService.get_relations_for_source(db, form_source_id(form_id))

        counts: dict[str, int] = {}
        for relation in relations:
            if relation.form_id == form_id:
                continue
            counts[relation.form_id] = counts.get(relation.form_id, 0) + 1

        linked = []
        for linked_form_id, lookup_count in counts.items():
            form = db.get(Form, linked_form_id)
            if not form:
                continue
            summary = LookupRelationService._form_summary(db, form)
            summary["lookup_fields_count"] = lookup_count
            linked.append(summary)

        logger.info(f"[LookupRelation] Form {form_id} is referenced by {len(linked)} forms")
        return linked

    @staticmethod
    def get_form_lookup_sources(db: Session, form_id: str) -> Optional[list[dict]]:
        """
        Forms and modules that this form's lookup fields draw from,
        deduplicated. Static sources are not listed. None if the form
        does not exist.
        """
        form = db.get(Form, form_id)
        if not form:
            return None

        sources = []
        seen = set()
        for field in form_fields(form):
            source_id = lookup_source_of(field)
            if not source_id or source_id in seen:
                continue
            seen.add(source_id)

            kind, target = parse_source_id(source_id)
            if kind == SOURCE_TYPE_FORM:
                source_form = db.get(Form, target)
                if not source_form:
                    continue
                summary = LookupRelationService._form_summary(db, source_form)
                summary["type"] = SOURCE_TYPE_FORM
                sources.append(summary)
            elif kind == SOURCE_TYPE_MODULE:
                module = db.get(FormModule, target)
                if not module:
                    continue
                sources.append({
                    "id": module.id,
                    "name": module.name,
                    "description": module.description,
                    "type": SOURCE_TYPE_MODULE,
                    "record_count": sum(
                        db.query(FormRecord).filter(FormRecord.form_id == f.id).count()
                        for f in module.forms
                    ),
                    "module_id": module.id,
                    "module_name": module.name,
                    "breadcrumb": f"{module.name} (Module)",
                    "is_published": None,
                    "field_count": sum(len(form_fields(f)) for f in module.forms),
                    "created_at": module.created_at,
                    "updated_at": module.updated_at,
                })

        return sources
