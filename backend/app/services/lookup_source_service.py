"""
Lookup Source Service

Maintains the catalog of referenceable origins for lookup fields.
Seeds the built-in static catalogs at startup, reconciles module/form
sources against the live modules and forms, and serves the catalog.

Reconciliation (writes) and catalog listing (reads) are separate steps;
get_lookup_sources() runs both for the HTTP catalog endpoint.
"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.constants import (
    SOURCE_TYPE_STATIC,
    SOURCE_TYPE_MODULE,
    SOURCE_TYPE_FORM,
    STATIC_SOURCE_PREFIX,
    MODULE_SOURCE_PREFIX,
    FORM_SOURCE_PREFIX,
    MODULE_SOURCE_ICON,
    FORM_SOURCE_ICON,
    DEFAULT_STATIC_ICON,
)
from app.models.form import Form
from app.models.form_module import FormModule
from app.models.form_record import FormRecord
from app.models.lookup_source import LookupSource
from app.services.error_logging import error_logger

logger = logging.getLogger(__name__)


STATIC_SOURCES = [
    {
        "name": "countries",
        "display_name": "Countries",
        "description": "World countries with codes and regions",
        "icon": "\U0001f30d",
        "data": [
            {"id": "us", "name": "United States", "code": "US", "region": "North America"},
            {"id": "ca", "name": "Canada", "code": "CA", "region": "North America"},
            {"id": "uk", "name": "United Kingdom", "code": "GB", "region": "Europe"},
            {"id": "de", "name": "Germany", "code": "DE", "region": "Europe"},
            {"id": "fr", "name": "France", "code": "FR", "region": "Europe"},
            {"id": "jp", "name": "Japan", "code": "JP", "region": "Asia"},
            {"id": "au", "name": "Australia", "code": "AU", "region": "Oceania"},
            {"id": "in", "name": "India", "code": "IN", "region": "Asia"},
            {"id": "br", "name": "Brazil", "code": "BR", "region": "South America"},
            {"id": "mx", "name": "Mexico", "code": "MX", "region": "North America"},
            {"id": "cn", "name": "China", "code": "CN", "region": "Asia"},
            {"id": "za", "name": "South Africa", "code": "ZA", "region": "Africa"},
            {"id": "eg", "name": "Egypt", "code": "EG", "region": "Africa"},
            {"id": "ng", "name": "Nigeria", "code": "NG", "region": "Africa"},
        ],
    },
    {
        "name": "currencies",
        "display_name": "Currencies",
        "description": "World currencies with symbols",
        "icon": "\U0001f4b0",
        "data": [
            {"id": "usd", "name": "US Dollar", "code": "USD", "symbol": "$"},
            {"id": "eur", "name": "Euro", "code": "EUR", "symbol": "€"},
            {"id": "gbp", "name": "British Pound", "code": "GBP", "symbol": "£"},
            {"id": "jpy", "name": "Japanese Yen", "code": "JPY", "symbol": "¥"},
            {"id": "cad", "name": "Canadian Dollar", "code": "CAD", "symbol": "C$"},
            {"id": "aud", "name": "Australian Dollar", "code": "AUD", "symbol": "A$"},
            {"id": "chf", "name": "Swiss Franc", "code": "CHF", "symbol": "CHF"},
            {"id": "cny", "name": "Chinese Yuan", "code": "CNY", "symbol": "¥"},
            {"id": "inr", "name": "Indian Rupee", "code": "INR", "symbol": "₹"},
            {"id": "brl", "name": "Brazilian Real", "code": "BRL", "symbol": "R$"},
        ],
    },
    {
        "name": "priorities",
        "display_name": "Priorities",
        "description": "Task and project priorities",
        "icon": "⚡",
        "data": [
            {"id": "critical", "name": "Critical", "level": 5, "color": "#dc2626"},
            {"id": "high", "name": "High", "level": 4, "color": "#ea580c"},
            {"id": "medium", "name": "Medium", "level": 3, "color": "#ca8a04"},
            {"id": "low", "name": "Low", "level": 2, "color": "#16a34a"},
            {"id": "minimal", "name": "Minimal", "level": 1, "color": "#6b7280"},
        ],
    },
    {
        "name": "statuses",
        "display_name": "Status Options",
        "description": "Common status values",
        "icon": "\U0001f504",
        "data": [
            {"id": "active", "name": "Active", "color": "#16a34a"},
            {"id": "inactive", "name": "Inactive", "color": "#6b7280"},
            {"id": "pending", "name": "Pending", "color": "#ca8a04"},
            {"id": "approved", "name": "Approved", "color": "#16a34a"},
            {"id": "rejected", "name": "Rejected", "color": "#dc2626"},
            {"id": "draft", "name": "Draft", "color": "#6b7280"},
            {"id": "published", "name": "Published", "color": "#2563eb"},
            {"id": "archived", "name": "Archived", "color": "#6b7280"},
            {"id": "in_progress", "name": "In Progress", "color": "#2563eb"},
            {"id": "completed", "name": "Completed", "color": "#16a34a"},
        ],
    },
    {
        "name": "departments",
        "display_name": "Departments",
        "description": "Common company departments",
        "icon": "\U0001f3e2",
        "data": [
            {"id": "engineering", "name": "Engineering", "category": "Technology"},
            {"id": "it", "name": "Information Technology", "category": "Technology"},
            {"id": "sales", "name": "Sales", "category": "Revenue"},
            {"id": "marketing", "name": "Marketing", "category": "Revenue"},
            {"id": "support", "name": "Customer Support", "category": "Operations"},
            {"id": "operations", "name": "Operations", "category": "Operations"},
            {"id": "finance", "name": "Finance", "category": "Administration"},
            {"id": "hr", "name": "Human Resources", "category": "Administration"},
            {"id": "legal", "name": "Legal", "category": "Administration"},
            {"id": "procurement", "name": "Procurement", "category": "Operations"},
        ],
    },
]


def static_source_id(name: str) -> str:
    return f"{STATIC_SOURCE_PREFIX}{name}"


def module_source_id(module_id: str) -> str:
    return f"{MODULE_SOURCE_PREFIX}{module_id}"


def form_source_id(form_id: str) -> str:
    return f"{FORM_SOURCE_PREFIX}{form_id}"


def parse_source_id(source_id: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """
    Split a lookup source id into (kind, target).

    Examples:
        parse_source_id("lookup_countries") -> ("static", "countries")
        parse_source_id("module_abc") -> ("module", "abc")
        parse_source_id("form_xyz") -> ("form", "xyz")
        parse_source_id("whatever") -> (None, None)
    """
    if not source_id:
        return None, None
    for prefix, kind in (
        (STATIC_SOURCE_PREFIX, SOURCE_TYPE_STATIC),
        (MODULE_SOURCE_PREFIX, SOURCE_TYPE_MODULE),
        (FORM_SOURCE_PREFIX, SOURCE_TYPE_FORM),
    ):
        if source_id.startswith(prefix):
            target = source_id[len(prefix):]
            return (kind, target) if target else (None, None)
    return None, None


def get_builtin_static(name: str) -> Optional[dict]:
    """Built-in static catalog definition by name."""
    return next((s for s in STATIC_SOURCES if s["name"] == name), None)


def _apply_static_definition(source: LookupSource, definition: dict) -> None:
    source.name = definition["display_name"]
    source.type = SOURCE_TYPE_STATIC
    source.static_source_name = definition["name"]
    source.description = definition["description"]
    source.icon = definition.get("icon") or DEFAULT_STATIC_ICON
    source.data = [dict(item) for item in definition["data"]]
    source.source_module_id = None
    source.source_form_id = None
    source.active = True


class LookupSourceService:

    @staticmethod
    def seed_static_sources(db: Session) -> int:
        """
        Upsert the built-in static catalogs. Safe to call on every startup.

        Returns:
            Number of catalogs inserted (updates are not counted)
        """
        added = 0
        for definition in STATIC_SOURCES:
            source_id = static_source_id(definition["name"])
            source = db.get(LookupSource, source_id)
            if not source:
                source = LookupSource(id=source_id)
                db.add(source)
                added += 1
            _apply_static_definition(source, definition)

        db.commit()
        if added:
            logger.info(f"[LookupSource] Seeded {added} static sources")
        else:
            logger.info("[LookupSource] All static sources already present, definitions refreshed")
        return added

    @staticmethod
    def _upsert_module_source(db: Session, module: FormModule, stats: dict) -> LookupSource:
        source_id = module_source_id(module.id)
        source = db.get(LookupSource, source_id)
        if not source:
            source = LookupSource(id=source_id, type=SOURCE_TYPE_MODULE, active=True)
            db.add(source)
            stats["created"] += 1
        elif not source.active:
            source.active = True
            stats["reactivated"] += 1
        source.name = module.name
        source.description = module.description or f"Module with {len(module.forms)} forms"
        source.icon = MODULE_SOURCE_ICON
        source.source_module_id = module.id
        return source

    @staticmethod
    def _upsert_form_source(db: Session, form: Form, module: FormModule, stats: dict) -> LookupSource:
        source_id = form_source_id(form.id)
        source = db.get(LookupSource, source_id)
        if not source:
            source = LookupSource(id=source_id, type=SOURCE_TYPE_FORM, active=True)
            db.add(source)
            stats["created"] += 1
        elif not source.active:
            source.active = True
            stats["reactivated"] += 1
        source.name = f"{form.name} ({module.name})"
        source.description = form.description or f"Records from {form.name} form in {module.name} module"
        source.icon = FORM_SOURCE_ICON
        source.source_form_id = form.id
        return source

    @staticmethod
    def reconcile_catalog(db: Session) -> dict:
        """
        Make every module and form lookup-referenceable.

        Upserts one source per module and per form, deactivates dynamic
        sources whose module/form no longer exists, and re-activates
        sources whose target came back. Idempotent.

        Returns:
            dict with created / deactivated / reactivated counts
        """
        stats = {"created": 0, "deactivated": 0, "reactivated": 0}

        modules = db.query(FormModule).order_by(FormModule.sort_order.asc(), FormModule.name.asc()).all()
        live_ids = set()
        for module in modules:
            source = LookupSourceService._upsert_module_source(db, module, stats)
            live_ids.add(source.id)
            for form in module.forms:
                form_source = LookupSourceService._upsert_form_source(db, form, module, stats)
                live_ids.add(form_source.id)

        db.flush()

        stale = db.query(LookupSource).filter(
            LookupSource.type.in_([SOURCE_TYPE_MODULE, SOURCE_TYPE_FORM]),
            LookupSource.active == True,
        ).all()
        for source in stale:
            if source.id not in live_ids:
                source.active = False
                stats["deactivated"] += 1

        db.commit()
        if stats["created"] or stats["deactivated"] or stats["reactivated"]:
            logger.info(
                f"[LookupSource] Reconciled catalog: {stats['created']} created, "
                f"{stats['deactivated']} deactivated, {stats['reactivated']} reactivated"
            )
        return stats

    @staticmethod
    def list_catalog(db: Session) -> list[dict]:
        """
        Read the catalog without modifying it.

        Static sources come first, then each module followed by its forms.
        Modules/forms that were never reconciled are not listed.
        """
        record_counts = dict(
            db.query(FormRecord.form_id, func.count(FormRecord.id))
            .group_by(FormRecord.form_id)
            .all()
        )

        active = {
            source.id: source
            for source in db.query(LookupSource).filter(LookupSource.active == True).all()
        }

        catalog = []
        static_order = {static_source_id(s["name"]): index for index, s in enumerate(STATIC_SOURCES)}
        statics = [s for s in active.values() if s.type == SOURCE_TYPE_STATIC]
        statics.sort(key=lambda s: (static_order.get(s.id, len(static_order)), s.name))
        for source in statics:
            catalog.append({
                "id": source.id,
                "name": source.name,
                "description": source.description,
                "type": SOURCE_TYPE_STATIC,
                "record_count": len(source.data or []),
                "icon": source.icon or DEFAULT_STATIC_ICON,
            })

        modules = db.query(FormModule).order_by(FormModule.sort_order.asc(), FormModule.name.asc()).all()
        for module in modules:
            module_source = active.get(module_source_id(module.id))
            if module_source:
                catalog.append({
                    "id": module_source.id,
                    "name": module_source.name,
                    "description": module_source.description,
                    "type": SOURCE_TYPE_MODULE,
                    "record_count": sum(record_counts.get(form.id, 0) for form in module.forms),
                    "icon": module_source.icon or MODULE_SOURCE_ICON,
                })
            for form in module.forms:
                form_source = active.get(form_source_id(form.id))
                if form_source:
                    catalog.append({
                        "id": form_source.id,
                        "name": form_source.name,
                        "description": form_source.description,
                        "type": SOURCE_TYPE_FORM,
                        "record_count": record_counts.get(form.id, 0),
                        "icon": form_source.icon or FORM_SOURCE_ICON,
                    })

        return catalog

    @staticmethod
    def get_lookup_sources(db: Session) -> list[dict]:
        """
        Catalog discovery for the lookup configuration UI.

        Reconciles first, so newly created modules/forms show up without
        manual registration. Persistence failures are logged and yield an
        empty list; an empty result is therefore ambiguous.
        """
        try:
            LookupSourceService.reconcile_catalog(db)
            return LookupSourceService.list_catalog(db)
        except Exception as e:
            db.rollback()
            error_logger.log_error(e, severity="warning", context={"operation": "get_lookup_sources"})
            return []

    @staticmethod
    def ensure_source(db: Session, source_id: str) -> Optional[LookupSource]:
        """
        Return the source for an id, creating it on demand from the module,
        form or built-in static catalog it names. None if nothing matches.
        An inactive source whose target exists again is reactivated.
        Only flushes; the caller owns the transaction.
        """
        source = db.get(LookupSource, source_id)
        if source and source.active:
            return source

        kind, target = parse_source_id(source_id)
        if kind == SOURCE_TYPE_MODULE:
            module = db.get(FormModule, target)
            if not module:
                return source
            if source:
                logger.info(f"[LookupSource] Reactivating source {source_id}")
                source.active = True
            else:
                logger.info(f"[LookupSource] Creating module source {source_id} on demand")
                source = LookupSource(
                    id=source_id,
                    name=module.name,
                    type=SOURCE_TYPE_MODULE,
                    source_module_id=module.id,
                    description=module.description or "Module with forms",
                    icon=MODULE_SOURCE_ICON,
                    active=True,
                )
        elif kind == SOURCE_TYPE_FORM:
            form = db.get(Form, target)
            if not form:
                return source
            if source:
                logger.info(f"[LookupSource] Reactivating source {source_id}")
                source.active = True
            else:
                logger.info(f"[LookupSource] Creating form source {source_id} on demand")
                source = LookupSource(
                    id=source_id,
                    name=form.name,
                    type=SOURCE_TYPE_FORM,
                    source_form_id=form.id,
                    description=form.description or "Form source",
                    icon=FORM_SOURCE_ICON,
                    active=True,
                )
        elif kind == SOURCE_TYPE_STATIC:
            definition = get_builtin_static(target)
            if not definition:
                return source
            source = source or LookupSource(id=source_id)
            _apply_static_definition(source, definition)
        else:
            return source

        db.add(source)
        db.flush()
        return source

    @staticmethod
    def deactivate_source(db: Session, source_id: str) -> bool:
        """Mark a source inactive. Sources are never hard-deleted."""
        source = db.get(LookupSource, source_id)
        if not source:
            return False
        source.active = False
        db.flush()
        return True
