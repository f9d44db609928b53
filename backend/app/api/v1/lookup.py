"""
Lookup API Endpoints
Catalog discovery, field discovery, record retrieval and option mapping
for lookup fields.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.core.config import settings
from app.db.session import get_db
from app.services.lookup_mapping import LookupFieldModel
from app.services.lookup_service import LookupService
from app.services.lookup_source_service import LookupSourceService
from app.schemas.lookup import (
    LookupSourceResponse,
    LookupSourceListResponse,
    ReconcileResponse,
    LookupFieldsResponse,
    LookupDataResponse,
    LookupOptionsRequest,
    LookupOptionResponse,
    LookupOptionsResponse,
)


router = APIRouter(prefix="/lookup")


@router.get("/sources", response_model=LookupSourceListResponse)
def get_lookup_sources(db: Session = Depends(get_db)):
    """
    List every referenceable lookup source.
    New modules and forms are registered as sources on the way.
    """
    sources = LookupSourceService.get_lookup_sources(db)
    result = [LookupSourceResponse(**source) for source in sources]
    return LookupSourceListResponse(sources=result, total=len(result))


@router.post("/sources/reconcile", response_model=ReconcileResponse)
def reconcile_lookup_sources(db: Session = Depends(get_db)):
    """Register new module/form sources and deactivate those whose target is gone."""
    stats = LookupSourceService.reconcile_catalog(db)
    return ReconcileResponse(**stats)


@router.get("/fields", response_model=LookupFieldsResponse)
def get_lookup_fields(
    source_id: str = Query(..., alias="sourceId", min_length=1, description="Lookup source id"),
    db: Session = Depends(get_db),
):
    """Field names available for mapping on a source. Unknown sources yield an empty list."""
    fields = LookupService.get_fields(db, source_id)
    return LookupFieldsResponse(source_id=source_id, fields=fields)


@router.get("/data", response_model=LookupDataResponse)
def get_lookup_data(
    source_id: str = Query(..., alias="sourceId", min_length=1, description="Lookup source id"),
    search: Optional[str] = Query(None, description="Case-insensitive substring filter"),
    limit: int = Query(settings.LOOKUP_DEFAULT_LIMIT, ge=1, le=settings.LOOKUP_MAX_LIMIT),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Candidate records of a source, newest first for form and module sources."""
    records = LookupService.get_data(db, source_id, search=search, limit=limit, offset=offset)
    return LookupDataResponse(source_id=source_id, records=records, total=len(records))


@router.post("/options", response_model=LookupOptionsResponse)
def get_lookup_options(
    data: LookupOptionsRequest,
    db: Session = Depends(get_db),
):
    """
    Records of a source mapped into selectable options with the given
    field mapping, plus whether the search text may be added as a custom value.
    """
    limit = min(data.limit, settings.LOOKUP_MAX_LIMIT)
    model = LookupFieldModel({
        "sourceId": data.source_id,
        "fieldMapping": data.field_mapping.model_dump() if data.field_mapping else None,
        "searchable": data.searchable,
        "allowCustomValues": data.allow_custom_values,
    })
    search = data.search if model.searchable else None
    records = LookupService.get_data(db, data.source_id, search=search, limit=limit, offset=data.offset)
    options = model.load(records)

    return LookupOptionsResponse(
        source_id=data.source_id,
        options=[LookupOptionResponse(**option.to_dict()) for option in options],
        total=len(options),
        can_create_custom=model.can_create_custom(data.search),
    )
