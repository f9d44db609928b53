"""
Forms API Endpoints
Record submission and the lookup views of a form.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.api.v1.deps import get_form_or_404
from app.db.session import get_db
from app.models.form import Form
from app.services.lookup_relation_service import LookupRelationService
from app.services.record_service import RecordService
from app.schemas.lookup import (
    LinkedFormResponse,
    LinkedFormListResponse,
    FormLookupSourceListResponse,
)
from app.schemas.record import RecordSubmit, RecordResponse


router = APIRouter(prefix="/forms")


@router.post("/{form_id}/records", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
def submit_record(
    form_id: str,
    data: RecordSubmit,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Submit a record. When a lookup field is configured with useIdField and the
    selected value carries the id, the matching source record is updated
    instead (200 instead of 201).
    """
    result = RecordService.submit_record(db, form_id, data)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )
    if isinstance(result, dict) and "error" in result:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result["error"]
        )

    record, updated = result
    db.commit()
    db.refresh(record)

    if updated:
        response.status_code = status.HTTP_200_OK

    return RecordResponse(
        id=record.id,
        form_id=record.form_id,
        record_data=record.record_data,
        submitted_by=record.submitted_by,
        submitted_at=record.submitted_at,
        updated=updated,
    )


@router.get("/{form_id}/lookup-sources", response_model=FormLookupSourceListResponse)
def get_form_lookup_sources(
    form: Form = Depends(get_form_or_404),
    db: Session = Depends(get_db),
):
    """Forms and modules this form's lookup fields draw from."""
    sources = LookupRelationService.get_form_lookup_sources(db, form.id) or []
    result = [LinkedFormResponse(**source) for source in sources]
    return FormLookupSourceListResponse(sources=result, total=len(result))


@router.get("/{form_id}/linked-records", response_model=LinkedFormListResponse)
def get_linked_forms(
    form: Form = Depends(get_form_or_404),
    db: Session = Depends(get_db),
):
    """Forms whose lookup fields draw from this form."""
    linked = LookupRelationService.get_linked_forms(db, form.id)
    result = [LinkedFormResponse(**item) for item in linked]
    return LinkedFormListResponse(linked_forms=result, total=len(result))
