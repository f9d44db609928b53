"""
Fields API Endpoints
Field save path. Lookup relation maintenance runs after the field is
committed and never fails the request.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.field_service import FieldService
from app.services.lookup_relation_service import LookupRelationService
from app.schemas.field import FieldCreate, FieldUpdate, FieldResponse


router = APIRouter(prefix="/fields")


@router.post("", response_model=FieldResponse, status_code=status.HTTP_201_CREATED)
def create_field(
    data: FieldCreate,
    db: Session = Depends(get_db),
):
    """Create a field in a section or subform."""
    field = FieldService.create_field(db, data)
    if not field:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Section or subform not found"
        )
    db.commit()
    db.refresh(field)

    LookupRelationService.maintain_field_relation(db, field)
    db.refresh(field)
    return field


@router.put("/{field_id}", response_model=FieldResponse)
def update_field(
    field_id: str,
    data: FieldUpdate,
    db: Session = Depends(get_db),
):
    """Update a field. Changing or removing its lookup source updates the relation index."""
    field = FieldService.update_field(db, field_id, data)
    if not field:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Field not found"
        )
    db.commit()
    db.refresh(field)

    LookupRelationService.maintain_field_relation(db, field)
    db.refresh(field)
    return field


@router.delete("/{field_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_field(
    field_id: str,
    db: Session = Depends(get_db),
):
    """Delete a field together with its lookup relations."""
    result = FieldService.delete_field(db, field_id)
    if "error" in result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=result["error"]
        )
    db.commit()
