"""
API Dependencies
Common dependencies used across API endpoints.

Dependencies are injected into FastAPI endpoints using Depends().
"""

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.form import Form


def get_form_or_404(form_id: str, db: Session = Depends(get_db)) -> Form:
    """
    Load the form named by the {form_id} path parameter.

    Raises:
        HTTPException 404: If the form does not exist

    Usage in endpoint:
        @router.get("/{form_id}/linked-records")
        def linked(form: Form = Depends(get_form_or_404)):
            ...
    """
    form = db.get(Form, form_id)
    if not form:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )
    return form
