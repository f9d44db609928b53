"""
Form Record Schemas
Pydantic models for record submission.
"""

from pydantic import BaseModel, Field
from typing import Optional, Any
from datetime import datetime


class RecordSubmit(BaseModel):
    record_data: dict[str, Any] = Field(..., description="Answers keyed by field id: {label, type, value}")
    submitted_by: Optional[str] = Field(None, max_length=255)


class RecordResponse(BaseModel):
    id: str
    form_id: str
    record_data: dict[str, Any]
    submitted_by: Optional[str] = None
    submitted_at: datetime
    updated: bool = Field(False, description="True when an existing record was updated by id field")

    model_config = {"from_attributes": True}
