"""
Form Field Schemas
Pydantic models for the field save path (create/update/delete).
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional, Any
from datetime import datetime

from app.schemas.lookup import LookupConfig


class FieldCreate(BaseModel):
    section_id: Optional[str] = Field(None, description="Owning section (exclusive with subform_id)")
    subform_id: Optional[str] = Field(None, description="Owning subform (exclusive with section_id)")
    type: str = Field(..., min_length=1, max_length=50, description="Field type: text, number, date, lookup, ...")
    label: str = Field(..., min_length=1, max_length=255)
    placeholder: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    default_value: Optional[str] = Field(None, max_length=500)
    options: list[dict[str, Any]] = Field(default_factory=list)
    validation: dict[str, Any] = Field(default_factory=dict)
    visible: bool = True
    readonly: bool = False
    width: str = Field("full", description="full, half, third, quarter")
    order: int = 0

    # Lookup configuration; the flat columns are derived from `lookup` when omitted
    lookup: Optional[LookupConfig] = None
    source_module: Optional[str] = None
    source_form: Optional[str] = None
    display_field: Optional[str] = None
    value_field: Optional[str] = None
    multiple: Optional[bool] = None
    searchable: Optional[bool] = None
    filters: Optional[dict[str, Any]] = None

    @model_validator(mode="after")
    def check_owner(self):
        if bool(self.section_id) == bool(self.subform_id):
            raise ValueError("Exactly one of section_id or subform_id is required")
        return self


class FieldUpdate(BaseModel):
    type: Optional[str] = Field(None, min_length=1, max_length=50)
    label: Optional[str] = Field(None, min_length=1, max_length=255)
    placeholder: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    default_value: Optional[str] = Field(None, max_length=500)
    options: Optional[list[dict[str, Any]]] = None
    validation: Optional[dict[str, Any]] = None
    visible: Optional[bool] = None
    readonly: Optional[bool] = None
    width: Optional[str] = None
    order: Optional[int] = None
    lookup: Optional[LookupConfig] = None
    source_module: Optional[str] = None
    source_form: Optional[str] = None
    display_field: Optional[str] = None
    value_field: Optional[str] = None
    multiple: Optional[bool] = None
    searchable: Optional[bool] = None
    filters: Optional[dict[str, Any]] = None


class FieldResponse(BaseModel):
    id: str
    section_id: Optional[str] = None
    subform_id: Optional[str] = None
    type: str
    label: str
    placeholder: Optional[str] = None
    description: Optional[str] = None
    default_value: Optional[str] = None
    options: list[dict[str, Any]] = []
    validation: dict[str, Any] = {}
    visible: bool
    readonly: bool
    width: str
    order: int
    lookup: Optional[dict[str, Any]] = None
    source_module: Optional[str] = None
    source_form: Optional[str] = None
    display_field: Optional[str] = None
    value_field: Optional[str] = None
    multiple: Optional[bool] = None
    searchable: Optional[bool] = None
    filters: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
