"""
Lookup Schemas
Pydantic models for the lookup API and the lookup configuration embedded
on form fields. JSON uses camelCase (sourceId, fieldMapping, recordCount)
to match the form builder frontend.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, Optional
from datetime import datetime

from app.core.constants import VALID_SOURCE_TYPES
from app.services.lookup_source_service import parse_source_id


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldMappingConfig(CamelModel):
    display: str = Field(..., min_length=1, description="Source field shown to the user")
    value: str = Field("id", description="Source field used as option value")
    store: Optional[str] = Field(None, description="Source field persisted on selection (defaults to display)")
    description: Optional[str] = Field(None, description="Optional source field shown under the label")


class LookupConfig(CamelModel):
    source_id: str = Field(..., min_length=1, description="lookup_<name>, module_<id> or form_<id>")
    source_type: Optional[str] = Field(None, description="static, module or form")
    multiple: bool = False
    searchable: bool = True
    field_mapping: Optional[FieldMappingConfig] = None
    use_id_field: bool = Field(False, description="Update the source record matching idFieldName instead of inserting")
    id_field_name: Optional[str] = None
    allow_custom_values: bool = True
    filters: Optional[dict] = None

    @field_validator("source_type")
    @classmethod
    def check_source_type(cls, v):
        if v is not None and v not in VALID_SOURCE_TYPES:
            raise ValueError(f"sourceType must be one of {', '.join(VALID_SOURCE_TYPES)}")
        return v

    @model_validator(mode="after")
    def infer_source_type(self):
        kind, _ = parse_source_id(self.source_id)
        if self.source_type is None:
            self.source_type = kind
        elif kind is not None and kind != self.source_type:
            raise ValueError(f"sourceType '{self.source_type}' does not match sourceId '{self.source_id}'")
        return self

    def to_blob(self) -> dict:
        """JSON blob stored on the form field."""
        return self.model_dump(by_alias=True, exclude_none=True)


class LookupSourceResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    type: str
    record_count: int = 0
    icon: Optional[str] = None


class LookupSourceListResponse(CamelModel):
    sources: list[LookupSourceResponse]
    total: int


class ReconcileResponse(CamelModel):
    created: int
    deactivated: int
    reactivated: int


class LookupFieldsResponse(CamelModel):
    source_id: str
    fields: list[str]


class LookupDataResponse(CamelModel):
    source_id: str
    records: list[dict[str, Any]]
    total: int


class LookupOptionsRequest(CamelModel):
    source_id: str = Field(..., min_length=1)
    field_mapping: Optional[FieldMappingConfig] = None
    search: Optional[str] = None
    limit: int = Field(50, ge=1)
    offset: int = Field(0, ge=0)
    searchable: bool = True
    allow_custom_values: bool = True


class LookupOptionResponse(CamelModel):
    id: str
    label: str
    value: Any = None
    store: Any = None
    description: Optional[str] = None
    is_custom: bool = False
    data: dict[str, Any] = {}


class LookupOptionsResponse(CamelModel):
    source_id: str
    options: list[LookupOptionResponse]
    total: int
    can_create_custom: bool = False


class LinkedFormResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    type: Optional[str] = None
    record_count: int = 0
    module_id: Optional[str] = None
    module_name: Optional[str] = None
    breadcrumb: str
    is_published: Optional[bool] = None
    field_count: int = 0
    lookup_fields_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LinkedFormListResponse(CamelModel):
    linked_forms: list[LinkedFormResponse]
    total: int


class FormLookupSourceListResponse(CamelModel):
    sources: list[LinkedFormResponse]
    total: int
