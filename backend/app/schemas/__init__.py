"""
Pydantic Schemas Module
Contains request/response schemas for API validation and serialization.

Pydantic schemas are used for:
- Validating incoming request data
- Serializing database models to JSON responses
- Auto-generating OpenAPI documentation
"""

from app.schemas.lookup import (
    FieldMappingConfig,
    LookupConfig,
    LookupSourceResponse,
    LookupSourceListResponse,
    ReconcileResponse,
    LookupFieldsResponse,
    LookupDataResponse,
    LookupOptionsRequest,
    LookupOptionResponse,
    LookupOptionsResponse,
    LinkedFormResponse,
    LinkedFormListResponse,
    FormLookupSourceListResponse,
)
from app.schemas.field import (
    FieldCreate,
    FieldUpdate,
    FieldResponse,
)
from app.schemas.record import (
    RecordSubmit,
    RecordResponse,
)

__all__ = [
    "FieldMappingConfig",
    "LookupConfig",
    "LookupSourceResponse",
    "LookupSourceListResponse",
    "ReconcileResponse",
    "LookupFieldsResponse",
    "LookupDataResponse",
    "LookupOptionsRequest",
    "LookupOptionResponse",
    "LookupOptionsResponse",
    "LinkedFormResponse",
    "LinkedFormListResponse",
    "FormLookupSourceListResponse",
    "FieldCreate",
    "FieldUpdate",
    "FieldResponse",
    "RecordSubmit",
    "RecordResponse",
]
