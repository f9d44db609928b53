"""
API v1 Main Router
Aggregates all v1 API endpoints into a single router.

Structure:
- /lookup/* - Lookup source catalog, fields, data and options
- /fields/* - Field save path with lookup relation maintenance
- /forms/* - Record submission and lookup views of a form
"""

from fastapi import APIRouter

from app.api.v1 import lookup, fields, forms


# Included in main.py with prefix /api/v1
api_router = APIRouter()


# Endpoints: GET /lookup/sources, POST /lookup/sources/reconcile,
# GET /lookup/fields, GET /lookup/data, POST /lookup/options
api_router.include_router(
    lookup.router,
    # prefix is already defined in lookup.router (/lookup)
    tags=["Lookup"],
)


# Endpoints: POST /fields, PUT/DELETE /fields/{field_id}
api_router.include_router(
    fields.router,
    tags=["Fields"],
)


# Endpoints: POST /forms/{form_id}/records,
# GET /forms/{form_id}/lookup-sources, GET /forms/{form_id}/linked-records
api_router.include_router(
    forms.router,
    tags=["Forms"],
)
