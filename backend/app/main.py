"""
Main FastAPI Application
Entry point for the Form Builder lookup API.

This module creates and configures the FastAPI application instance,
sets up middleware, and defines the health check endpoint.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.middleware.cors import setup_cors
from app.middleware.error_handler import ErrorHandlerMiddleware
from sqlalchemy import inspect, text
from app.db.session import engine, SessionLocal
from app.models import Base
from app.services.error_logging import configure_error_logging, error_logger
from app.services.lookup_source_service import LookupSourceService


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    description="""
    Form Builder Lookup API.

    Features:
    - Lookup source catalog (static catalogs, modules, forms)
    - Normalized lookup records with search and paging
    - Field mapping into selectable options
    - Lookup field relation index and linked forms

    For more information, visit the documentation at /docs
    """
)


# CORS before routes so preflight requests from the builder UI succeed
setup_cors(app)

# Catches all unhandled exceptions and logs them
app.add_middleware(ErrorHandlerMiddleware)


def add_missing_columns() -> int:
    """
    Add columns declared on the models but missing from existing tables.
    create_all() only creates whole tables, so new columns need this.

    Returns:
        Number of columns added
    """
    inspector = inspect(engine)
    added = 0
    for table in Base.metadata.tables.values():
        if not inspector.has_table(table.name):
            continue
        existing_columns = {col['name'] for col in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name in existing_columns:
                continue
            col_type = column.type.compile(engine.dialect)
            default_val = None
            if column.default is not None and column.default.is_scalar:
                val = column.default.arg
                if isinstance(val, bool):
                    default_val = "TRUE" if val else "FALSE"
                elif isinstance(val, (int, float)):
                    default_val = str(val)
                elif isinstance(val, str):
                    default_val = f"'{val}'"

            with engine.begin() as conn:
                if default_val is not None:
                    conn.execute(text(f'ALTER TABLE "{table.name}" ADD COLUMN "{column.name}" {col_type} NULL DEFAULT {default_val}'))
                    conn.execute(text(f'UPDATE "{table.name}" SET "{column.name}" = {default_val} WHERE "{column.name}" IS NULL'))
                    if not column.nullable and engine.dialect.name == "postgresql":
                        conn.execute(text(f'ALTER TABLE "{table.name}" ALTER COLUMN "{column.name}" SET NOT NULL'))
                else:
                    # Added as NULL even when the model says NOT NULL, existing rows have no value
                    conn.execute(text(f'ALTER TABLE "{table.name}" ADD COLUMN "{column.name}" {col_type} NULL'))
            print(f"  + Added column {table.name}.{column.name}")
            added += 1
    return added


@app.on_event("startup")
async def startup_event():
    """
    Application startup handler.

    Tasks performed:
    - Create all database tables if they don't exist
    - Add columns missing from existing tables
    - Configure error logging system
    - Seed the built-in static lookup catalogs
    - Reconcile module/form lookup sources (LOOKUP_RECONCILE_ON_STARTUP)

    Note: In production, use Alembic migrations instead of
    Base.metadata.create_all() for better schema management.
    """
    Base.metadata.create_all(bind=engine)
    print(f"✓ Database tables created/verified")

    migration_count = add_missing_columns()
    if migration_count:
        print(f"✓ Auto-migration: {migration_count} columns added")
    else:
        print(f"✓ Database schema up to date")

    configure_error_logging(SessionLocal)
    print(f"✓ Error logging system configured")

    db = SessionLocal()
    try:
        added = LookupSourceService.seed_static_sources(db)
        print(f"✓ Static lookup sources seeded ({added} new)")

        if settings.LOOKUP_RECONCILE_ON_STARTUP:
            stats = LookupSourceService.reconcile_catalog(db)
            print(
                f"✓ Lookup catalog reconciled: {stats['created']} created, "
                f"{stats['deactivated']} deactivated, {stats['reactivated']} reactivated"
            )
    except Exception as e:
        db.rollback()
        error_logger.log_error(e, severity="warning", context={"operation": "startup_seed"})
        print(f"  ⚠ Lookup source seeding failed: {e}")
    finally:
        db.close()

    print(f"✓ API documentation available at http://localhost:8000/docs")


@app.on_event("shutdown")
async def shutdown_event():
    print("✓ Application shutdown complete")


@app.get(
    "/health",
    tags=["Health"],
    summary="Health Check",
    description="Simple endpoint to verify API is running"
)
async def health_check():
    """
    Health check endpoint.

    Example Response:
        {
            "status": "ok",
            "version": "1.0.0",
            "api": "Form Builder Lookup API"
        }
    """
    return JSONResponse(
        status_code=200,
        content={
            "status": "ok",
            "version": "1.0.0",
            "api": settings.PROJECT_NAME
        }
    )


@app.get(
    "/",
    tags=["Root"],
    summary="API Root",
    description="Root endpoint with API information"
)
async def root():
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health"
    }


# All v1 endpoints are prefixed with /api/v1
from app.api.v1.router import api_router

app.include_router(
    api_router,
    prefix=f"/api/{settings.API_VERSION}",
)

# Available endpoints:
# - GET  /api/v1/lookup/sources - Lookup source catalog
# - POST /api/v1/lookup/sources/reconcile - Reconcile module/form sources
# - GET  /api/v1/lookup/fields?sourceId= - Field names of a source
# - GET  /api/v1/lookup/data?sourceId= - Lookup records
# - POST /api/v1/lookup/options - Mapped options for a lookup field
# - POST/PUT/DELETE /api/v1/fields - Field save path
# - POST /api/v1/forms/{form_id}/records - Record submission
# - GET  /api/v1/forms/{form_id}/lookup-sources - Sources a form draws from
# - GET  /api/v1/forms/{form_id}/linked-records - Forms that draw from a form
