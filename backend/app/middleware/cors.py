"""
CORS Middleware Configuration
Lets the form builder frontend call the API from another origin.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings


def setup_cors(app: FastAPI) -> None:
    """
    Configure CORS middleware for the FastAPI application.

    Allowed origins come from settings.CORS_ORIGINS (env CORS_ORIGINS as a
    JSON list); restrict it to the production frontend domain when deploying.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
