"""
API v1 Module
Contains all version 1 API endpoints.
"""

from app.api.v1 import lookup, fields, forms

__all__ = ["lookup", "fields", "forms"]
