"""
SQLAlchemy Declarative Base
Defines the base class for all SQLAlchemy models.

All database models should inherit from the Base class defined here.
This provides ORM functionality and table creation capabilities.
"""

from sqlalchemy.orm import declarative_base

# Declarative base class for all models
# Modules, forms, sections, fields, records and the lookup catalog all
# inherit from this base (through app.models.base.BaseModel).
#
# Usage:
#     from app.db.base import Base
#
#     class Form(Base):
#         __tablename__ = "forms"
#         id = Column(String(64), primary_key=True)
#         ...
Base = declarative_base()
