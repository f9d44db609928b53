"""
Base Model Class
Provides common fields and functionality for all database models.

All application models should inherit from BaseModel instead of Base directly.
This ensures a consistent opaque string ID and automatic timestamp tracking.
"""

from sqlalchemy import Column, DateTime, String, func
import uuid

from app.db.base import Base


def generate_id() -> str:
    """Opaque identifier used as default primary key."""
    return uuid.uuid4().hex


class BaseModel(Base):
    """
    Abstract base model with common fields for all tables.

    Provides:
    - String primary key (opaque; lookup tables assign prefixed/derived ids)
    - created_at timestamp (automatically set on insert)
    - updated_at timestamp (automatically updated on modification)

    Example:
        class Form(BaseModel):
            __tablename__ = "forms"
            name = Column(String(255), nullable=False)
            # id, created_at, updated_at are inherited automatically
    """

    __abstract__ = True

    # Primary Key: opaque string
    # Lookup sources use "module_<id>" / "form_<id>" / "lookup_<name>" and
    # relations use "lfr_<source>_<field>", so ids are not UUID-typed.
    id = Column(
        String(255),
        primary_key=True,
        default=generate_id,
        nullable=False
    )

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self):
        return f"<{self.__class__.__name__}(id={self.id})>"
