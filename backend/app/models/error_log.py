"""
Error Log Model
Stores application errors for debugging and monitoring.

Captures:
- Timestamp and severity
- Request details
- Full error traceback
- Additional context data (e.g. the lookup source or field involved)
"""

from sqlalchemy import Column, String, Text, JSON, DateTime
from datetime import datetime, timezone

from app.models.base import BaseModel


class ErrorLog(BaseModel):
    __tablename__ = "error_logs"

    timestamp = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True
    )

    # Error classification
    error_type = Column(String(255), nullable=False, index=True)  # e.g. "OperationalError"
    error_code = Column(String(50), nullable=True)  # HTTP status code, if any
    severity = Column(String(20), default="error", nullable=False)  # debug, info, warning, error, critical

    # Location info
    module = Column(String(255), nullable=True)
    function = Column(String(255), nullable=True)
    line_number = Column(String(20), nullable=True)

    # Request context
    request_method = Column(String(10), nullable=True)
    request_path = Column(String(500), nullable=True)
    request_query = Column(Text, nullable=True)
    request_headers = Column(JSON, nullable=True)
    client_ip = Column(String(50), nullable=True)
    user_agent = Column(String(500), nullable=True)

    # Error details
    message = Column(Text, nullable=False)
    error_buffer = Column(Text, nullable=True)
    stack_trace = Column(Text, nullable=True)
    context_data = Column(JSON, nullable=True)

    resolved = Column(String(1), default='N', nullable=False)  # Y/N

    def __repr__(self):
        return f"<ErrorLog(id={self.id}, type={self.error_type}, message={self.message[:50]}...)>"
