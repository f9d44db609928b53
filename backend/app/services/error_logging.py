"""
Error Logging Service

Failures on the lookup paths (catalog reconcile, relation maintenance,
unhandled request errors) are reported here. Each one goes to:
- the root logger, and errors.log under LOGS_DIR when that directory is writable
- the error_logs table, with request info, sanitized context and stack trace

Usage:
    from app.services.error_logging import error_logger

    try:
        LookupRelationService.sync_field_relation(db, field)
    except Exception as e:
        error_logger.log_error(e, severity="warning", context={"field_id": field.id})
"""

import logging
import traceback
import json
from datetime import datetime, timezone
from typing import Optional, Any, Dict
from pathlib import Path
from logging.handlers import RotatingFileHandler

from app.core.config import settings
from app.models.error_log import ErrorLog


logger = logging.getLogger("error_logging")
logger.setLevel(logging.DEBUG)

SENSITIVE_FIELDS = {'password', 'token', 'authorization', 'api_key', 'secret', 'credential'}
FORWARDED_HEADERS = ('content-type', 'accept', 'x-request-id')
LOG_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
}


def _build_file_handler(logs_dir: Path) -> Optional[RotatingFileHandler]:
    """Rotating errors.log handler, or None when the directory is not writable."""
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            logs_dir / "errors.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=10,
            encoding='utf-8'
        )
    except OSError as e:
        print(f"Warning: Cannot write to logs directory {logs_dir}: {e}")
        print("File logging disabled, using console only.")
        return None
    handler.setLevel(logging.ERROR)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    return handler


file_handler = _build_file_handler(Path(settings.LOGS_DIR))
if file_handler:
    logging.getLogger().addHandler(file_handler)


def sanitize_data(data: Any, depth: int = 0) -> Any:
    """
    Sanitize sensitive data from dictionaries and strings.
    Replaces sensitive field values with '[REDACTED]'.
    """
    if depth > 10:
        return "[MAX_DEPTH]"

    if isinstance(data, dict):
        return {
            key: "[REDACTED]"
            if any(sensitive in str(key).lower() for sensitive in SENSITIVE_FIELDS)
            else sanitize_data(value, depth + 1)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [sanitize_data(item, depth + 1) for item in data]
    return data


def truncate_string(s: str, max_length: int = 10000) -> str:
    """Truncate string to max length."""
    if len(s) > max_length:
        return s[:max_length] + f"... [TRUNCATED, total {len(s)} chars]"
    return s


def _origin(error: Exception) -> Dict[str, Optional[str]]:
    """Module, function and line of the innermost frame that raised."""
    frames = traceback.extract_tb(error.__traceback__) if error.__traceback__ else []
    if not frames:
        return {"module": None, "function": None, "line_number": None}
    last = frames[-1]
    return {"module": last.filename, "function": last.name, "line_number": str(last.lineno)}


def _request_info(request: Any) -> Dict[str, Any]:
    """Method, path, query, client and forwarded headers of a FastAPI request."""
    headers = {key: request.headers[key] for key in FORWARDED_HEADERS if key in request.headers}
    user_agent = request.headers.get("user-agent")
    return {
        "request_method": request.method,
        "request_path": str(request.url.path),
        "request_query": str(request.url.query) or None,
        "request_headers": headers or None,
        "client_ip": request.client.host if request.client else None,
        "user_agent": truncate_string(user_agent, 500) if user_agent else None,
    }


class ErrorLogger:
    """
    Error logging service that writes to both the log and the database.
    """

    def __init__(self):
        self.db_session_factory = None

    def set_db_session_factory(self, factory):
        """Set the database session factory for DB logging."""
        self.db_session_factory = factory

    def log_error(
        self,
        error: Exception,
        request: Optional[Any] = None,
        severity: str = "error",
        context: Optional[Dict] = None,
        save_to_db: bool = True
    ) -> Optional[str]:
        """
        Log an error with full context.

        Args:
            error: The exception that occurred
            request: FastAPI Request object (optional)
            severity: debug, info, warning, error, critical
            context: Lookup ids and operation name involved
            save_to_db: Whether to save to database

        Returns:
            ID of the error log entry if saved to DB, None otherwise
        """
        timestamp = datetime.now(timezone.utc)
        error_type = type(error).__name__
        error_message = str(error)
        stack_trace = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        safe_context = sanitize_data(context) if context else None

        request_fields: Dict[str, Any] = {}
        if request is not None:
            try:
                request_fields = _request_info(request)
            except (AttributeError, KeyError) as req_err:
                logger.debug(f"Failed to extract request info: {req_err}")

        sections = [f"{error_type}: {error_message} (severity={severity}, at={timestamp.isoformat()})"]
        if request_fields:
            sections.append(f"{request_fields['request_method']} {request_fields['request_path']}")
        if safe_context:
            sections.append(json.dumps(safe_context, indent=2, default=str))
        sections.append(stack_trace)
        error_buffer = truncate_string("\n\n".join(sections), 50000)

        logger.log(
            LOG_LEVELS.get(severity, logging.INFO),
            f"{error_type}: {error_message} | Path: {request_fields.get('request_path') or 'N/A'}",
        )

        if not (save_to_db and self.db_session_factory):
            return None

        try:
            db = self.db_session_factory()
            try:
                entry = ErrorLog(
                    timestamp=timestamp,
                    error_type=error_type,
                    error_code=str(getattr(error, 'status_code', '')) or None,
                    severity=severity,
                    message=truncate_string(error_message, 1000),
                    error_buffer=error_buffer,
                    stack_trace=truncate_string(stack_trace, 20000),
                    context_data=safe_context,
                    **_origin(error),
                    **request_fields,
                )
                db.add(entry)
                db.commit()
                logger.debug(f"Error logged to DB with ID: {entry.id}")
                return entry.id
            finally:
                db.close()
        except Exception as db_err:
            logger.error(f"Failed to save error to database: {db_err}")
            return None


# Singleton instance
error_logger = ErrorLogger()


def configure_error_logging(db_session_factory):
    """
    Configure the error logging system with database support.
    Call this during app startup.
    """
    error_logger.set_db_session_factory(db_session_factory)
    logger.info("Error logging system configured")
