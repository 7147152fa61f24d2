"""
Structured logging configuration with trace IDs
"""
import contextvars
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

from cinema.core.config import settings

# Context variable to store trace ID across calls in one request
trace_id_var = contextvars.ContextVar('trace_id', default=None)

_EXTRA_FIELDS = ('username', 'repertoire_id', 'reservation_id', 'duration_ms')


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with trace ID and additional fields"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.utcnow().isoformat()
        log_record['level'] = record.levelname

        trace_id = trace_id_var.get()
        if trace_id:
            log_record['trace_id'] = trace_id

        log_record['service'] = 'cinema-reservation'
        log_record['environment'] = settings.ENVIRONMENT

        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                log_record[field] = getattr(record, field)


def setup_logging() -> logging.Logger:
    """Configure structured JSON logging (safe to call more than once)"""
    root_logger = logging.getLogger()
    if any(isinstance(h.formatter, CustomJsonFormatter) for h in root_logger.handlers):
        return root_logger

    formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(name)s %(message)s')

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.LOG_FILE:
        file_handler = logging.FileHandler(settings.LOG_FILE)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(settings.LOG_LEVEL)

    # Reduce noise from libraries
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)

    return root_logger


def get_trace_id() -> Optional[str]:
    """Get current trace ID"""
    return trace_id_var.get()


def set_trace_id(trace_id: str):
    """Set trace ID for current context"""
    trace_id_var.set(trace_id)


def generate_trace_id() -> str:
    """Generate a new trace ID"""
    return str(uuid.uuid4())
