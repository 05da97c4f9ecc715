"""
Structured Logging Configuration
"""

import logging
import sys
from typing import Any, Dict, Optional

import structlog

from orgaccess.core.config import settings


def setup_logging():
    """Configure structured logging for the library and its host application"""

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            add_actor_id,
            # JSON formatting for production, pretty for development
            structlog.processors.JSONRenderer() if settings.ENVIRONMENT == "production"
            else structlog.dev.ConsoleRenderer(colors=True)
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def add_actor_id(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Copy the acting user id from bound context vars onto the entry"""
    context = structlog.contextvars.get_contextvars()
    actor_id = context.get("actor_id")
    if actor_id and "actor_id" not in event_dict:
        event_dict["actor_id"] = actor_id
    return event_dict


def bind_actor(actor_id: str) -> None:
    """Bind the acting user for every log entry emitted in the current context"""
    structlog.contextvars.bind_contextvars(actor_id=actor_id)


def get_logger(name: Optional[str] = None):
    """Get a configured logger instance"""
    return structlog.get_logger(name)
