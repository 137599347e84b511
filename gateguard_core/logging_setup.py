"""
Logging Setup
=============
Structured logging for services embedding gateguard.

Usage:
    from gateguard_core.logging_setup import setup_logging
    
    # Setup at startup
    setup_logging(service_name="edge-gateway")

Library modules log through ``structlog.get_logger(__name__)``; this routes
those events through the stdlib root logger as JSON lines.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict

import structlog

from .config import LOG_LEVEL, SERVICE_NAME

service_name_var: ContextVar[str] = ContextVar("service_name", default=SERVICE_NAME)


def _add_service(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    event_dict.setdefault("service", service_name_var.get())
    return event_dict


_SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    _add_service,
]


def setup_logging(
    service_name: str = SERVICE_NAME,
    level: str = LOG_LEVEL,
    json_output: bool = True,
) -> logging.Logger:
    """
    Configure logging for a service.
    
    Args:
        service_name: Name of the service (e.g., "edge-gateway")
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Whether to output JSON (for production)
        
    Returns:
        Configured root logger
    """
    service_name_var.set(service_name)
    log_level = getattr(logging, level.upper(), logging.INFO)
    
    structlog.configure(
        processors=_SHARED_PROCESSORS + [
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_SHARED_PROCESSORS,
    ))
    
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    
    structlog.get_logger(__name__).info("logging_configured", service=service_name)
    
    return root_logger
