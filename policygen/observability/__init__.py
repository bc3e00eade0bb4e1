"""
Observability module: structured logging and run IDs.

Usage:
    from policygen.observability import RunContext, configure_logging, get_logger

    configure_logging("INFO")
    logger = get_logger(__name__)

    with RunContext() as ctx:
        logger.info("Compiling", extra={"variant": "strict"})
"""

from .context import RunContext, get_run_id
from .logging import HumanFormatter, JSONFormatter, configure_logging, get_logger

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "JSONFormatter",
    "HumanFormatter",
    # Context
    "RunContext",
    "get_run_id",
]
