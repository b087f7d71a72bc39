# Logger selection and structured pipeline events for the contentstack_management package.

import logging
from datetime import UTC, datetime
from typing import Any, Optional

EMPTY_LOGGER_NAME = "contentstack_management.silent"


def _build_empty_logger() -> logging.Logger:
    logger = logging.getLogger(EMPTY_LOGGER_NAME)
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    logger.disabled = True
    return logger


# Sink used when a client is built with disable_logging=True
EMPTY_LOGGER = _build_empty_logger()


def get_log_manager(owner: type) -> logging.Logger:
    """Returns the logger named after the owner's module and qualified class name."""
    return logging.getLogger(f"{owner.__module__}.{owner.__qualname__}")


def get_client_logger(disable_logging: bool, owner: type) -> logging.Logger:
    """Selects the logging destination for a client instance.

    Args:
        disable_logging: When True, the silent sink is returned.
        owner: The class whose logger is used otherwise.
    """
    if disable_logging:
        return EMPTY_LOGGER
    return get_log_manager(owner)


# Pipeline Logging Utilities


def log_pipeline_event(
    logger: logging.Logger,
    context_id: str,
    handler_name: str,
    status: str,
    duration: Optional[float] = None,
    error: Optional[str] = None,
    **details: Any,
) -> None:
    """Log the outcome of one pipeline stage for a single call."""
    log_data: dict[str, Any] = {
        "context_id": context_id,
        "handler_name": handler_name,
        "status": status,
        "timestamp": datetime.now(UTC).isoformat(),
    }

    if duration is not None:
        log_data["duration_seconds"] = str(duration)

    if error:
        log_data["error"] = error

    log_data.update(details)

    if status == "error":
        logger.error(f"[{context_id}] {handler_name} failed: {error}", extra=log_data)
    else:
        logger.debug(f"[{context_id}] {handler_name} {status}", extra=log_data)
