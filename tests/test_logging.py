import logging

from contentstack_management.contentstack_client import ContentstackClient
from contentstack_management.core.logging import (
    EMPTY_LOGGER,
    get_client_logger,
    get_log_manager,
    log_pipeline_event,
)


class _Owner:
    pass


def test_get_log_manager_names_logger_after_owner():
    logger = get_log_manager(_Owner)

    assert logger.name == f"{__name__}._Owner"


def test_get_client_logger_selects_sink():
    assert get_client_logger(True, _Owner) is EMPTY_LOGGER
    assert get_client_logger(False, _Owner) is get_log_manager(_Owner)


def test_empty_logger_never_emits(caplog):
    with caplog.at_level(logging.DEBUG):
        EMPTY_LOGGER.error("should not be recorded")

    assert "should not be recorded" not in caplog.text


def test_log_pipeline_event_levels(caplog):
    logger = logging.getLogger("tests.pipeline")

    with caplog.at_level(logging.DEBUG, logger="tests.pipeline"):
        log_pipeline_event(logger, "ctx-1", "HttpHandler", "completed", duration=0.5, attempt=1)
        log_pipeline_event(logger, "ctx-1", "HttpHandler", "error", error="boom")

    completed, failed = caplog.records
    assert completed.levelno == logging.DEBUG
    assert completed.context_id == "ctx-1"
    assert completed.duration_seconds == "0.5"
    assert completed.attempt == 1
    assert failed.levelno == logging.ERROR
    assert "[ctx-1] HttpHandler failed: boom" in failed.getMessage()


def test_client_leaves_root_logging_alone():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level

    with ContentstackClient() as client:
        client_logger = client.logger

    assert root.handlers == handlers
    assert root.level == level
    assert client_logger.handlers == []
