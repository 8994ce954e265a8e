"""
Unit tests for store-bound logging helpers.
"""

import logging

from fga_access.observability.logging import AuthzLoggerAdapter, get_logger, log_operation

LOGGER_NAME = "fga_access.tests"


class TestBoundLogger:
    def test_ids_added_to_records(self, caplog):
        logger = get_logger(LOGGER_NAME, store_id="store-1", authorization_model_id="model-1")

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            logger.info("hello", extra={"subject": "user:1"})

        record = caplog.records[-1]
        assert record.store_id == "store-1"
        assert record.authorization_model_id == "model-1"
        assert record.subject == "user:1"

    def test_missing_ids_not_bound(self):
        logger = get_logger(LOGGER_NAME, store_id="store-1")

        assert isinstance(logger, AuthzLoggerAdapter)
        assert logger.extra == {"store_id": "store-1"}

    def test_call_extra_wins(self, caplog):
        """Test that an overridden model id replaces the bound default."""
        logger = get_logger(LOGGER_NAME, store_id="store-1", authorization_model_id="model-1")

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            logger.info("hello", extra={"authorization_model_id": "model-2"})

        record = caplog.records[-1]
        assert record.store_id == "store-1"
        assert record.authorization_model_id == "model-2"

    def test_bind_leaves_original_untouched(self):
        logger = get_logger(LOGGER_NAME, store_id="store-1")

        bound = logger.bind(authorization_model_id="model-9")

        assert bound.extra == {"store_id": "store-1", "authorization_model_id": "model-9"}
        assert logger.extra == {"store_id": "store-1"}
        assert bound.logger is logger.logger

    def test_separate_loggers_keep_separate_stores(self, caplog):
        first = get_logger(LOGGER_NAME, store_id="store-a")
        second = get_logger(LOGGER_NAME, store_id="store-b")

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            first.info("one")
            second.info("two")

        assert [r.store_id for r in caplog.records[-2:]] == ["store-a", "store-b"]


class TestLogOperation:
    def test_success_logs_debug(self, caplog):
        logger = get_logger(LOGGER_NAME, store_id="store-1")

        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            log_operation(logger, "check", duration_ms=1.234, subject="user:1")

        record = caplog.records[-1]
        assert record.levelno == logging.DEBUG
        assert record.getMessage() == "fga.check ok (1.23ms)"
        assert record.duration_ms == 1.23
        assert record.subject == "user:1"
        assert record.store_id == "store-1"
        assert not hasattr(record, "fail_safe")

    def test_fail_safe_failure_logs_warning(self, caplog):
        logger = get_logger(LOGGER_NAME)

        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            log_operation(logger, "check", success=False, duration_ms=1.5, fail_safe="deny")

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.getMessage() == "fga.check failed, answered with fail-safe 'deny' (1.50ms)"
        assert record.operation == "check"
        assert record.success is False
        assert record.fail_safe == "deny"

    def test_propagated_failure_logs_error(self, caplog):
        logger = get_logger(LOGGER_NAME)

        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            log_operation(logger, "batch_check", success=False, fail_safe="propagate")

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.getMessage() == "fga.batch_check failed"

    def test_explicit_level(self, caplog):
        logger = logging.getLogger(LOGGER_NAME)

        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            log_operation(logger, "list_objects", level=logging.INFO)

        assert caplog.records[-1].levelno == logging.INFO
