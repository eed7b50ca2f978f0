"""
Unit tests for structured logging setup.
"""

import json
import logging

import pytest
import structlog
from zestimator.config import MonitoringConfig
from zestimator.observability.logging import add_lookup_id, configure_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.mark.unit
def test_add_lookup_id():
    with structlog.contextvars.bound_contextvars(lookup_id="abc123"):
        assert add_lookup_id(None, "info", {"event": "x"}) == {"event": "x", "lookup_id": "abc123"}
    assert add_lookup_id(None, "info", {"event": "x"}) == {"event": "x"}


@pytest.mark.unit
def test_json_log_file(tmp_path, restore_logging):
    log_file = tmp_path / "logs" / "zestimator.log"
    configure_logging(MonitoringConfig(log_level="INFO", log_file=str(log_file)))

    logger = structlog.get_logger("zestimator.test")
    with structlog.contextvars.bound_contextvars(lookup_id="lookup-1"):
        logger.info("Zestimate extracted", value=598500)
    logger.debug("Not written")

    for handler in logging.getLogger().handlers:
        handler.flush()

    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert len(records) == 1
    assert records[0]["event"] == "Zestimate extracted"
    assert records[0]["value"] == 598500
    assert records[0]["lookup_id"] == "lookup-1"
    assert records[0]["level"] == "info"
