"""
Unit tests for the shared logger.
"""

import json
import logging

import pytest

from orderflow.core.shared.logger import ColoredFormatter, JSONFormatter, get_service_logger


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("service.sweep", logging.INFO, __file__, 10, "Swept %d orders", (3,), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
def test_json_formatter_includes_context():
    output = json.loads(JSONFormatter().format(make_record(extra_data={"cancelled": 3})))

    assert output["message"] == "Swept 3 orders"
    assert output["level"] == "INFO"
    assert output["extra"] == {"cancelled": 3}


@pytest.mark.unit
def test_colored_formatter_does_not_leak_color_codes():
    record = make_record()
    ColoredFormatter("%(levelname)s %(message)s").format(record)

    assert record.levelname == "INFO"


@pytest.mark.unit
def test_context_logger_attaches_context(caplog):
    log = get_service_logger("expiry_sweep").with_context(run=7)

    with caplog.at_level(logging.INFO, logger="service.expiry_sweep"):
        log.info("pass finished", cancelled=2)

    record = caplog.records[-1]
    assert record.extra_data == {"component": "service", "service": "expiry_sweep", "run": 7, "cancelled": 2}
