"""
Tests for structured logging
"""

import json
import logging
import pytest

from app.utils.logging_config import (
    JSONFormatter,
    get_logger,
    set_request_context,
    clear_request_context,
)


class _CaptureHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured():
    handler = _CaptureHandler()
    base = logging.getLogger("tests.pricing")
    base.addHandler(handler)
    base.setLevel(logging.DEBUG)
    yield handler
    base.removeHandler(handler)


class TestStructuredLogger:

    def test_pricing_fixed_carries_channel_context(self, captured):
        get_logger("tests.pricing").pricing_fixed(7, ["gpt-4"], "migrated_with_legacy")

        record = captured.records[0]
        assert record.entity_type == "channel"
        assert record.entity_id == "7"
        assert record.extra_data["added_models"] == ["gpt-4"]

        payload = json.loads(JSONFormatter().format(record))
        assert payload["level"] == "INFO"
        assert payload["data"]["migration_status"] == "migrated_with_legacy"

    def test_pricing_rejected_is_warning(self, captured):
        get_logger("tests.pricing").pricing_rejected(3, "bad ratio", model_name="gpt-4")

        record = captured.records[0]
        assert record.levelno == logging.WARNING
        assert record.extra_data["model_name"] == "gpt-4"

    def test_request_id_in_json_output(self, captured):
        set_request_context("abc123")
        try:
            get_logger("tests.pricing").info("hello")
            payload = json.loads(JSONFormatter().format(captured.records[0]))
        finally:
            clear_request_context()

        assert payload["request_id"] == "abc123"

