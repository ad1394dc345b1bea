"""Tests for observability utilities."""

import json
import logging

from horizontas.observability.correlation import (
    correlation_id_from_header,
    reset_correlation_id,
    set_correlation_id,
)
from horizontas.observability.logging import JsonFormatter, configure_logging
from horizontas.observability.redaction import (
    redact_fields,
    redact_string,
    redact_value,
)


class TestRedaction:
    """Tests for redaction helpers."""

    def test_redact_phone_number(self):
        result = redact_string("Call me at +370 600 00000")
        assert "00000" not in result
        assert "[REDACTED]" in result

    def test_redact_email(self):
        result = redact_string("Email: ona@example.com")
        assert "ona@example.com" not in result
        assert "[REDACTED]" in result

    def test_iso_dates_survive(self):
        assert redact_string("2025-06-01") == "2025-06-01"

    def test_redact_value_dict_only_keys(self):
        result = redact_value({"email": "ona@example.com", "guests": 2})
        assert "ona@example.com" not in result
        assert "email" in result
        assert "guests" in result

    def test_redact_value_list_only_len(self):
        result = redact_value(["a", "b", "c"])
        assert "len=3" in result

    def test_scalars_keep_type(self):
        assert redact_value(45000) == 45000
        assert redact_value(True) is True
        assert redact_value(None) is None

    def test_sensitive_keys_masked(self):
        fields = redact_fields(
            {"guest_name": "Ona Petraitė", "email": "ona@example.com", "apartment_id": "mara"}
        )
        assert fields == {
            "guest_name": "[REDACTED]",
            "email": "[REDACTED]",
            "apartment_id": "mara",
        }


class TestJsonFormatter:
    def _record(self, **extra_fields):
        record = logging.LogRecord(
            name="horizontas.domain.booking",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="checkout_session_opened",
            args=(),
            exc_info=None,
        )
        record.extra_fields = extra_fields
        return record

    def test_fields_and_correlation_id(self):
        token = set_correlation_id("req-42")
        try:
            line = JsonFormatter().format(self._record(amount_cents=45000, email="ona@example.com"))
        finally:
            reset_correlation_id(token)

        payload = json.loads(line)
        assert payload["message"] == "checkout_session_opened"
        assert payload["level"] == "INFO"
        assert payload["correlationId"] == "req-42"
        assert payload["amount_cents"] == 45000
        assert payload["email"] == "[REDACTED]"

    def test_no_correlation_id_outside_request(self):
        payload = json.loads(JsonFormatter().format(self._record()))
        assert "correlationId" not in payload


class TestConfigureLogging:
    def test_idempotent(self):
        configure_logging("DEBUG")
        configure_logging("WARNING")

        logger = logging.getLogger("horizontas")
        json_handlers = [h for h in logger.handlers if isinstance(h.formatter, JsonFormatter)]
        assert len(json_handlers) == 1
        assert logger.level == logging.WARNING


class TestCorrelationIdFromHeader:
    def test_valid_id_kept(self):
        assert correlation_id_from_header("test-123") == "test-123"

    def test_missing_id_generated(self):
        assert len(correlation_id_from_header(None)) == 36

    def test_malformed_id_replaced(self):
        cid = correlation_id_from_header("bad id\nwith newline")
        assert cid != "bad id\nwith newline"
        assert len(cid) == 36
