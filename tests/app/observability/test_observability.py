"""Testes de correlation_id e métricas via logging."""

from __future__ import annotations

import logging

import pytest

from app.observability.correlation import (
    MAX_CORRELATION_ID_LENGTH,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import record_latency, record_send_outcome


class TestCorrelationId:
    def test_set_and_reset(self) -> None:
        token = set_correlation_id("req-1")
        try:
            assert get_correlation_id() == "req-1"
        finally:
            reset_correlation_id(token)
        assert get_correlation_id() == ""

    @pytest.mark.parametrize("raw", [None, "", "   ", "x" * (MAX_CORRELATION_ID_LENGTH + 1)])
    def test_generates_when_missing_or_too_long(self, raw: str | None) -> None:
        token = set_correlation_id(raw)
        try:
            value = get_correlation_id()
            assert value
            assert len(value) == 36
        finally:
            reset_correlation_id(token)


class TestMetrics:
    def test_latency_is_rounded(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="app.observability.metrics"):
            record_latency("outbound_dispatcher", "send_text", 12.3456, correlation_id="c-1")

        record = caplog.records[-1]
        assert record.getMessage() == "metric_latency"
        assert record.latency_ms == 12.35
        assert record.correlation_id == "c-1"

    def test_send_outcome(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="app.observability.metrics"):
            record_send_outcome("audio", False, "timeout")

        record = caplog.records[-1]
        assert record.message_kind == "audio"
        assert record.success is False
        assert record.reason == "timeout"
