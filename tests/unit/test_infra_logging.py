"""Tests for structured logging and in-process metrics."""

from __future__ import annotations

import logging

import pytest

from backend.app.config.loader import LoggingConfig
from backend.app.infra.logging import StructuredFormatter, configure_logging
from backend.app.infra.metrics import InMemoryMetricsClient, get_metrics_client

pytestmark = [pytest.mark.config]


def _record(**extra):
    record = logging.LogRecord(
        "backend.app.domain.entrystore.service",
        logging.INFO,
        __file__,
        1,
        "entry_created",
        None,
        None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_sorted_extra_fields():
    formatter = StructuredFormatter("%(levelname)s %(message)s")

    rendered = formatter.format(_record(entry_id="abc", effort=3))

    assert rendered == "INFO entry_created effort=3 entry_id='abc'"


def test_formatter_without_extra_is_plain():
    formatter = StructuredFormatter("%(message)s")

    assert formatter.format(_record()) == "entry_created"


def test_configure_logging_replaces_its_handler():
    root = logging.getLogger("backend")
    before = list(root.handlers)
    try:
        configure_logging(LoggingConfig(level="DEBUG"))
        configure_logging(LoggingConfig(level="WARNING"))

        installed = [h for h in root.handlers if getattr(h, "_growthlog_handler", False)]
        assert len(installed) == 1
        assert isinstance(installed[0].formatter, StructuredFormatter)
        assert root.level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)
        root.setLevel(logging.NOTSET)


def test_metrics_client_counts():
    metrics = InMemoryMetricsClient()

    metrics.increment("entries_created_total")
    metrics.increment("entries_created_total", 2)

    assert metrics.snapshot() == {"entries_created_total": 3}


def test_metrics_client_is_shared():
    assert get_metrics_client() is get_metrics_client()
