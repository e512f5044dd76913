"""Tests for the JSON summary reporter."""

import json

from spec_engine.reporters.json_reporter import JsonReporter
from spec_engine.testing.factories import (
    TestFailedFactory,
    TestPendingFactory,
    TestSucceededFactory,
)


def test_summary_counts_results() -> None:
    """Counts one result per terminal event."""
    reporter = JsonReporter()
    reporter(TestSucceededFactory.build(test_name="adds", duration_ms=3))
    reporter(TestFailedFactory.build(test_name="divides", message="boom"))
    reporter(TestPendingFactory.build(test_name="multiplies", reason="later"))

    summary = reporter.summary()

    assert summary["total"] == 3
    assert summary["succeeded"] == 1
    assert summary["failed"] == 1
    assert summary["pending"] == 1
    assert summary["canceled"] == 0
    assert summary["ignored"] == 0
    assert summary["results"][0]["test"] == "adds"
    assert summary["results"][0]["duration_ms"] == 3
    assert summary["results"][1]["message"] == "boom"
    assert summary["results"][2]["message"] == "later"


def test_render_is_json() -> None:
    """Renders the summary as a JSON document."""
    reporter = JsonReporter()
    reporter(TestSucceededFactory.build())

    assert json.loads(reporter.render())["total"] == 1


def test_empty_summary() -> None:
    """Reports zero totals before any event."""
    assert JsonReporter().summary() == {
        "total": 0,
        "succeeded": 0,
        "failed": 0,
        "pending": 0,
        "canceled": 0,
        "ignored": 0,
        "results": [],
    }
