"""Reporter that accumulates test results into a JSON-ready summary."""

import json
import threading
from typing import Any

from spec_engine.models.events import (
    AnyEvent,
    SuiteAborted,
    TestCanceled,
    TestFailed,
    TestIgnored,
    TestPending,
    TestSucceeded,
)
from spec_engine.reporters.manifest import ReporterManifest

RESULT_STATUSES: dict[type, str] = {
    TestSucceeded: "succeeded",
    TestFailed: "failed",
    TestPending: "pending",
    TestCanceled: "canceled",
    TestIgnored: "ignored",
}


class JsonReporter:
    """Collects one result per reported test and renders the run summary."""

    def __init__(self) -> None:
        self._results: list[dict[str, Any]] = []
        self._aborted: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def __call__(self, event: AnyEvent) -> None:
        if isinstance(event, SuiteAborted):
            with self._lock:
                self._aborted.append(
                    {"suite": event.suite_id, "message": event.message}
                )
            return

        status = RESULT_STATUSES.get(type(event))
        if status is None:
            return

        message: str | None = None
        if isinstance(event, TestFailed | TestCanceled):
            message = event.message
        elif isinstance(event, TestPending):
            message = event.reason

        with self._lock:
            self._results.append(
                {
                    "suite": event.suite_id,
                    "test": event.test_name,  # type: ignore[union-attr]
                    "status": status,
                    "duration_ms": getattr(event, "duration_ms", 0),
                    "message": message,
                }
            )

    @property
    def aborted_suites(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._aborted)

    def summary(self) -> dict[str, Any]:
        """Format the collected results for JSON output."""
        with self._lock:
            results = list(self._results)

        def count(status: str) -> int:
            return sum(1 for r in results if r["status"] == status)

        return {
            "total": len(results),
            "succeeded": count("succeeded"),
            "failed": count("failed"),
            "pending": count("pending"),
            "canceled": count("canceled"),
            "ignored": count("ignored"),
            "results": results,
        }

    def render(self, indent: int | None = 2) -> str:
        return json.dumps(self.summary(), indent=indent)


json_manifest = ReporterManifest(
    description="Collect results into a JSON summary",
    reporter_factory=JsonReporter,
)
