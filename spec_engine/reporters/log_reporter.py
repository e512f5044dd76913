"""Reporter that narrates a run through `logging`."""

import logging
import threading

from spec_engine.models.events import (
    AlertProvided,
    AnyEvent,
    InfoProvided,
    MarkupProvided,
    NoteProvided,
    RecordedEvent,
    ScopeClosed,
    ScopeOpened,
    ScopePending,
    SuiteAborted,
    SuiteCompleted,
    SuiteStarting,
    TestCanceled,
    TestFailed,
    TestIgnored,
    TestPending,
    TestStarting,
    TestSucceeded,
)
from spec_engine.reporters.manifest import ReporterManifest

STATUS_SYMBOLS = {
    "succeeded": "✅",
    "failed": "❌",
    "pending": "⏸️",
    "canceled": "🚫",
    "ignored": "⏭️",
    "aborted": "❗",
}

DIAGNOSTIC_PREFIXES: dict[type, str] = {
    InfoProvided: "+",
    NoteProvided: "note:",
    AlertProvided: "alert:",
    MarkupProvided: "markup:",
}


class LoggingReporter:
    """Writes one log record per event, indented by scope depth.

    Failures and cancellations are logged at WARNING, aborts at ERROR, and
    everything else at INFO.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or logging.getLogger(__name__)
        self._depth: dict[str, int] = {}
        self._lock = threading.Lock()

    def __call__(self, event: AnyEvent) -> None:
        with self._lock:
            self._report(event)

    def _indent(self, suite_id: str) -> str:
        return "  " * self._depth.get(suite_id, 0)

    def _report(self, event: AnyEvent) -> None:
        log = self._log
        pad = self._indent(event.suite_id)
        match event:
            case SuiteStarting():
                self._depth[event.suite_id] = 0
                log.info("%s:", event.suite_name)
            case SuiteCompleted():
                log.info("%s completed (%dms)", event.suite_name, event.duration_ms)
                self._depth.pop(event.suite_id, None)
            case SuiteAborted():
                log.error(
                    "%s %s aborted: %s",
                    STATUS_SYMBOLS["aborted"],
                    event.suite_name,
                    event.message,
                )
                self._depth.pop(event.suite_id, None)
            case ScopeOpened():
                log.info("%s%s", pad, event.message)
                self._depth[event.suite_id] = self._depth.get(event.suite_id, 0) + 1
            case ScopeClosed():
                self._depth[event.suite_id] = max(
                    self._depth.get(event.suite_id, 0) - 1, 0
                )
            case ScopePending():
                self._depth[event.suite_id] = max(
                    self._depth.get(event.suite_id, 0) - 1, 0
                )
                log.info(
                    "%s%s %s (pending)",
                    self._indent(event.suite_id),
                    STATUS_SYMBOLS["pending"],
                    event.message,
                )
            case TestStarting():
                log.debug("%sstarting %s", pad, event.test_text)
            case TestSucceeded():
                log.info("%s%s %s", pad, STATUS_SYMBOLS["succeeded"], event.test_text)
            case TestFailed():
                log.warning(
                    "%s%s %s: %s",
                    pad,
                    STATUS_SYMBOLS["failed"],
                    event.test_text,
                    event.message,
                )
                if event.throwable.file_name:
                    log.warning(
                        "%s  at %s:%s",
                        pad,
                        event.throwable.file_name,
                        event.throwable.line_number,
                    )
            case TestPending():
                log.info(
                    "%s%s %s (pending)", pad, STATUS_SYMBOLS["pending"], event.test_text
                )
            case TestCanceled():
                log.warning(
                    "%s%s %s (canceled): %s",
                    pad,
                    STATUS_SYMBOLS["canceled"],
                    event.test_text,
                    event.message,
                )
            case TestIgnored():
                log.info(
                    "%s%s %s (ignored)", pad, STATUS_SYMBOLS["ignored"], event.test_text
                )
            case InfoProvided() | NoteProvided() | AlertProvided() | MarkupProvided():
                self._diagnostic(event, pad)

        recorded = getattr(event, "recorded_events", ())
        for diagnostic in recorded:
            self._diagnostic(diagnostic, pad + "  ")

    def _diagnostic(self, event: RecordedEvent, pad: str) -> None:
        level = logging.WARNING if isinstance(event, AlertProvided) else logging.INFO
        self._log.log(
            level, "%s%s %s", pad, DIAGNOSTIC_PREFIXES[type(event)], event.message
        )


logging_manifest = ReporterManifest(
    description="Narrate the run through logging",
    reporter_factory=LoggingReporter,
)
