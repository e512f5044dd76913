"""In-memory reporter that keeps every event it receives."""

import threading
from collections.abc import Sequence

from spec_engine.models.events import (
    AlertProvided,
    AnyEvent,
    InfoProvided,
    MarkupProvided,
    NoteProvided,
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


class EventRecordingReporter:
    """Records events in arrival order; safe to call from several threads."""

    def __init__(self) -> None:
        self._events: list[AnyEvent] = []
        self._lock = threading.Lock()

    def __call__(self, event: AnyEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> Sequence[AnyEvent]:
        with self._lock:
            return list(self._events)

    def of_type[E](self, event_cls: type[E]) -> Sequence[E]:
        return [e for e in self.events if isinstance(e, event_cls)]

    @property
    def kinds(self) -> Sequence[str]:
        return [e.kind for e in self.events]

    @property
    def suite_starting_events(self) -> Sequence[SuiteStarting]:
        return self.of_type(SuiteStarting)

    @property
    def suite_completed_events(self) -> Sequence[SuiteCompleted]:
        return self.of_type(SuiteCompleted)

    @property
    def suite_aborted_events(self) -> Sequence[SuiteAborted]:
        return self.of_type(SuiteAborted)

    @property
    def test_starting_events(self) -> Sequence[TestStarting]:
        return self.of_type(TestStarting)

    @property
    def test_succeeded_events(self) -> Sequence[TestSucceeded]:
        return self.of_type(TestSucceeded)

    @property
    def test_failed_events(self) -> Sequence[TestFailed]:
        return self.of_type(TestFailed)

    @property
    def test_pending_events(self) -> Sequence[TestPending]:
        return self.of_type(TestPending)

    @property
    def test_canceled_events(self) -> Sequence[TestCanceled]:
        return self.of_type(TestCanceled)

    @property
    def test_ignored_events(self) -> Sequence[TestIgnored]:
        return self.of_type(TestIgnored)

    @property
    def scope_opened_events(self) -> Sequence[ScopeOpened]:
        return self.of_type(ScopeOpened)

    @property
    def scope_closed_events(self) -> Sequence[ScopeClosed]:
        return self.of_type(ScopeClosed)

    @property
    def scope_pending_events(self) -> Sequence[ScopePending]:
        return self.of_type(ScopePending)

    @property
    def info_provided_events(self) -> Sequence[InfoProvided]:
        return self.of_type(InfoProvided)

    @property
    def note_provided_events(self) -> Sequence[NoteProvided]:
        return self.of_type(NoteProvided)

    @property
    def alert_provided_events(self) -> Sequence[AlertProvided]:
        return self.of_type(AlertProvided)

    @property
    def markup_provided_events(self) -> Sequence[MarkupProvided]:
        return self.of_type(MarkupProvided)


recording_manifest = ReporterManifest(
    description="Keep events in memory",
    reporter_factory=EventRecordingReporter,
)
