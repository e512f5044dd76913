"""Reporter protocol and the per-run event factory."""

import itertools
import logging
import threading
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from spec_engine.models.entry import DiagnosticKind, TestEntry
from spec_engine.models.events import (
    AlertProvided,
    AnyEvent,
    InfoProvided,
    Location,
    MarkupProvided,
    NoteProvided,
    RecordedEvent,
)

log = logging.getLogger(__name__)

DIAGNOSTIC_EVENTS: dict[DiagnosticKind, type[RecordedEvent]] = {
    "info": InfoProvided,
    "note": NoteProvided,
    "alert": AlertProvided,
    "markup": MarkupProvided,
}


class Reporter(Protocol):
    """Sink for lifecycle events. Calls are fire-and-forget."""

    def __call__(self, event: AnyEvent) -> None:
        """Receive one event."""


@dataclass(frozen=True, kw_only=True)
class DispatchReporter:
    """Fans each event out to several reporters, one event at a time.

    A reporter that raises is logged and skipped so the others still see
    the event.
    """

    reporters: Sequence[Reporter]
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __call__(self, event: AnyEvent) -> None:
        with self._lock:
            for reporter in self.reporters:
                try:
                    reporter(event)
                except Exception:
                    log.exception("Reporter %r failed on %s", reporter, event.kind)


@dataclass(kw_only=True)
class EventEmitter:
    """Builds events for one suite run and pushes them to the reporter.

    Every event gets the next ordinal at creation time, so ordinals reflect
    the order in which the engine produced events.
    """

    suite_id: str
    suite_name: str
    reporter: Reporter
    _ordinals: Iterator[int] = field(default_factory=itertools.count, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def next_ordinal(self) -> int:
        with self._lock:
            return next(self._ordinals)

    def make[E: AnyEvent](self, event_cls: type[E], **fields: object) -> E:
        """Create an event of `event_cls` with the run envelope filled in."""
        return event_cls(
            ordinal=self.next_ordinal(),
            suite_id=self.suite_id,
            suite_name=self.suite_name,
            **fields,  # type: ignore[arg-type]
        )

    def emit[E: AnyEvent](self, event_cls: type[E], **fields: object) -> E:
        """Create an event and send it to the reporter."""
        event = self.make(event_cls, **fields)
        self.reporter(event)
        return event

    def diagnostic(
        self,
        kind: DiagnosticKind,
        message: str,
        *,
        location: Location | None = None,
        entry: TestEntry | None = None,
    ) -> RecordedEvent:
        """Create (without sending) the event for an info/note/alert/markup call."""
        return self.make(
            DIAGNOSTIC_EVENTS[kind],
            message=message,
            location=location,
            test_name=entry.name if entry is not None else None,
        )
