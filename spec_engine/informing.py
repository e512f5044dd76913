"""Routing of info/note/alert/markup calls.

Where a diagnostic ends up depends on when it is made:

- while the suite is registering, it becomes a leaf of the current scope and
  is reported in place when the run reaches it;
- while a test body runs, it is buffered and attached to that test's terminal
  event;
- while a run is in progress but outside any test, it is reported at once;
- after the run, it is only logged.
"""

import logging
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from spec_engine.errors import caller_location
from spec_engine.models.entry import DiagnosticKind, TestEntry
from spec_engine.models.events import RecordedEvent

if TYPE_CHECKING:
    from spec_engine.registry import TestRegistry
    from spec_engine.reporters.base import EventEmitter

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class TestContext:
    """State of the test whose body is currently executing."""

    __test__ = False

    entry: TestEntry
    informer: "Informer"
    recorded: list[RecordedEvent] = field(default_factory=list)


_current_test: ContextVar[TestContext | None] = ContextVar(
    "spec_engine_current_test", default=None
)


def current_test() -> TestContext | None:
    """Return the context of the running test, if called from a test body."""
    return _current_test.get()


def enter_test(context: TestContext) -> object:
    """Mark `context` as the running test; returns a token for `exit_test`."""
    return _current_test.set(context)


def exit_test(token: object) -> None:
    _current_test.reset(token)  # type: ignore[arg-type]


class Informer:
    """Per-suite entry point for diagnostics."""

    def __init__(self, registry: "TestRegistry") -> None:
        self._registry = registry
        self._emitter: EventEmitter | None = None

    def attach(self, emitter: "EventEmitter") -> None:
        self._emitter = emitter

    def detach(self) -> None:
        self._emitter = None

    def provide(self, kind: DiagnosticKind, message: str) -> None:
        if message is None:
            raise TypeError(f"{kind} message must not be None")

        location = caller_location()
        context = _current_test.get()

        if context is not None and context.informer is self:
            emitter = self._emitter
            if emitter is None:  # pragma: no cover
                raise RuntimeError("Test context active without a running emitter")
            context.recorded.append(
                emitter.diagnostic(
                    kind, message, location=location, entry=context.entry
                )
            )
            return

        if self._registry.is_open:
            self._registry.record_diagnostic(kind, message, location)
            return

        if self._emitter is not None:
            self._emitter.reporter(
                self._emitter.diagnostic(kind, message, location=location)
            )
            return

        log.info("%s provided outside of a run: %s", kind, message)
