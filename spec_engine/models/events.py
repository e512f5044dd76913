"""Lifecycle events pushed to reporters.

Every event shares the envelope `{kind, ordinal, suite_id, suite_name,
timestamp}`; test events add the test name and, for terminal events, the
diagnostics recorded while the test ran.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Literal

from pydantic import ConfigDict, Field

from spec_engine.models.base import Model
from spec_engine.models.outcome import ThrowableInfo


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Location(Model):
    """Source location of a registration call."""

    file_name: str
    line_number: int


class Event(Model):
    """Fields common to every event."""

    kind: str
    ordinal: int = Field(..., description="Creation order within one run")
    suite_id: str
    suite_name: str
    timestamp: datetime = Field(default_factory=_now)


class _Diagnostic(Event):
    message: str
    test_name: str | None = Field(
        default=None, description="Set when provided from inside a test"
    )
    location: Location | None = None


class InfoProvided(_Diagnostic):
    """Result of `info(...)`."""

    kind: Literal["InfoProvided"] = "InfoProvided"


class NoteProvided(_Diagnostic):
    """Result of `note(...)`."""

    kind: Literal["NoteProvided"] = "NoteProvided"


class AlertProvided(_Diagnostic):
    """Result of `alert(...)`."""

    kind: Literal["AlertProvided"] = "AlertProvided"


class MarkupProvided(_Diagnostic):
    """Result of `markup(...)`."""

    kind: Literal["MarkupProvided"] = "MarkupProvided"


type RecordedEvent = InfoProvided | NoteProvided | AlertProvided | MarkupProvided


class _TestEvent(Event):
    test_name: str
    test_text: str
    location: Location | None = None


class TestStarting(_TestEvent):
    """A test is about to run."""

    __test__ = False

    kind: Literal["TestStarting"] = "TestStarting"


class _TerminalEvent(_TestEvent):
    duration_ms: int = 0
    recorded_events: Sequence[RecordedEvent] = Field(default_factory=tuple)


class TestSucceeded(_TerminalEvent):
    """A test completed normally."""

    __test__ = False

    kind: Literal["TestSucceeded"] = "TestSucceeded"


class TestFailed(_TerminalEvent):
    """A test raised a non-fatal exception."""

    __test__ = False

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal["TestFailed"] = "TestFailed"
    message: str
    throwable: ThrowableInfo
    cause: BaseException | None = Field(default=None, exclude=True, repr=False)


class TestPending(_TerminalEvent):
    """A test signaled it is pending."""

    __test__ = False

    kind: Literal["TestPending"] = "TestPending"
    reason: str | None = None


class TestCanceled(_TerminalEvent):
    """A test canceled itself."""

    __test__ = False

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal["TestCanceled"] = "TestCanceled"
    message: str
    throwable: ThrowableInfo
    cause: BaseException | None = Field(default=None, exclude=True, repr=False)


class TestIgnored(_TestEvent):
    """An ignored test, reported without a preceding TestStarting."""

    __test__ = False

    kind: Literal["TestIgnored"] = "TestIgnored"


class _ScopeEvent(Event):
    message: str
    location: Location | None = None


class ScopeOpened(_ScopeEvent):
    """A scope clause was entered."""

    kind: Literal["ScopeOpened"] = "ScopeOpened"


class ScopeClosed(_ScopeEvent):
    """A scope clause was left."""

    kind: Literal["ScopeClosed"] = "ScopeClosed"


class ScopePending(_ScopeEvent):
    """A scope whose body signaled pending was left."""

    kind: Literal["ScopePending"] = "ScopePending"


class SuiteStarting(Event):
    """A suite run is starting."""

    kind: Literal["SuiteStarting"] = "SuiteStarting"


class SuiteCompleted(Event):
    """A suite run finished; individual tests may still have failed."""

    kind: Literal["SuiteCompleted"] = "SuiteCompleted"
    duration_ms: int = 0


class SuiteAborted(Event):
    """A fatal error stopped the suite run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal["SuiteAborted"] = "SuiteAborted"
    message: str
    throwable: ThrowableInfo
    cause: BaseException | None = Field(default=None, exclude=True, repr=False)
    duration_ms: int = 0


type TerminalEvent = TestSucceeded | TestFailed | TestPending | TestCanceled

type AnyEvent = (
    SuiteStarting
    | SuiteCompleted
    | SuiteAborted
    | TestStarting
    | TestSucceeded
    | TestFailed
    | TestPending
    | TestCanceled
    | TestIgnored
    | ScopeOpened
    | ScopeClosed
    | ScopePending
    | InfoProvided
    | NoteProvided
    | AlertProvided
    | MarkupProvided
)
