"""Exception taxonomy and the exception-to-outcome classification table."""

import contextlib
import traceback
from collections.abc import Sequence
from pathlib import Path

from spec_engine.models.events import Location
from spec_engine.models.outcome import (
    Canceled,
    Failed,
    Outcome,
    Pending,
    ThrowableInfo,
)

_PACKAGE_DIR = Path(__file__).resolve().parent
_CONTEXTLIB_FILE = Path(contextlib.__file__).resolve()

FATAL_ERRORS: tuple[type[BaseException], ...] = (
    MemoryError,
    SystemError,
    KeyboardInterrupt,
    SystemExit,
)


class SpecEngineError(Exception):
    """Base class for errors raised by the engine."""


class DuplicateNameError(SpecEngineError):
    """Raised when a fully qualified test name is registered twice."""

    def __init__(self, test_name: str) -> None:
        super().__init__(f"Duplicate test name: {test_name}")
        self.test_name = test_name


class NullTagError(SpecEngineError):
    """Raised when a tag list contains a None or empty entry."""

    def __init__(self) -> None:
        super().__init__("a test tag was null")


class InvalidNestingError(SpecEngineError):
    """Raised when a style's grammar forbids nesting the requested clause."""


class RegistrationClosedError(SpecEngineError):
    """Raised when registration is attempted after a run has started."""


class TestFailedError(AssertionError):
    """Explicit test failure raised by `fail()`."""

    __test__ = False


class TestPendingError(Exception):
    """Signal raised by `pending()`; turns the test into a pending outcome."""

    __test__ = False


class TestCanceledError(Exception):
    """Signal raised by `cancel()`; turns the test into a canceled outcome."""

    __test__ = False


def fail(message: str = "") -> None:
    """Fail the running test."""
    raise TestFailedError(message)


def pending(reason: str | None = None) -> None:
    """Mark the running test (or the scope being registered) as pending."""
    raise TestPendingError(reason or "")


def cancel(message: str = "") -> None:
    """Cancel the running test."""
    raise TestCanceledError(message)


def is_fatal(exc: BaseException) -> bool:
    """Return True when the error must abort the run instead of failing a test."""
    return isinstance(exc, FATAL_ERRORS)


def _innermost_user_frame(
    frames: Sequence[traceback.FrameSummary],
) -> traceback.FrameSummary | None:
    for frame in reversed(frames):
        path = Path(frame.filename).resolve()
        if path == _CONTEXTLIB_FILE or path.is_relative_to(_PACKAGE_DIR):
            continue
        return frame
    return None


def caller_location() -> Location | None:
    """Return the location of the innermost caller outside this package."""
    frame = _innermost_user_frame(traceback.extract_stack())
    if frame is None or frame.lineno is None:
        return None
    return Location(file_name=Path(frame.filename).name, line_number=frame.lineno)


def throwable_info(exc: BaseException) -> ThrowableInfo:
    """Capture class name, message and the user-code location of an exception.

    The location is the innermost traceback frame outside this package, so a
    failure raised through `fail()` points at the caller.
    """
    frame = _innermost_user_frame(traceback.extract_tb(exc.__traceback__))

    return ThrowableInfo(
        class_name=type(exc).__name__,
        message=str(exc),
        file_name=Path(frame.filename).name if frame else None,
        line_number=frame.lineno if frame else None,
    )


def classify(exc: BaseException) -> Outcome:
    """Convert an exception escaping a test body into its outcome.

    Raises:
        BaseException: the same exception when it is fatal or is not an
            ordinary `Exception` (e.g. `asyncio.CancelledError`).

    """
    if is_fatal(exc) or not isinstance(exc, Exception):
        raise exc

    if isinstance(exc, TestPendingError):
        return Pending(reason=str(exc) or None)
    if isinstance(exc, TestCanceledError):
        return Canceled(cause=exc, throwable=throwable_info(exc))
    return Failed(cause=exc, throwable=throwable_info(exc))
