"""Completion handles for suite runs and individual tests."""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

log = logging.getLogger(__name__)

type CompletionCallback = Callable[[bool], None]


def _in_running_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def _invoke(callback: CompletionCallback, succeeded: bool) -> None:
    try:
        callback(succeeded)
    except Exception:
        log.exception("Completion callback %r failed", callback)


class RunStatus(ABC):
    """Eventual result of a run: whether everything it covers succeeded.

    Completion callbacks run exactly once each. A callback registered before
    completion runs on the thread that completes the status; one registered
    afterwards runs immediately on the registering thread.
    """

    @property
    def unreported_exception(self) -> BaseException | None:
        """Fatal error that aborted the run, if any."""
        return None

    @abstractmethod
    def is_completed(self) -> bool:
        """Return True once the result is known."""

    @abstractmethod
    def _wait(self) -> None:
        """Block until completed."""

    @abstractmethod
    def _succeeded(self) -> bool:
        """Return the result of a completed status."""

    @abstractmethod
    def when_completed(self, callback: CompletionCallback) -> None:
        """Register `callback` to receive the result on completion."""

    def wait_until_completed(self) -> None:
        """Block the calling thread until the status completes.

        Raises:
            RuntimeError: If called on a thread that is running an event
                loop while the status is still incomplete; blocking there
                would stall the run it is waiting for.

        """
        if self.is_completed():
            return
        if _in_running_loop():
            raise RuntimeError(
                "wait_until_completed() cannot block inside a running event loop; "
                "use 'await status.wait()' instead"
            )
        self._wait()

    async def wait(self) -> bool:
        """Wait cooperatively and return whether the run succeeded."""
        if not self.is_completed():
            loop = asyncio.get_running_loop()
            future: asyncio.Future[bool] = loop.create_future()

            def resolve(succeeded: bool) -> None:
                if not future.done():
                    future.set_result(succeeded)

            self.when_completed(
                lambda succeeded: loop.call_soon_threadsafe(resolve, succeeded)
            )
            await future
        return self.succeeds()

    def succeeds(self) -> bool:
        """Wait for completion and return True if nothing failed.

        Raises:
            BaseException: The unreported exception of an aborted run.

        """
        self.wait_until_completed()
        if (exc := self.unreported_exception) is not None:
            raise exc
        return self._succeeded()


class _CompletedStatus(RunStatus):
    def __init__(self, succeeded: bool) -> None:
        self._result = succeeded

    def __repr__(self) -> str:
        return "SUCCEEDED_STATUS" if self._result else "FAILED_STATUS"

    def is_completed(self) -> bool:
        return True

    def _wait(self) -> None:
        return None

    def _succeeded(self) -> bool:
        return self._result

    def when_completed(self, callback: CompletionCallback) -> None:
        _invoke(callback, self._result)


SUCCEEDED_STATUS: RunStatus = _CompletedStatus(True)
FAILED_STATUS: RunStatus = _CompletedStatus(False)


class StatefulStatus(RunStatus):
    """Status completed explicitly by the code that owns it.

    Starts out successful; `set_failed` or `set_failed_with` turn it failed.
    Neither may be called after `set_completed`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._failed = False
        self._exception: BaseException | None = None
        self._callbacks: list[CompletionCallback] = []

    def __repr__(self) -> str:
        state = "completed" if self.is_completed() else "running"
        return f"StatefulStatus({state}, failed={self._failed})"

    @property
    def unreported_exception(self) -> BaseException | None:
        return self._exception

    def is_completed(self) -> bool:
        return self._done.is_set()

    def _wait(self) -> None:
        self._done.wait()

    def _succeeded(self) -> bool:
        return not self._failed

    def set_failed(self) -> None:
        with self._lock:
            if self._done.is_set():
                raise RuntimeError("status is already completed")
            self._failed = True

    def set_failed_with(self, exc: BaseException) -> None:
        with self._lock:
            if self._done.is_set():
                raise RuntimeError("status is already completed")
            self._failed = True
            self._exception = exc

    def set_completed(self) -> None:
        """Complete the status and run pending callbacks on this thread.

        Completing twice has no further effect.
        """
        with self._lock:
            if self._done.is_set():
                return
            self._done.set()
            callbacks, self._callbacks = self._callbacks, []
            succeeded = not self._failed

        for callback in callbacks:
            _invoke(callback, succeeded)

    def when_completed(self, callback: CompletionCallback) -> None:
        with self._lock:
            if not self._done.is_set():
                self._callbacks.append(callback)
                return
            succeeded = not self._failed
        _invoke(callback, succeeded)


class CompositeStatus(RunStatus):
    """Status that completes when all of its child statuses complete."""

    def __init__(self, statuses: Iterable[RunStatus]) -> None:
        self._statuses = list(statuses)
        self._inner = StatefulStatus()
        self._remaining = len(self._statuses)
        self._any_failed = False
        self._lock = threading.Lock()

        if not self._statuses:
            self._inner.set_completed()
        for status in self._statuses:
            status.when_completed(self._child_completed)

    def _child_completed(self, succeeded: bool) -> None:
        with self._lock:
            self._remaining -= 1
            if not succeeded:
                self._any_failed = True
            last = self._remaining == 0

        if last:
            if self._any_failed:
                if (exc := self.unreported_exception) is not None:
                    self._inner.set_failed_with(exc)
                else:
                    self._inner.set_failed()
            self._inner.set_completed()

    @property
    def unreported_exception(self) -> BaseException | None:
        for status in self._statuses:
            if (exc := status.unreported_exception) is not None:
                return exc
        return None

    def is_completed(self) -> bool:
        return self._inner.is_completed()

    def _wait(self) -> None:
        self._inner._wait()

    def _succeeded(self) -> bool:
        return self._inner._succeeded()

    def when_completed(self, callback: CompletionCallback) -> None:
        self._inner.when_completed(callback)
