"""Execution of the selected tests of one suite run."""

import asyncio
import logging
import time
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from spec_engine.errors import FATAL_ERRORS, throwable_info
from spec_engine.filtering import TagFilter
from spec_engine.fixtures import FixtureBinder
from spec_engine.informing import Informer, TestContext, enter_test, exit_test
from spec_engine.models.config import RunConfig
from spec_engine.models.entry import DiagnosticLeaf, ScopeNode, TestEntry
from spec_engine.models.events import (
    AnyEvent,
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
from spec_engine.models.outcome import Canceled, Failed, Outcome, Pending, Succeeded
from spec_engine.registry import TestRegistry
from spec_engine.reporters.base import EventEmitter
from spec_engine.reporters.sorting import SortingReporter
from spec_engine.status import CompositeStatus, RunStatus, StatefulStatus

log = logging.getLogger(__name__)

type Sink = Callable[[AnyEvent], None]


class TestState(Enum):
    """Lifecycle of one test within a run."""

    __test__ = False

    PENDING = "pending"
    STARTING = "starting"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"
    PENDING_OUTCOME = "pending_outcome"
    IGNORED = "ignored"


OUTCOME_STATES: Mapping[type, TestState] = {
    Succeeded: TestState.SUCCEEDED,
    Failed: TestState.FAILED,
    Canceled: TestState.CANCELED,
    Pending: TestState.PENDING_OUTCOME,
}


@dataclass(frozen=True, kw_only=True)
class _OpenScope:
    node: ScopeNode


@dataclass(frozen=True, kw_only=True)
class _CloseScope:
    node: ScopeNode


@dataclass(frozen=True, kw_only=True)
class _RunTest:
    entry: TestEntry


@dataclass(frozen=True, kw_only=True)
class _ReportIgnored:
    entry: TestEntry


@dataclass(frozen=True, kw_only=True)
class _Diagnostic:
    leaf: DiagnosticLeaf


type WorkItem = _OpenScope | _CloseScope | _RunTest | _ReportIgnored | _Diagnostic


def plan(root: ScopeNode, tag_filter: TagFilter) -> Sequence[WorkItem]:
    """Flatten the registration tree into the ordered list of things to do.

    The tree is walked with an explicit stack, so deep scope nesting does not
    consume Python stack frames.
    """
    items: list[WorkItem] = []
    stack: list[Iterator[object] | _CloseScope] = [iter(root.children)]
    while stack:
        top = stack[-1]
        if isinstance(top, _CloseScope):
            stack.pop()
            items.append(top)
            continue
        node = next(top, None)
        if node is None:
            stack.pop()
        elif isinstance(node, ScopeNode):
            items.append(_OpenScope(node=node))
            stack.append(_CloseScope(node=node))
            stack.append(iter(node.children))
        elif isinstance(node, TestEntry):
            filtered_out, ignored = tag_filter.apply(node)
            if not filtered_out:
                items.append(
                    _ReportIgnored(entry=node) if ignored else _RunTest(entry=node)
                )
        elif isinstance(node, DiagnosticLeaf):
            items.append(_Diagnostic(leaf=node))
    return items


class ExecutionScheduler:
    """Runs the planned work items of one suite run and reports every transition.

    In the default serial mode, tests run one at a time in registration order
    and each test's awaitables resolve fully before the next test starts. In
    parallel mode, up to `config.max_concurrency` tests run at once and the
    narrative is re-ordered through a `SortingReporter`.

    `status` is available as soon as the scheduler is created; it completes
    once every planned test reached a terminal outcome and the suite
    completion (or abort) has been reported.
    """

    def __init__(
        self,
        *,
        registry: TestRegistry,
        binder: FixtureBinder,
        emitter: EventEmitter,
        informer: Informer,
        config: RunConfig,
    ) -> None:
        self._registry = registry
        self._binder = binder
        self._emitter = emitter
        self._informer = informer
        self._config = config

        self.items = plan(registry.root, config.filter)
        self.states: dict[str, TestState] = {
            item.entry.name: TestState.PENDING
            for item in self.items
            if isinstance(item, _RunTest | _ReportIgnored)
        }
        self._test_statuses = {
            item.entry.name: StatefulStatus()
            for item in self.items
            if isinstance(item, _RunTest)
        }
        self._suite_status = StatefulStatus()
        self.status: RunStatus = CompositeStatus(
            [*self._test_statuses.values(), self._suite_status]
        )
        self._stop_requested = False

    @property
    def emitter(self) -> EventEmitter:
        return self._emitter

    async def run(self) -> RunStatus:
        """Execute the plan.

        Raises:
            BaseException: A fatal error from a test body, after SuiteAborted
                has been reported and the status completed.

        """
        started = time.monotonic()
        self._emitter.emit(SuiteStarting)
        log.info(
            "Running %d test(s) of %s (%s)",
            len(self._test_statuses),
            self._emitter.suite_name,
            "parallel" if self._config.parallel else "serial",
        )

        try:
            if self._config.parallel:
                await self._run_parallel()
            else:
                await self._run_serial()
        except BaseException as exc:
            self._abort(exc, started)
            raise

        self._emitter.emit(SuiteCompleted, duration_ms=_elapsed_ms(started))
        self._finish_skipped()
        self._suite_status.set_completed()
        log.info("Completed %s", self._emitter.suite_name)
        return self.status

    async def _run_serial(self) -> None:
        sink = self._emitter.reporter
        for item in self.items:
            if isinstance(item, _RunTest):
                if self._stop_requested:
                    continue
                await self._run_test(item.entry, sink)
            else:
                self._report_item(item, sink)

    async def _run_parallel(self) -> None:
        sorting = SortingReporter(self._emitter.reporter)
        semaphore = asyncio.Semaphore(self._config.max_concurrency)
        tasks: list[asyncio.Task[None]] = []
        fatal: list[BaseException] = []

        async def run_bounded(entry: TestEntry, sink: Sink) -> None:
            async with semaphore:
                if self._stop_requested:
                    return
                try:
                    await self._run_test(entry, sink)
                except FATAL_ERRORS as exc:
                    # SystemExit and KeyboardInterrupt must not leave a child
                    # task, or the event loop itself stops with them.
                    fatal.append(exc)
                    self._stop_requested = True
                    current = asyncio.current_task()
                    for task in tasks:
                        if task is not current:
                            task.cancel()

        for item in self.items:
            slot = sorting.reserve()
            if isinstance(item, _RunTest):
                task = asyncio.create_task(run_bounded(item.entry, slot))
                task.add_done_callback(lambda _, slot=slot: slot.complete())
                tasks.append(task)
            else:
                self._report_item(item, slot)
                slot.complete()

        try:
            results = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            sorting.flush()

        if fatal:
            raise fatal[0]
        for result in results:
            if isinstance(result, BaseException):
                raise result

    def _report_item(self, item: WorkItem, sink: Sink) -> None:
        make = self._emitter.make
        match item:
            case _OpenScope(node=node):
                sink(
                    make(
                        ScopeOpened,
                        message=node.display_text(),
                        location=node.location,
                    )
                )
            case _CloseScope(node=node):
                sink(
                    make(
                        ScopePending if node.pending else ScopeClosed,
                        message=node.display_text(),
                        location=node.location,
                    )
                )
            case _ReportIgnored(entry=entry):
                self.states[entry.name] = TestState.IGNORED
                sink(
                    make(
                        TestIgnored,
                        test_name=entry.name,
                        test_text=entry.display_text,
                        location=entry.location,
                    )
                )
            case _Diagnostic(leaf=leaf):
                sink(
                    self._emitter.diagnostic(
                        leaf.kind, leaf.message, location=leaf.location
                    )
                )
            case _RunTest():  # pragma: no cover
                raise TypeError("tests are run, not reported")

    async def _run_test(self, entry: TestEntry, sink: Sink) -> None:
        make = self._emitter.make
        name = entry.name
        started = time.monotonic()

        self.states[name] = TestState.STARTING
        sink(
            make(
                TestStarting,
                test_name=name,
                test_text=entry.display_text,
                location=entry.location,
            )
        )

        context = TestContext(entry=entry, informer=self._informer)
        token = enter_test(context)
        self.states[name] = TestState.RUNNING
        log.debug("Test starting: %s", name)
        try:
            outcome = await self._binder.bind(entry)()
        finally:
            exit_test(token)

        self.states[name] = OUTCOME_STATES[type(outcome)]
        sink(self._terminal_event(entry, outcome, context, _elapsed_ms(started)))
        log.debug("Test %s: %s", outcome.status, name)

        status = self._test_statuses[name]
        if isinstance(outcome, Failed):
            status.set_failed()
            if self._config.stop_on_failure:
                self._stop_requested = True
        status.set_completed()

    def _terminal_event(
        self,
        entry: TestEntry,
        outcome: Outcome,
        context: TestContext,
        duration_ms: int,
    ) -> AnyEvent:
        fields: dict[str, object] = {
            "test_name": entry.name,
            "test_text": entry.display_text,
            "location": entry.location,
            "duration_ms": duration_ms,
            "recorded_events": tuple(context.recorded),
        }
        make = self._emitter.make
        match outcome:
            case Succeeded():
                return make(TestSucceeded, **fields)
            case Pending(reason=reason):
                return make(TestPending, reason=reason, **fields)
            case Failed(cause=cause, throwable=throwable):
                return make(
                    TestFailed,
                    message=throwable.message or throwable.class_name,
                    throwable=throwable,
                    cause=cause,
                    **fields,
                )
            case Canceled(cause=cause, throwable=throwable):
                return make(
                    TestCanceled,
                    message=throwable.message or throwable.class_name,
                    throwable=throwable,
                    cause=cause,
                    **fields,
                )
        raise TypeError(f"Unexpected outcome {outcome!r} for {entry.name!r}")

    def _finish_skipped(self) -> None:
        """Complete the statuses of tests that never finished (stop or abort)."""
        for name, status in self._test_statuses.items():
            if not status.is_completed():
                log.info("Test did not finish: %s", name)
                status.set_completed()

    def _abort(self, exc: BaseException, started: float) -> None:
        log.error("Suite %s aborted", self._emitter.suite_name, exc_info=exc)
        self._emitter.emit(
            SuiteAborted,
            message=str(exc) or type(exc).__name__,
            throwable=throwable_info(exc),
            cause=exc,
            duration_ms=_elapsed_ms(started),
        )
        self._finish_skipped()
        self._suite_status.set_failed_with(exc)
        self._suite_status.set_completed()


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
