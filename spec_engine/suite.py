"""Suite: the object users subclass to declare and run tests."""

import asyncio
import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from concurrent.futures import Executor
from contextlib import contextmanager
from typing import Any, ClassVar

from spec_engine.filtering import TagLike
from spec_engine.fixtures import FixtureBinder, NoArgTest, OneArgTest
from spec_engine.informing import Informer
from spec_engine.models.config import RunConfig
from spec_engine.models.entry import ScopeNode
from spec_engine.models.outcome import Outcome
from spec_engine.registry import DEFAULT_GRAMMAR, StyleGrammar, TestRegistry
from spec_engine.reporters.base import EventEmitter, Reporter
from spec_engine.scheduler import ExecutionScheduler
from spec_engine.status import RunStatus

log = logging.getLogger(__name__)


class Suite:
    """A collection of tests registered while the suite is constructed.

    Subclasses declare their tests in `define()`, which runs at the end of
    `__init__`, using the registration methods of their style. A registration
    error there aborts construction.

    Fixtures: override `with_fixture` to wrap tests whose bodies take no
    argument, and `with_fixture_arg` to supply the value for bodies that
    take one.
    """

    grammar: ClassVar[StyleGrammar] = DEFAULT_GRAMMAR

    def __init__(self, *, suite_id: str | None = None, name: str | None = None):
        cls = type(self)
        self.suite_name = name or cls.__name__
        self.suite_id = suite_id or f"{cls.__module__}.{cls.__qualname__}"
        self.registry = TestRegistry(self.grammar)
        self._informer = Informer(self.registry)
        self.define()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(suite_id={self.suite_id!r})"

    def define(self) -> None:
        """Register this suite's tests. The default registers nothing."""

    # Registration primitives shared by every style

    def register_test(
        self,
        text: str,
        body: Callable[..., Any],
        *tags: TagLike | None,
        ignored: bool = False,
        kind: str = "test",
    ) -> str:
        """Register `body` as a test and return its full name."""
        return self.registry.register(text, body, tags, ignored=ignored, kind=kind)

    def register_scope(
        self,
        text: str,
        body: Callable[[], object],
        *,
        kind: str = "scope",
        child_prefix: str | None = None,
    ) -> ScopeNode:
        """Register a scope whose contents `body` registers."""
        return self.registry.register_scope(
            text, body, kind=kind, child_prefix=child_prefix
        )

    @contextmanager
    def scope(
        self, text: str, *, kind: str = "scope", child_prefix: str | None = None
    ) -> Iterator[ScopeNode]:
        """Register a scope whose contents the `with` block registers."""
        with self.registry.scope(text, kind=kind, child_prefix=child_prefix) as node:
            yield node

    def _test_decorator[F: Callable[..., Any]](
        self,
        text: str,
        tags: Sequence[TagLike | None],
        *,
        ignored: bool = False,
        kind: str = "test",
    ) -> Callable[[F], F]:
        def decorator(body: F) -> F:
            self.registry.register(text, body, tags, ignored=ignored, kind=kind)
            return body

        return decorator

    # Diagnostics

    def info(self, message: str) -> None:
        self._informer.provide("info", message)

    def note(self, message: str) -> None:
        self._informer.provide("note", message)

    def alert(self, message: str) -> None:
        self._informer.provide("alert", message)

    def markup(self, message: str) -> None:
        self._informer.provide("markup", message)

    # Fixtures

    async def with_fixture(self, test: NoArgTest) -> Outcome:
        """Run a test whose body takes no argument. Override to add setup."""
        return await test()

    async def with_fixture_arg(self, test: OneArgTest) -> Outcome:
        """Run a test whose body takes a fixture; override to supply it."""
        raise NotImplementedError(
            f"{type(self).__name__} must override with_fixture_arg to supply "
            f"the fixture for {test.name!r}"
        )

    # Introspection

    @property
    def test_names(self) -> Sequence[str]:
        """Full test names in registration order."""
        return self.registry.test_names

    @property
    def tags(self) -> dict[str, frozenset[str]]:
        return dict(self.registry.tags_by_test())

    def expected_test_count(self, config: RunConfig | None = None) -> int:
        return self.registry.expected_test_count((config or RunConfig()).filter)

    # Running

    def _scheduler(
        self,
        reporter: Reporter,
        config: RunConfig | None,
        executor: Executor | None,
    ) -> ExecutionScheduler:
        config = config or RunConfig()
        self.registry.close()
        emitter = EventEmitter(
            suite_id=self.suite_id, suite_name=self.suite_name, reporter=reporter
        )
        binder = FixtureBinder(
            hooks=self, config_map=config.config_map, executor=executor
        )
        return ExecutionScheduler(
            registry=self.registry,
            binder=binder,
            emitter=emitter,
            informer=self._informer,
            config=config,
        )

    async def run_async(
        self,
        reporter: Reporter,
        config: RunConfig | None = None,
        *,
        executor: Executor | None = None,
    ) -> RunStatus:
        """Run the suite on the current event loop and return its completed status."""
        scheduler = self._scheduler(reporter, config, executor)
        self._informer.attach(scheduler.emitter)
        try:
            return await scheduler.run()
        finally:
            self._informer.detach()

    def run(
        self,
        reporter: Reporter,
        config: RunConfig | None = None,
        *,
        executor: Executor | None = None,
    ) -> RunStatus:
        """Start the suite on a dedicated thread and return its status at once.

        Use `status.wait_until_completed()` or `status.when_completed(...)` to
        learn the result.
        """
        scheduler = self._scheduler(reporter, config, executor)
        self._informer.attach(scheduler.emitter)

        def target() -> None:
            try:
                asyncio.run(scheduler.run())
            except BaseException as exc:
                # The status carries the exception as its unreported_exception.
                log.debug("Run of %s ended with %r", self.suite_id, exc)
            finally:
                self._informer.detach()

        threading.Thread(
            target=target, name=f"spec-engine-{self.suite_name}", daemon=True
        ).start()
        return scheduler.status


def run_suites(
    suites: Iterable[Suite],
    reporter: Reporter,
    config: RunConfig | None = None,
) -> Sequence[RunStatus]:
    """Run suites one after another on the calling thread."""

    async def run_all() -> list[RunStatus]:
        return [await suite.run_async(reporter, config) for suite in suites]

    return asyncio.run(run_all())
