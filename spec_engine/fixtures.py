"""Fixture binding: wraps each test body in the suite's fixture hooks.

A body declared without parameters runs through `with_fixture(NoArgTest)`;
a body declared with one parameter runs through `with_fixture_arg(OneArgTest)`,
which must supply the fixture value. The choice is made from the declared
arity when the test is registered, never from runtime behavior.
"""

import asyncio
import concurrent.futures
import contextvars
import functools
import inspect
from collections.abc import Awaitable, Callable, Mapping
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Any, Protocol

from spec_engine.errors import classify
from spec_engine.models.entry import TestEntry
from spec_engine.models.outcome import RUN_OUTCOME_TYPES, Outcome, Succeeded

type BoundTest = Callable[[], Awaitable[Outcome]]


@dataclass(frozen=True, kw_only=True)
class TestData:
    """What a fixture hook may know about the test it wraps."""

    __test__ = False

    name: str
    text: str
    tags: frozenset[str]
    scopes: tuple[str, ...]
    config_map: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class NoArgTest(TestData):
    """A test ready to run; `await test()` runs the body once."""

    _run: Callable[[], Awaitable[Outcome]] = field(repr=False)

    async def __call__(self) -> Outcome:
        return await self._run()


@dataclass(frozen=True, kw_only=True)
class OneArgTest(TestData):
    """A test awaiting its fixture; `await test(fixture)` runs the body once."""

    _run: Callable[[Any], Awaitable[Outcome]] = field(repr=False)

    async def __call__(self, fixture: Any) -> Outcome:
        return await self._run(fixture)

    def to_no_arg_test(self, fixture: Any) -> NoArgTest:
        """Bind `fixture` so the test can be passed to `with_fixture`."""
        return NoArgTest(
            name=self.name,
            text=self.text,
            tags=self.tags,
            scopes=self.scopes,
            config_map=self.config_map,
            _run=functools.partial(self._run, fixture),
        )


class FixtureHooks(Protocol):
    """The fixture overrides a suite provides."""

    def with_fixture(self, test: NoArgTest) -> Awaitable[Outcome] | Outcome:
        """Run a test whose body takes no argument."""

    def with_fixture_arg(self, test: OneArgTest) -> Awaitable[Outcome] | Outcome:
        """Run a test whose body takes the fixture value."""


async def resolve(result: Any) -> Any:
    """Await a body result until it is a plain value.

    Coroutines, asyncio futures and `concurrent.futures.Future` objects are
    awaited; an awaitable that resolves to another awaitable is awaited again.
    """
    while True:
        if isinstance(result, concurrent.futures.Future):
            result = await asyncio.wrap_future(result)
        elif inspect.isawaitable(result):
            result = await result
        else:
            return result


def to_outcome(result: Any) -> Outcome:
    """Interpret a resolved body result: an Outcome as itself, anything else as success."""
    if isinstance(result, RUN_OUTCOME_TYPES):
        return result
    return Succeeded()


@dataclass(frozen=True, kw_only=True)
class FixtureBinder:
    """Builds the per-test invocation that runs a body inside the fixture hooks.

    When `executor` is set, synchronous bodies run on it (with the caller's
    context variables) instead of on the event loop thread.
    """

    hooks: FixtureHooks
    config_map: Mapping[str, Any] = field(default_factory=dict)
    executor: Executor | None = None

    def bind(self, entry: TestEntry) -> BoundTest:
        """Return a callable that runs `entry` once and yields its outcome."""
        if entry.takes_fixture:
            one_arg = OneArgTest(
                **self._test_data(entry),
                _run=functools.partial(self._invoke_body, entry),
            )
            return functools.partial(
                self._call_hook, self.hooks.with_fixture_arg, one_arg
            )

        no_arg = NoArgTest(
            **self._test_data(entry),
            _run=functools.partial(self._invoke_body, entry),
        )
        return functools.partial(self._call_hook, self.hooks.with_fixture, no_arg)

    def _test_data(self, entry: TestEntry) -> dict[str, Any]:
        return {
            "name": entry.name,
            "text": entry.text,
            "tags": entry.tags,
            "scopes": entry.scopes,
            "config_map": self.config_map,
        }

    async def _call_hook(
        self, hook: Callable[[Any], Awaitable[Outcome] | Outcome], test: Any
    ) -> Outcome:
        try:
            result = await resolve(hook(test))
        except BaseException as exc:
            return classify(exc)

        if not isinstance(result, RUN_OUTCOME_TYPES):
            return classify(
                TypeError(
                    f"Fixture hook for {test.name!r} returned {result!r}; "
                    "it must return the outcome of the test it ran"
                )
            )
        return result

    async def _invoke_body(self, entry: TestEntry, *args: Any) -> Outcome:
        try:
            if self.executor is not None and not inspect.iscoroutinefunction(
                entry.body
            ):
                context = contextvars.copy_context()
                result = await asyncio.get_running_loop().run_in_executor(
                    self.executor, functools.partial(context.run, entry.body, *args)
                )
            else:
                result = entry.body(*args)
            return to_outcome(await resolve(result))
        except BaseException as exc:
            return classify(exc)
