"""Tests for the suite facade."""

import logging
from typing import Any

import pytest

from spec_engine.errors import InvalidNestingError, pending
from spec_engine.fixtures import NoArgTest, OneArgTest
from spec_engine.models.config import RunConfig
from spec_engine.models.events import (
    AnyEvent,
    InfoProvided,
    SuiteStarting,
    TestStarting,
)
from spec_engine.models.outcome import Outcome
from spec_engine.reporters.recording import EventRecordingReporter
from spec_engine.styles import FeatureSpec, FunSuite


async def test_define_registers_on_construction() -> None:
    """Registers tests while the suite is constructed."""

    class Tests(FunSuite):
        def define(self) -> None:
            self.register_test("one", lambda: None)
            self.register_test("two", lambda: None, "Slow")

    suite = Tests()

    assert suite.test_names == ["one", "two"]
    assert suite.tags == {"two": frozenset({"Slow"})}
    assert suite.expected_test_count() == 2
    assert suite.expected_test_count(RunConfig(include_tags={"Slow"})) == 1


def test_registration_error_aborts_construction() -> None:
    """Propagates registration errors out of the constructor."""

    class Nested(FeatureSpec):
        def define(self) -> None:
            with self.feature("outer"):
                with self.feature("inner"):
                    pass

    with pytest.raises(InvalidNestingError, match="Feature clauses cannot be nested."):
        Nested()


def test_suite_identity_defaults() -> None:
    """Derives the suite name and id from the class."""

    class Named(FunSuite):
        pass

    suite = Named()
    custom = Named(suite_id="custom.id", name="Custom")

    assert suite.suite_name == "Named"
    assert suite.suite_id.endswith("Named")
    assert (custom.suite_id, custom.suite_name) == ("custom.id", "Custom")


async def test_run_async_reports_suite_events(
    recorder: EventRecordingReporter,
) -> None:
    """Brackets the run with SuiteStarting and SuiteCompleted."""

    class Tests(FunSuite):
        def define(self) -> None:
            self.register_test("one", lambda: None)

    status = await Tests(suite_id="ids.Tests").run_async(recorder)

    assert status.succeeds() is True
    assert recorder.kinds[0] == "SuiteStarting"
    assert recorder.kinds[-1] == "SuiteCompleted"
    assert {e.suite_id for e in recorder.events} == {"ids.Tests"}
    assert [e.ordinal for e in recorder.events] == sorted(
        e.ordinal for e in recorder.events
    )


def test_run_returns_status_immediately(recorder: EventRecordingReporter) -> None:
    """Runs on a worker thread and completes the returned status."""

    class Tests(FunSuite):
        def define(self) -> None:
            self.register_test("passes", lambda: None)
            self.register_test("fails", lambda: 1 / 0)

    status = Tests().run(recorder)
    status.wait_until_completed()

    assert status.succeeds() is False
    assert len(recorder.test_failed_events) == 1


async def test_run_status_can_be_awaited(recorder: EventRecordingReporter) -> None:
    """Lets a coroutine await the status of a threaded run."""

    class Tests(FunSuite):
        def define(self) -> None:
            self.register_test("passes", lambda: None)

    status = Tests().run(recorder)

    assert await status.wait() is True


async def test_with_fixture_override_wraps_tests(
    recorder: EventRecordingReporter,
) -> None:
    """Runs setup and teardown around each test."""
    calls: list[str] = []

    class Tests(FunSuite):
        async def with_fixture(self, test: NoArgTest) -> Outcome:
            calls.append(f"setup {test.name}")
            try:
                return await test()
            finally:
                calls.append(f"teardown {test.name}")

        def define(self) -> None:
            self.register_test("one", lambda: calls.append("body"))

    await Tests().run_async(recorder)

    assert calls == ["setup one", "body", "teardown one"]


async def test_with_fixture_arg_supplies_value(
    recorder: EventRecordingReporter,
) -> None:
    """Passes the fixture value and config map to one-arg bodies."""
    seen: list[Any] = []

    class Tests(FunSuite):
        async def with_fixture_arg(self, test: OneArgTest) -> Outcome:
            return await test(test.config_map["db"])

        def define(self) -> None:
            self.register_test("uses db", lambda db: seen.append(db))

    await Tests().run_async(recorder, RunConfig(config_map={"db": "sqlite"}))

    assert seen == ["sqlite"]
    assert len(recorder.test_succeeded_events) == 1


async def test_missing_fixture_arg_override_fails_test(
    recorder: EventRecordingReporter,
) -> None:
    """Fails one-arg tests when the suite supplies no fixture."""

    class Tests(FunSuite):
        def define(self) -> None:
            self.register_test("needs fixture", lambda fixture: None)

    await Tests().run_async(recorder)

    (failed,) = recorder.test_failed_events
    assert failed.throwable.class_name == "NotImplementedError"


async def test_diagnostic_during_run_outside_test_is_top_level() -> None:
    """Emits a diagnostic made during the run but outside any test at once."""
    events: list[AnyEvent] = []

    class Tests(FunSuite):
        def define(self) -> None:
            self.register_test("one", lambda: None)

    suite = Tests()

    def reporter(event: AnyEvent) -> None:
        events.append(event)
        if isinstance(event, SuiteStarting):
            suite.info("run started")

    await suite.run_async(reporter)

    assert [e.kind for e in events[:2]] == ["SuiteStarting", "InfoProvided"]
    info = events[1]
    assert isinstance(info, InfoProvided)
    assert info.test_name is None


async def test_diagnostic_after_run_is_logged(
    recorder: EventRecordingReporter, caplog: pytest.LogCaptureFixture
) -> None:
    """Logs diagnostics made after the run instead of reporting them."""
    suite = FunSuite()
    await suite.run_async(recorder)

    with caplog.at_level(logging.INFO):
        suite.alert("too late")

    assert recorder.alert_provided_events == []
    assert "alert provided outside of a run: too late" in caplog.text


async def test_pending_scope_reports_scope_pending(
    recorder: EventRecordingReporter,
) -> None:
    """Reports ScopePending for a scope whose body signaled pending."""

    class Tests(FunSuite):
        def define(self) -> None:
            with self.scope("not ready"):
                self.register_test("first", lambda: None)
                pending()

    await Tests().run_async(recorder)

    assert recorder.kinds == [
        "SuiteStarting",
        "ScopeOpened",
        "TestStarting",
        "TestSucceeded",
        "ScopePending",
        "SuiteCompleted",
    ]


async def test_run_only_named_test(recorder: EventRecordingReporter) -> None:
    """Runs only the tests named in the config."""

    class Tests(FunSuite):
        def define(self) -> None:
            self.register_test("one", lambda: None)
            self.register_test("two", lambda: None)

    await Tests().run_async(recorder, RunConfig(test_names={"two"}))

    assert [e.test_name for e in recorder.of_type(TestStarting)] == ["two"]
