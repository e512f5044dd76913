"""Tests for the WordSpec style."""

from spec_engine.reporters.recording import EventRecordingReporter
from spec_engine.styles import WordSpec


class StackSpec(WordSpec):
    """Stack behavior phrased with verb scopes."""

    def define(self) -> None:
        with self.when("A Stack"):
            with self.should("empty"):

                @self.in_("be empty")
                def _empty() -> None:
                    pass

            with self.must("full"):

                @self.ignore("refuse a push")
                def _refuse() -> None:
                    pass

        with self.subject("A Queue"):
            with self.which("is new"):

                @self.in_("has no items")
                def _new() -> None:
                    pass


async def test_names_include_scope_verbs() -> None:
    """Adds each scope's verb between its text and its children."""
    assert StackSpec().test_names == [
        "A Stack when empty should be empty",
        "A Stack when full must refuse a push",
        "A Queue is new which has no items",
    ]


async def test_reports_verb_prefixed_texts(recorder: EventRecordingReporter) -> None:
    """Reports nested scopes and tests prefixed by their parent's verb."""
    await StackSpec().run_async(recorder)

    assert [e.message for e in recorder.scope_opened_events] == [
        "A Stack",
        "when empty",
        "when full",
        "A Queue",
        "is new",
    ]
    assert [e.test_text for e in recorder.test_starting_events] == [
        "should be empty",
        "which has no items",
    ]
    assert recorder.test_ignored_events[0].test_text == "must refuse a push"


async def test_in_inside_in_fails(recorder: EventRecordingReporter) -> None:
    """Fails an in clause that registers another in or ignore clause."""

    class Nested(WordSpec):
        def define(self) -> None:
            with self.can("A Stack"):

                @self.in_("nest in")
                def _in() -> None:
                    self.in_("inner")(lambda: None)

                @self.in_("nest ignore")
                def _ignore() -> None:
                    self.ignore("inner")(lambda: None)

    await Nested().run_async(recorder)

    assert [e.message for e in recorder.test_failed_events] == [
        "An in clause may not appear inside another in clause.",
        "An ignore clause may not appear inside an in clause.",
    ]


async def test_verb_scope_inside_in_fails(recorder: EventRecordingReporter) -> None:
    """Names the verb of a scope opened from a running in clause."""

    class Nested(WordSpec):
        def define(self) -> None:
            with self.subject("A Stack"):

                @self.in_("opens should")
                def _should() -> None:
                    with self.should("in the wrong place"):
                        self.in_("never runs")(lambda: None)

                @self.in_("opens when")
                def _when() -> None:
                    with self.when("in the wrong place"):
                        pass

    spec = Nested()
    await spec.run_async(recorder)

    assert [e.message for e in recorder.test_failed_events] == [
        'a "should" clause may not appear inside an "in" clause',
        'a "when" clause may not appear inside an "in" clause',
    ]
    assert spec.test_names == ["A Stack opens should", "A Stack opens when"]
