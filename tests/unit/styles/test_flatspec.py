"""Tests for the FlatSpec style."""

import pytest

from spec_engine.errors import InvalidNestingError
from spec_engine.reporters.recording import EventRecordingReporter
from spec_engine.styles import FlatSpec


class StackSpec(FlatSpec):
    """Two subjects described one after the other."""

    def define(self) -> None:
        self.behavior_of("A Stack")

        @self.it("should", "pop values in last-in-first-out order")
        def _pop() -> None:
            pass

        @self.they("must", "refuse to pop when empty")
        def _refuse() -> None:
            pass

        self.behavior_of("A Queue")

        @self.ignore("can", "peek")
        def _peek() -> None:
            pass


async def test_names_join_subject_verb_and_text() -> None:
    """Composes names from the subject, the verb and the text."""
    assert StackSpec().test_names == [
        "A Stack should pop values in last-in-first-out order",
        "A Stack must refuse to pop when empty",
        "A Queue can peek",
    ]


async def test_subjects_are_flat_scopes(recorder: EventRecordingReporter) -> None:
    """Reports each subject as its own root-level scope."""
    await StackSpec().run_async(recorder)

    assert [e.message for e in recorder.scope_opened_events] == ["A Stack", "A Queue"]
    assert recorder.test_starting_events[0].test_text == (
        "should pop values in last-in-first-out order"
    )


def test_it_requires_subject() -> None:
    """Rejects it and they before any behavior_of."""

    class NoSubject(FlatSpec):
        def define(self) -> None:
            self.it("should", "work")(lambda: None)

    class NoSubjectThey(FlatSpec):
        def define(self) -> None:
            self.they("should", "work")(lambda: None)

    with pytest.raises(
        InvalidNestingError,
        match="An it clause must only appear after a top level subject clause.",
    ):
        NoSubject()
    with pytest.raises(
        InvalidNestingError,
        match="A they clause must only appear after a top level subject clause.",
    ):
        NoSubjectThey()


def test_unknown_verb_raises() -> None:
    """Rejects verbs other than should, must and can."""

    class BadVerb(FlatSpec):
        def define(self) -> None:
            self.behavior_of("A Stack")
            self.it("will", "work")(lambda: None)  # type: ignore[arg-type]

    with pytest.raises(ValueError, match="verb must be one of"):
        BadVerb()
