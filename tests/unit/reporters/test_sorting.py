"""Tests for the sorting reporter."""

from spec_engine.reporters.recording import EventRecordingReporter
from spec_engine.reporters.sorting import SortingReporter
from spec_engine.testing.factories import TestSucceededFactory


def test_head_slot_forwards_immediately(recorder: EventRecordingReporter) -> None:
    """Forwards events of the first open slot without buffering."""
    sorting = SortingReporter(recorder)
    slot = sorting.reserve()
    event = TestSucceededFactory.build()

    slot(event)

    assert recorder.events == [event]


def test_later_slots_wait_for_earlier_ones(recorder: EventRecordingReporter) -> None:
    """Holds events of later slots until every earlier slot completes."""
    sorting = SortingReporter(recorder)
    first, second, third = sorting.reserve(), sorting.reserve(), sorting.reserve()
    a, b, c = (TestSucceededFactory.build(test_name=n) for n in "abc")

    third(c)
    third.complete()
    second(b)
    second.complete()
    assert recorder.events == []

    first(a)
    first.complete()

    assert [e.test_name for e in recorder.events] == ["a", "b", "c"]


def test_unslotted_events_go_last(recorder: EventRecordingReporter) -> None:
    """Queues an event reported directly behind the reserved slots."""
    sorting = SortingReporter(recorder)
    slot = sorting.reserve()
    late = TestSucceededFactory.build(test_name="late")
    early = TestSucceededFactory.build(test_name="early")

    sorting(late)
    slot(early)
    slot.complete()

    assert [e.test_name for e in recorder.events] == ["early", "late"]


def test_flush_forwards_incomplete_slots(recorder: EventRecordingReporter) -> None:
    """Forwards everything still buffered on flush."""
    sorting = SortingReporter(recorder)
    first, second = sorting.reserve(), sorting.reserve()
    second(TestSucceededFactory.build(test_name="second"))

    sorting.flush()

    assert [e.test_name for e in recorder.events] == ["second"]
    assert not first.completed
