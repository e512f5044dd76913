"""Tests for the PropSpec style."""

import pytest

from spec_engine.reporters.recording import EventRecordingReporter
from spec_engine.styles import PropSpec


@pytest.mark.parametrize("n", [0, 1, 17])
async def test_properties_run(recorder: EventRecordingReporter, n: int) -> None:
    """Runs property clauses as tests."""

    class Props(PropSpec):
        def define(self) -> None:
            @self.property("reversing twice is identity")
            def _reverse() -> None:
                items = list(range(n))
                assert items[::-1][::-1] == items

    await Props().run_async(recorder)

    assert len(recorder.test_succeeded_events) == 1


async def test_property_inside_property_fails(
    recorder: EventRecordingReporter,
) -> None:
    """Fails a property that registers another property or ignore."""

    class Nested(PropSpec):
        def define(self) -> None:
            @self.property("outer")
            def _outer() -> None:
                self.property("inner")(lambda: None)

            @self.property("ignoring")
            def _ignoring() -> None:
                self.ignore("inner")(lambda: None)

    await Nested().run_async(recorder)

    assert [e.message for e in recorder.test_failed_events] == [
        "A property clause may not appear inside another property clause.",
        "An ignore clause may not appear inside a property clause.",
    ]
