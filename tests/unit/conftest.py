"""Fixtures for unit tests."""

import pytest

from spec_engine.reporters.recording import EventRecordingReporter


@pytest.fixture
def recorder() -> EventRecordingReporter:
    """Create an in-memory reporter."""
    return EventRecordingReporter()
