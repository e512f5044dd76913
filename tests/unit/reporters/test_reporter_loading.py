"""Tests for reporter loading module."""

import pytest

from spec_engine.reporters.json_reporter import JsonReporter, json_manifest
from spec_engine.reporters.loading import (
    ReporterNotFoundError,
    load_reporter_manifest,
)


def test_load_reporter_manifest_returns_manifest() -> None:
    """Loads reporter manifest by key."""
    manifest = load_reporter_manifest("json")

    assert manifest is json_manifest
    assert isinstance(manifest.reporter_factory(), JsonReporter)


def test_load_reporter_manifest_raises_for_unknown_reporter() -> None:
    """Raises ReporterNotFoundError for unknown reporter key."""
    with pytest.raises(ReporterNotFoundError) as exc_info:
        load_reporter_manifest("unknown-reporter")

    assert "unknown-reporter" in str(exc_info.value)
    assert "Available reporters" in str(exc_info.value)


def test_unknown_reporter_lists_available_keys_sorted() -> None:
    """Lists the registered reporter keys alphabetically."""
    with pytest.raises(ReporterNotFoundError) as exc_info:
        load_reporter_manifest("unknown-reporter")

    assert "['json', 'logging', 'recording']" in str(exc_info.value)
