"""Reporters: sinks for the lifecycle events of suite runs."""

from spec_engine.reporters.base import DispatchReporter, EventEmitter, Reporter
from spec_engine.reporters.json_reporter import JsonReporter
from spec_engine.reporters.log_reporter import LoggingReporter
from spec_engine.reporters.recording import EventRecordingReporter
from spec_engine.reporters.sorting import SortingReporter

__all__ = [
    "DispatchReporter",
    "EventEmitter",
    "EventRecordingReporter",
    "JsonReporter",
    "LoggingReporter",
    "Reporter",
    "SortingReporter",
]
