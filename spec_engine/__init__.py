"""Asynchronous registration and execution engine for behavior-driven spec suites."""

from spec_engine.errors import (
    DuplicateNameError,
    InvalidNestingError,
    NullTagError,
    RegistrationClosedError,
    SpecEngineError,
    TestCanceledError,
    TestFailedError,
    TestPendingError,
    cancel,
    fail,
    pending,
)
from spec_engine.filtering import IGNORE_TAG, Tag, TagFilter
from spec_engine.fixtures import NoArgTest, OneArgTest
from spec_engine.models.config import RunConfig
from spec_engine.models.outcome import Canceled, Failed, Ignored, Pending, Succeeded
from spec_engine.status import FAILED_STATUS, SUCCEEDED_STATUS, RunStatus
from spec_engine.styles import (
    FeatureSpec,
    FlatSpec,
    FunSpec,
    FunSuite,
    PropSpec,
    WordSpec,
)
from spec_engine.suite import Suite, run_suites

__all__ = [
    "FAILED_STATUS",
    "IGNORE_TAG",
    "SUCCEEDED_STATUS",
    "Canceled",
    "DuplicateNameError",
    "Failed",
    "FeatureSpec",
    "FlatSpec",
    "FunSpec",
    "FunSuite",
    "Ignored",
    "InvalidNestingError",
    "NoArgTest",
    "NullTagError",
    "OneArgTest",
    "Pending",
    "PropSpec",
    "RegistrationClosedError",
    "RunConfig",
    "RunStatus",
    "SpecEngineError",
    "Succeeded",
    "Suite",
    "Tag",
    "TagFilter",
    "TestCanceledError",
    "TestFailedError",
    "TestPendingError",
    "WordSpec",
    "cancel",
    "fail",
    "pending",
    "run_suites",
]
