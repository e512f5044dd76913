"""Models for the terminal classification of one test execution."""

from dataclasses import dataclass, field
from typing import Literal

from pydantic import Field

from spec_engine.models.base import Model


class ThrowableInfo(Model):
    """Reportable description of the exception behind a failure or cancel."""

    class_name: str = Field(..., description="Exception class name")
    message: str = Field(default="", description="str() of the exception")
    file_name: str | None = Field(
        default=None, description="File of the innermost user frame"
    )
    line_number: int | None = Field(
        default=None, description="Line of the innermost user frame"
    )


@dataclass(frozen=True, kw_only=True)
class Succeeded:
    """The test body completed normally."""

    status: Literal["succeeded"] = "succeeded"


@dataclass(frozen=True, kw_only=True)
class Failed:
    """The test body raised a non-fatal exception."""

    cause: BaseException = field(compare=False)
    throwable: ThrowableInfo
    status: Literal["failed"] = "failed"


@dataclass(frozen=True, kw_only=True)
class Pending:
    """The test body signaled it is not implemented yet."""

    reason: str | None = None
    status: Literal["pending"] = "pending"


@dataclass(frozen=True, kw_only=True)
class Canceled:
    """The test body canceled itself."""

    cause: BaseException = field(compare=False)
    throwable: ThrowableInfo
    status: Literal["canceled"] = "canceled"


@dataclass(frozen=True, kw_only=True)
class Ignored:
    """The test was registered as ignored and reported without running."""

    status: Literal["ignored"] = "ignored"


type Outcome = Succeeded | Failed | Pending | Canceled | Ignored

OUTCOME_TYPES = (Succeeded, Failed, Pending, Canceled, Ignored)

# Outcomes a test body or fixture hook may produce; Ignored is decided by the
# filter before anything runs.
RUN_OUTCOME_TYPES = (Succeeded, Failed, Pending, Canceled)


def is_success(outcome: Outcome) -> bool:
    """Return True for outcomes that do not fail a run.

    Only failures fail a run; pending, canceled and ignored tests do not.
    """
    return not isinstance(outcome, Failed)
