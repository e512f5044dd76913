"""Configuration for one suite run."""

from collections.abc import Mapping
from typing import Any

from pydantic import Field

from spec_engine.filtering import IGNORE_TAG, TagFilter
from spec_engine.models.base import Model


class RunConfig(Model):
    """How a suite run selects and schedules its tests."""

    include_tags: frozenset[str] | None = Field(
        default=None, description="Run only tests carrying one of these tags"
    )
    exclude_tags: frozenset[str] = Field(
        default=frozenset({IGNORE_TAG}),
        description="Drop tests carrying any of these tags",
    )
    test_names: frozenset[str] | None = Field(
        default=None, description="Run only the tests with these full names"
    )
    parallel: bool = Field(
        default=False, description="Let tests of one suite run concurrently"
    )
    max_concurrency: int = Field(
        default=8, ge=1, description="Upper bound on concurrently running tests"
    )
    stop_on_failure: bool = Field(
        default=False, description="Do not start further tests after a failure"
    )
    config_map: Mapping[str, Any] = Field(
        default_factory=dict, description="Values handed to fixture hooks"
    )

    @property
    def filter(self) -> TagFilter:
        return TagFilter(
            include_tags=self.include_tags,
            exclude_tags=self.exclude_tags,
            test_names=self.test_names,
        )
