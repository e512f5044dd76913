"""Tag-based selection of the tests that run in one suite run."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from pydantic import Field

from spec_engine.models.base import Model
from spec_engine.models.entry import TestEntry

IGNORE_TAG = "spec_engine.Ignore"


@dataclass(frozen=True)
class Tag:
    """Symbolic tag; its `name` is the string matched by filters."""

    name: str

    def __str__(self) -> str:
        return self.name


type TagLike = str | Tag


@dataclass(frozen=True, kw_only=True)
class Selection:
    """Tests to run and ignored tests to report, both in registration order."""

    to_run: Sequence[TestEntry]
    to_report_ignored: Sequence[TestEntry]


class TagFilter(Model):
    """Include/exclude tag filter.

    With `include_tags` set, only tests carrying at least one of those tags
    are considered. Tests carrying any exclude tag are dropped silently,
    except for the ignore tag: tests carrying it are reported as ignored
    (without running) as long as the ignore tag itself is excluded.
    """

    include_tags: frozenset[str] | None = Field(
        default=None, description="Run only tests with one of these tags"
    )
    exclude_tags: frozenset[str] = Field(
        default=frozenset({IGNORE_TAG}),
        description="Drop tests with any of these tags",
    )
    test_names: frozenset[str] | None = Field(
        default=None, description="Restrict the run to these test names"
    )

    def apply(self, entry: TestEntry) -> tuple[bool, bool]:
        """Return `(filtered_out, ignored)` for one test.

        A filtered-out test emits no event at all, so `ignored` is only ever
        True for tests that are not filtered out.
        """
        if self.test_names is not None and entry.name not in self.test_names:
            return True, False

        if self.include_tags is not None and not (entry.tags & self.include_tags):
            return True, False

        if entry.tags & (self.exclude_tags - {IGNORE_TAG}):
            return True, False

        ignored = IGNORE_TAG in entry.tags and IGNORE_TAG in self.exclude_tags
        return False, ignored

    def run_only(self, names: Iterable[str]) -> "TagFilter":
        """Return a copy of this filter restricted to the named tests."""
        return self.model_copy(update={"test_names": frozenset(names)})

    def selected(self, entries: Iterable[TestEntry]) -> Selection:
        """Split registered tests into those that run and those reported ignored."""
        to_run: list[TestEntry] = []
        to_report_ignored: list[TestEntry] = []
        for entry in entries:
            filtered_out, ignored = self.apply(entry)
            if filtered_out:
                continue
            if ignored:
                to_report_ignored.append(entry)
            else:
                to_run.append(entry)
        return Selection(to_run=to_run, to_report_ignored=to_report_ignored)

    def expected_test_count(self, entries: Iterable[TestEntry]) -> int:
        """Count the tests that would run, not counting ignored ones."""
        return len(self.selected(entries).to_run)
