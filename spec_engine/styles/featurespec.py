"""FeatureSpec: `feature` scopes holding `scenario` tests."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, ClassVar

from spec_engine.filtering import TagLike
from spec_engine.models.entry import ScopeNode
from spec_engine.registry import StyleGrammar
from spec_engine.suite import Suite

FEATURE_PREFIX = "Feature: "
SCENARIO_PREFIX = "Scenario: "


class FeatureSpec(Suite):
    """Acceptance-test style; features cannot nest.

    Scope and test texts carry the "Feature: " and "Scenario: " prefixes,
    so a scenario's full name reads "Feature: X Scenario: Y".
    """

    grammar: ClassVar[StyleGrammar] = StyleGrammar(
        name="FeatureSpec",
        forbidden_nesting={
            ("feature", "feature"): "Feature clauses cannot be nested.",
        },
        closed_messages={
            ("scenario", "scenario"): (
                "A scenario clause may not appear inside another scenario clause."
            ),
            ("scenario", "ignore"): (
                "An ignore clause may not appear inside a scenario clause."
            ),
        },
    )

    @contextmanager
    def feature(self, description: str) -> Iterator[ScopeNode]:
        with self.scope(FEATURE_PREFIX + description.strip(), kind="feature") as node:
            yield node

    def scenario[F: Callable[..., Any]](
        self, spec_text: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._test_decorator(
            SCENARIO_PREFIX + spec_text.strip(), tags, kind="scenario"
        )

    def ignore[F: Callable[..., Any]](
        self, spec_text: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._test_decorator(
            SCENARIO_PREFIX + spec_text.strip(), tags, ignored=True, kind="ignore"
        )
