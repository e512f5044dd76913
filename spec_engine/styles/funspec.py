"""FunSpec: `describe` scopes holding `it` and `they` tests."""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, ClassVar

from spec_engine.filtering import TagLike
from spec_engine.models.entry import ScopeNode
from spec_engine.registry import StyleGrammar
from spec_engine.suite import Suite

_IT_NESTED = "An it clause may not appear inside another it or they clause."
_THEY_NESTED = "A they clause may not appear inside another it or they clause."
_IGNORE_NESTED = "An ignore clause may not appear inside an it or a they clause."
_DESCRIBE_NESTED = "A describe clause may not appear inside an it or a they clause."


class FunSpec(Suite):
    """Style with nestable `describe` blocks.

    class StackSpec(FunSpec):
        def define(self):
            with self.describe("A Stack"):
                @self.it("pops values in last-in-first-out order")
                def _():
                    ...
    """

    grammar: ClassVar[StyleGrammar] = StyleGrammar(
        name="FunSpec",
        closed_messages={
            ("it", "it"): _IT_NESTED,
            ("they", "it"): _IT_NESTED,
            ("it", "they"): _THEY_NESTED,
            ("they", "they"): _THEY_NESTED,
            ("it", "ignore"): _IGNORE_NESTED,
            ("they", "ignore"): _IGNORE_NESTED,
            ("it", "describe"): _DESCRIBE_NESTED,
            ("they", "describe"): _DESCRIBE_NESTED,
        },
    )

    @contextmanager
    def describe(self, text: str) -> Iterator[ScopeNode]:
        with self.scope(text, kind="describe") as node:
            yield node

    def it[F: Callable[..., Any]](
        self, text: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._test_decorator(text, tags, kind="it")

    def they[F: Callable[..., Any]](
        self, text: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._test_decorator(text, tags, kind="they")

    def ignore[F: Callable[..., Any]](
        self, text: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._test_decorator(text, tags, ignored=True, kind="ignore")
