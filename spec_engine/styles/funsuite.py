"""FunSuite: flat `test("name")` declarations."""

from collections.abc import Callable
from typing import Any, ClassVar

from spec_engine.filtering import TagLike
from spec_engine.registry import StyleGrammar
from spec_engine.suite import Suite


class FunSuite(Suite):
    """Style with one clause per test.

    class StackSuite(FunSuite):
        def define(self):
            @self.test("pop returns the last pushed item")
            def _():
                ...
    """

    grammar: ClassVar[StyleGrammar] = StyleGrammar(
        name="FunSuite",
        closed_messages={
            ("test", "test"): "A test clause may not appear inside another test clause.",
            ("test", "ignore"): "An ignore clause may not appear inside a test clause.",
        },
    )

    def test[F: Callable[..., Any]](
        self, name: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._test_decorator(name, tags, kind="test")

    def ignore[F: Callable[..., Any]](
        self, name: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._test_decorator(name, tags, ignored=True, kind="ignore")
