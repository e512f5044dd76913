"""PropSpec: flat `property` declarations."""

from collections.abc import Callable
from typing import Any, ClassVar

from spec_engine.filtering import TagLike
from spec_engine.registry import StyleGrammar
from spec_engine.suite import Suite


class PropSpec(Suite):
    """Style for flat, table-like property checks.

    class SquareSpec(PropSpec):
        def define(self):
            @self.property("squares are never negative")
            def _():
                for n in range(-10, 10):
                    assert n * n >= 0
    """

    grammar: ClassVar[StyleGrammar] = StyleGrammar(
        name="PropSpec",
        closed_messages={
            ("property", "property"): (
                "A property clause may not appear inside another property clause."
            ),
            ("property", "ignore"): (
                "An ignore clause may not appear inside a property clause."
            ),
        },
    )

    def property[F: Callable[..., Any]](
        self, test_name: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._test_decorator(test_name, tags, kind="property")

    def ignore[F: Callable[..., Any]](
        self, test_name: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._test_decorator(test_name, tags, ignored=True, kind="ignore")
