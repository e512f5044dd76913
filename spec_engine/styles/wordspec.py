"""WordSpec: subjects and verb scopes (`when`, `should`, ...) holding `in_` tests."""

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Any, ClassVar

from spec_engine.filtering import TagLike
from spec_engine.models.entry import ScopeNode
from spec_engine.registry import StyleGrammar
from spec_engine.suite import Suite


class WordSpec(Suite):
    """Style where each scope contributes a verb to the names nested in it.

    class StackSpec(WordSpec):
        def define(self):
            with self.when("A Stack"):
                with self.should("empty"):
                    @self.in_("be empty")
                    def _():
                        ...

    registers "A Stack when empty should be empty"; the inner scope is
    reported as "when empty".
    """

    grammar: ClassVar[StyleGrammar] = StyleGrammar(
        name="WordSpec",
        closed_messages={
            ("in", "in"): "An in clause may not appear inside another in clause.",
            ("in", "ignore"): "An ignore clause may not appear inside an in clause.",
            ("in", "subject"): (
                'A subject clause may not appear inside an "in" clause.'
            ),
            **{
                ("in", verb): f'a "{verb}" clause may not appear inside an "in" clause'
                for verb in ("when", "should", "must", "can", "which", "that")
            },
        },
    )

    @contextmanager
    def _verb_scope(self, text: str, verb: str | None) -> Iterator[ScopeNode]:
        with self.scope(text, kind=verb or "subject", child_prefix=verb) as node:
            yield node

    def subject(self, text: str) -> AbstractContextManager[ScopeNode]:
        """Scope that adds no verb to the names of its children."""
        return self._verb_scope(text, None)

    def when(self, text: str) -> AbstractContextManager[ScopeNode]:
        return self._verb_scope(text, "when")

    def should(self, text: str) -> AbstractContextManager[ScopeNode]:
        return self._verb_scope(text, "should")

    def must(self, text: str) -> AbstractContextManager[ScopeNode]:
        return self._verb_scope(text, "must")

    def can(self, text: str) -> AbstractContextManager[ScopeNode]:
        return self._verb_scope(text, "can")

    def which(self, text: str) -> AbstractContextManager[ScopeNode]:
        return self._verb_scope(text, "which")

    def that(self, text: str) -> AbstractContextManager[ScopeNode]:
        return self._verb_scope(text, "that")

    def in_[F: Callable[..., Any]](
        self, text: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._test_decorator(text, tags, kind="in")

    def ignore[F: Callable[..., Any]](
        self, text: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._test_decorator(text, tags, ignored=True, kind="ignore")
