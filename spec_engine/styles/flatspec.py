"""FlatSpec: a `behavior_of` subject followed by flat `it`/`they` clauses."""

from collections.abc import Callable
from typing import Any, ClassVar, Literal

from spec_engine.errors import InvalidNestingError
from spec_engine.filtering import TagLike
from spec_engine.models.entry import ScopeNode
from spec_engine.registry import StyleGrammar
from spec_engine.suite import Suite

type Verb = Literal["should", "must", "can"]

VERBS: frozenset[str] = frozenset({"should", "must", "can"})

_SUBJECT_REQUIRED = {
    "it": "An it clause must only appear after a top level subject clause.",
    "they": "A they clause must only appear after a top level subject clause.",
    "ignore": "An it clause must only appear after a top level subject clause.",
}


class FlatSpec(Suite):
    """Style where the subject is named once and each test starts with a verb.

    class StackSpec(FlatSpec):
        def define(self):
            self.behavior_of("A Stack")

            @self.it("should", "pop values in last-in-first-out order")
            def _():
                ...

    registers "A Stack should pop values in last-in-first-out order".
    """

    grammar: ClassVar[StyleGrammar] = StyleGrammar(name="FlatSpec")

    def behavior_of(self, subject: str) -> ScopeNode:
        """Make `subject` the prefix of the tests registered after it."""
        return self.registry.enter_flat_scope(subject, kind="behavior")

    def it[F: Callable[..., Any]](
        self, verb: Verb, text: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._verb_clause("it", verb, text, tags)

    def they[F: Callable[..., Any]](
        self, verb: Verb, text: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._verb_clause("they", verb, text, tags)

    def ignore[F: Callable[..., Any]](
        self, verb: Verb, text: str, *tags: TagLike | None
    ) -> Callable[[F], F]:
        return self._verb_clause("ignore", verb, text, tags, ignored=True)

    def _verb_clause[F: Callable[..., Any]](
        self,
        kind: str,
        verb: str,
        text: str,
        tags: tuple[TagLike | None, ...],
        *,
        ignored: bool = False,
    ) -> Callable[[F], F]:
        if verb not in VERBS:
            raise ValueError(f"verb must be one of {sorted(VERBS)}, got {verb!r}")
        if self.registry.is_open and self.registry.current_scope.is_root:
            raise InvalidNestingError(_SUBJECT_REQUIRED[kind])
        return self._test_decorator(
            f"{verb} {text.strip()}", tags, ignored=ignored, kind=kind
        )
