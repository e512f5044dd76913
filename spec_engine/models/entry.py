"""Nodes of the registration tree: scopes, tests and diagnostic leaves."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

from spec_engine.models.events import Location

type DiagnosticKind = Literal["info", "note", "alert", "markup"]


@dataclass(eq=False, kw_only=True)
class ScopeNode:
    """A named grouping that prefixes the names of the tests nested in it.

    The root of every registry is a scope with no parent and empty text.
    """

    text: str
    kind: str
    parent: "ScopeNode | None" = None
    child_prefix: str | None = None
    location: Location | None = None
    children: list["Node"] = field(default_factory=list)
    pending: bool = False

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def name_prefix(self) -> str:
        """Return the text this scope and its ancestors add to a test name."""
        return " ".join(self.scope_texts()).strip()

    def display_text(self) -> str:
        """Return the scope text as reported, prefixed by the parent's verb."""
        if self.parent is not None and self.parent.child_prefix:
            return f"{self.parent.child_prefix.strip()} {self.text.strip()}"
        return self.text.strip()

    def scope_texts(self) -> tuple[str, ...]:
        """Return the display texts of this scope and its ancestors, outermost first."""
        texts: list[str] = []
        node: ScopeNode | None = self
        while node is not None and not node.is_root:
            own = node.text.strip()
            if node.child_prefix:
                own = f"{own} {node.child_prefix.strip()}"
            texts.append(own)
            node = node.parent
        return tuple(reversed(texts))


@dataclass(frozen=True, eq=False, kw_only=True)
class TestEntry:
    """One registered test.

    `body` takes either no argument or the fixture value; its arity is fixed
    at registration and decides which fixture path runs it.
    """

    __test__ = False

    name: str
    text: str
    kind: str
    body: Callable[..., Any] = field(repr=False)
    takes_fixture: bool
    tags: frozenset[str] = frozenset()
    ignored: bool = False
    parent: ScopeNode = field(repr=False)
    location: Location | None = None

    @property
    def display_text(self) -> str:
        """Return the test text prefixed by its scope's verb, if any."""
        if self.parent.child_prefix:
            return f"{self.parent.child_prefix.strip()} {self.text.strip()}"
        return self.text.strip()

    @property
    def scopes(self) -> tuple[str, ...]:
        return self.parent.scope_texts()


@dataclass(frozen=True, eq=False, kw_only=True)
class DiagnosticLeaf:
    """An info/note/alert/markup call made while the suite was being registered."""

    kind: DiagnosticKind
    message: str
    parent: ScopeNode = field(repr=False)
    location: Location | None = None


type Node = ScopeNode | TestEntry | DiagnosticLeaf
