"""Registration of tests and scopes while a suite is being constructed."""

import inspect
import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from spec_engine.errors import (
    DuplicateNameError,
    InvalidNestingError,
    NullTagError,
    RegistrationClosedError,
    TestPendingError,
    caller_location,
)
from spec_engine.filtering import IGNORE_TAG, TagFilter, TagLike
from spec_engine.informing import current_test
from spec_engine.models.entry import (
    DiagnosticKind,
    DiagnosticLeaf,
    ScopeNode,
    TestEntry,
)
from spec_engine.models.events import Location

log = logging.getLogger(__name__)

NESTED_TEST_MESSAGE = "Test cannot be nested inside another test."
CLOSED_MESSAGE = "Registration is closed: a run of this suite has already started."


class RegistrationPhase(Enum):
    """Whether a registry still accepts tests and scopes."""

    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True, kw_only=True)
class StyleGrammar:
    """Per-style nesting rules.

    `forbidden_nesting` maps `(enclosing scope kind, new clause kind)` to the
    error raised at registration time. `closed_messages` maps `(running test
    kind, new clause kind)` to the message used when a test body tries to
    register something.
    """

    name: str
    forbidden_nesting: Mapping[tuple[str, str], str] = field(default_factory=dict)
    closed_messages: Mapping[tuple[str, str], str] = field(default_factory=dict)

    def nesting_error(self, enclosing_kind: str, clause_kind: str) -> str | None:
        return self.forbidden_nesting.get((enclosing_kind, clause_kind))

    def closed_message(self, running_kind: str | None, clause_kind: str) -> str:
        if running_kind is None:
            return CLOSED_MESSAGE
        return self.closed_messages.get(
            (running_kind, clause_kind), NESTED_TEST_MESSAGE
        )


DEFAULT_GRAMMAR = StyleGrammar(name="default")


def normalize_tags(tags: Iterable[TagLike | None]) -> frozenset[str]:
    """Convert tags to their names, rejecting None and empty entries."""
    names: set[str] = set()
    for tag in tags:
        name = tag if isinstance(tag, str) or tag is None else tag.name
        if not name:
            raise NullTagError()
        names.add(name)
    return frozenset(names)


def takes_fixture(body: Callable[..., Any]) -> bool:
    """Return True when `body` expects the fixture value as its one argument.

    Raises:
        ValueError: If the body requires more than one argument.

    """
    try:
        signature = inspect.signature(body)
    except (TypeError, ValueError):
        return False

    required = [
        p
        for p in signature.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        and p.default is p.empty
    ]
    if len(required) > 1:
        raise ValueError(
            f"Test body {body!r} takes {len(required)} arguments; "
            "expected none or one fixture argument"
        )
    return len(required) == 1


class TestRegistry:
    """Ordered tree of the scopes and tests of one suite instance.

    The registry is written only by the constructing call stack while its
    phase is OPEN. `close()` flips it to CLOSED once, when a run starts;
    from then on it is read-only and may be shared by concurrent tests.
    """

    __test__ = False

    def __init__(self, grammar: StyleGrammar = DEFAULT_GRAMMAR) -> None:
        self.grammar = grammar
        self.root = ScopeNode(text="", kind="root")
        self._current = self.root
        self._entries: dict[str, TestEntry] = {}
        self._phase = RegistrationPhase.OPEN
        self._lock = threading.RLock()

    @property
    def phase(self) -> RegistrationPhase:
        return self._phase

    @property
    def is_open(self) -> bool:
        return self._phase is RegistrationPhase.OPEN

    @property
    def current_scope(self) -> ScopeNode:
        return self._current

    def close(self) -> None:
        """Stop accepting registrations. Calling it again has no effect."""
        with self._lock:
            if self._phase is RegistrationPhase.OPEN:
                log.debug("Registration closed with %d test(s)", len(self._entries))
            self._phase = RegistrationPhase.CLOSED

    def _check_open(self, clause_kind: str) -> None:
        if self._phase is RegistrationPhase.CLOSED:
            running = current_test()
            running_kind = running.entry.kind if running is not None else None
            raise RegistrationClosedError(
                self.grammar.closed_message(running_kind, clause_kind)
            )

    def _check_nesting(self, clause_kind: str) -> None:
        if (
            message := self.grammar.nesting_error(self._current.kind, clause_kind)
        ) is not None:
            raise InvalidNestingError(message)

    def register(
        self,
        text: str,
        body: Callable[..., Any],
        tags: Iterable[TagLike | None] = (),
        *,
        ignored: bool = False,
        kind: str = "test",
        location: Location | None = None,
    ) -> str:
        """Register a test under the current scope and return its full name.

        Raises:
            RegistrationClosedError: If a run has already started.
            NullTagError: If a tag is None or empty.
            InvalidNestingError: If the style forbids this clause here.
            DuplicateNameError: If the full name is already registered.

        """
        if text is None:
            raise TypeError("test text must not be None")
        with self._lock:
            self._check_open(kind)
            tag_names = normalize_tags(tags)
            self._check_nesting(kind)

            prefix = self._current.name_prefix()
            name = f"{prefix} {text.strip()}".strip()
            if name in self._entries:
                raise DuplicateNameError(name)

            if ignored:
                tag_names |= {IGNORE_TAG}

            entry = TestEntry(
                name=name,
                text=text.strip(),
                kind=kind,
                body=body,
                takes_fixture=takes_fixture(body),
                tags=tag_names,
                ignored=ignored,
                parent=self._current,
                location=location or caller_location(),
            )
            self._entries[name] = entry
            self._current.children.append(entry)

        log.debug("Registered %s %r", kind, name)
        return name

    @contextmanager
    def scope(
        self,
        text: str,
        *,
        kind: str = "scope",
        child_prefix: str | None = None,
        location: Location | None = None,
    ) -> Iterator[ScopeNode]:
        """Open a scope for the duration of a `with` block.

        A `pending()` call inside the block marks the scope pending instead
        of propagating.
        """
        if text is None:
            raise TypeError("scope text must not be None")

        with self._lock:
            self._check_open(kind)
            self._check_nesting(kind)
            outer = self._current
            node = ScopeNode(
                text=text.strip(),
                kind=kind,
                parent=outer,
                child_prefix=child_prefix,
                location=location or caller_location(),
            )
            outer.children.append(node)
            self._current = node

        try:
            yield node
        except TestPendingError:
            node.pending = True
        finally:
            self._current = outer

    def register_scope(
        self,
        text: str,
        body: Callable[[], object],
        *,
        kind: str = "scope",
        child_prefix: str | None = None,
        location: Location | None = None,
    ) -> ScopeNode:
        """Open a scope, run `body` to register its contents, and close it."""
        with self.scope(
            text, kind=kind, child_prefix=child_prefix, location=location
        ) as node:
            body()
        return node

    def enter_flat_scope(
        self,
        text: str,
        *,
        kind: str = "scope",
        location: Location | None = None,
    ) -> ScopeNode:
        """Open a root-level scope that stays current until the next one.

        Used by styles whose subject clauses have no body (`behavior_of`).
        """
        with self._lock:
            self._check_open(kind)
            node = ScopeNode(
                text=text.strip(),
                kind=kind,
                parent=self.root,
                location=location or caller_location(),
            )
            self.root.children.append(node)
            self._current = node
        return node

    def record_diagnostic(
        self, kind: DiagnosticKind, message: str, location: Location | None
    ) -> None:
        """Record a diagnostic made during registration, to be reported in place."""
        with self._lock:
            self._current.children.append(
                DiagnosticLeaf(
                    kind=kind,
                    message=message,
                    parent=self._current,
                    location=location,
                )
            )

    @property
    def test_names(self) -> Sequence[str]:
        """Full test names in registration order."""
        return list(self._entries)

    @property
    def entries(self) -> Sequence[TestEntry]:
        return list(self._entries.values())

    def get(self, name: str) -> TestEntry:
        try:
            return self._entries[name]
        except KeyError:
            raise KeyError(f"No test in this suite has name: {name!r}") from None

    def tags_by_test(self) -> Mapping[str, frozenset[str]]:
        """Tags of every tagged test; untagged tests are left out."""
        return {name: e.tags for name, e in self._entries.items() if e.tags}

    def test_scopes(self, name: str) -> tuple[str, ...]:
        return self.get(name).scopes

    def test_text(self, name: str) -> str:
        return self.get(name).text

    def expected_test_count(self, tag_filter: TagFilter) -> int:
        return tag_filter.expected_test_count(self._entries.values())
