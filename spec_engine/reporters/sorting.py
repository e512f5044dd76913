"""Reporter that releases events in registration order during parallel runs."""

import threading
from collections import deque
from dataclasses import dataclass, field

from spec_engine.models.events import AnyEvent
from spec_engine.reporters.base import Reporter


@dataclass(eq=False, kw_only=True)
class Slot:
    """Buffer for the events of one position in the run narrative."""

    owner: "SortingReporter" = field(repr=False)
    events: list[AnyEvent] = field(default_factory=list)
    completed: bool = False

    def __call__(self, event: AnyEvent) -> None:
        self.owner._add(self, event)

    def complete(self) -> None:
        self.owner._complete(self)


class SortingReporter:
    """Buffers events per slot and forwards whole slots in reservation order.

    Slots are reserved in registration order before tests start, so a test's
    TestStarting and terminal event reach the wrapped reporter together, and
    scope events stay nested around the tests they contain, however the tests
    interleave in time.
    """

    def __init__(self, reporter: Reporter) -> None:
        self._reporter = reporter
        self._slots: deque[Slot] = deque()
        self._lock = threading.RLock()

    def reserve(self) -> Slot:
        """Reserve the next position in the narrative."""
        with self._lock:
            slot = Slot(owner=self)
            self._slots.append(slot)
            return slot

    def __call__(self, event: AnyEvent) -> None:
        """Report an event that belongs to no reserved slot, after all reserved ones."""
        slot = self.reserve()
        slot(event)
        slot.complete()

    def flush(self) -> None:
        """Forward everything still buffered, completed or not."""
        with self._lock:
            while self._slots:
                for event in self._slots.popleft().events:
                    self._reporter(event)

    def _add(self, slot: Slot, event: AnyEvent) -> None:
        with self._lock:
            if self._slots and self._slots[0] is slot:
                self._reporter(event)
            else:
                slot.events.append(event)

    def _complete(self, slot: Slot) -> None:
        with self._lock:
            slot.completed = True
            self._release()

    def _release(self) -> None:
        while self._slots and self._slots[0].completed:
            self._slots.popleft()
            if self._slots:
                head = self._slots[0]
                for event in head.events:
                    self._reporter(event)
                head.events.clear()
