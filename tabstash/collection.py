"""In-memory group store with change notification and a debounced writer.

The store holds the ordered collection for exactly one workspace.  It is not
thread-safe: every mutation and read happens on the host's UI context, and
the debounced writer hands its callback back to that context through the
``dispatch`` hook.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from tabstash.models import ChangeKind, Group


class DuplicateGroupError(ValueError):
    """Raised when a group name (case-insensitive) is already in the store."""


class GroupNotFoundError(LookupError):
    """Raised when a group is not held by the store."""


@dataclass(frozen=True)
class StoreChange:
    """A single change notification."""

    kind: ChangeKind
    group: Group | None = None
    fields: frozenset[str] = field(default_factory=frozenset)


ChangeCallback = Callable[[StoreChange], None]


class GroupStore:
    """Ordered collection of groups for one workspace.

    Groups are tracked by identity, not equality: two groups with equal
    fields are still distinct entries.
    """

    def __init__(self, groups: list[Group] | None = None) -> None:
        self._groups: list[Group] = []
        self._subscribers: list[ChangeCallback] = []
        for group in groups or []:
            self._check_unique(group.name)
            self._groups.append(group)

    # -- Query -----------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[Group]:
        return iter(list(self._groups))

    def __getitem__(self, index: int) -> Group:
        return self._groups[index]

    def __contains__(self, group: object) -> bool:
        return any(g is group for g in self._groups)

    def groups(self) -> list[Group]:
        """Snapshot of the collection in display order."""
        return list(self._groups)

    def index(self, group: Group) -> int:
        for i, g in enumerate(self._groups):
            if g is group:
                return i
        raise GroupNotFoundError(group.name)

    def find_by_name(self, name: str) -> Group | None:
        folded = name.casefold()
        for g in self._groups:
            if g.name.casefold() == folded:
                return g
        return None

    def find_by_slot(self, slot: int) -> Group | None:
        for g in self._groups:
            if g.slot == slot:
                return g
        return None

    def selected(self) -> Group | None:
        """First group flagged as selected.  Later flagged groups are ignored."""
        for g in self._groups:
            if g.selected:
                return g
        return None

    # -- Structural mutation -----------------------------------------------------

    def insert(self, index: int, group: Group) -> None:
        self._check_unique(group.name)
        self._groups.insert(index, group)
        self._emit(StoreChange(ChangeKind.ADDED, group))

    def append(self, group: Group) -> None:
        self.insert(len(self._groups), group)

    def move(self, old_index: int, new_index: int) -> None:
        group = self._groups.pop(old_index)
        self._groups.insert(new_index, group)
        self._emit(StoreChange(ChangeKind.MOVED, group))

    def remove(self, group: Group) -> None:
        del self._groups[self.index(group)]
        self._emit(StoreChange(ChangeKind.REMOVED, group))

    def clear(self) -> None:
        self._groups.clear()
        self._emit(StoreChange(ChangeKind.CLEARED))

    def replace(self, group: Group, **changes: Any) -> None:
        """Overwrite fields of *group* in place, reported as a structural change."""
        self.index(group)
        self._apply(group, changes)
        self._emit(StoreChange(ChangeKind.REPLACED, group, frozenset(changes)))

    # -- Item mutation -----------------------------------------------------------

    def update(self, group: Group, **changes: Any) -> None:
        """Change fields of *group*; notifies only for fields that actually changed."""
        self.index(group)
        changed = {k: v for k, v in changes.items() if getattr(group, k) != v}
        if not changed:
            return
        self._apply(group, changed)
        self._emit(StoreChange(ChangeKind.ITEM_CHANGED, group, frozenset(changed)))

    def select(self, group: Group | None) -> None:
        """Flag *group* as the selected one and clear the flag on every other group."""
        for g in self._groups:
            self.update(g, selected=g is group)

    # -- Notification ------------------------------------------------------------

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register *callback* for every change.  Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    # -- Internals ---------------------------------------------------------------

    def _check_unique(self, name: str, ignore: Group | None = None) -> None:
        existing = self.find_by_name(name)
        if existing is not None and existing is not ignore:
            raise DuplicateGroupError(name)

    def _apply(self, group: Group, changes: dict[str, Any]) -> None:
        if "name" in changes:
            self._check_unique(changes["name"], ignore=group)
        for key, value in changes.items():
            if key == "name":
                group.rename(value)
            else:
                setattr(group, key, value)

    def _emit(self, change: StoreChange) -> None:
        for callback in list(self._subscribers):
            callback(change)


class DebouncedWriter:
    """Runs a write callback once a burst of requests has been quiet for *delay* seconds.

    Every ``schedule()`` restarts the countdown.  When it expires the timer
    thread only hands ``_fire`` to ``dispatch``; the host marshals it back onto
    its UI context, so the callback and all writer state stay on that context.

    Without ``dispatch`` no timer is started: ``schedule()`` just marks the
    write pending and the owner runs it through ``flush()``.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        delay: float = 1.0,
        *,
        dispatch: Callable[[Callable[[], None]], None] | None = None,
        timer_factory: Callable[[float, Callable[[], None]], Any] = threading.Timer,
    ) -> None:
        self._callback = callback
        self._delay = max(0.0, float(delay))
        self._dispatch = dispatch
        self._timer_factory = timer_factory
        self._timer: Any = None
        self._generation = 0
        self._dirty = False

    @property
    def pending(self) -> bool:
        return self._dirty

    def schedule(self) -> None:
        self._dirty = True
        self._cancel_timer()
        if self._dispatch is None:
            return

        generation = self._generation
        dispatch = self._dispatch
        timer = self._timer_factory(self._delay, lambda: dispatch(lambda: self._fire(generation)))
        if hasattr(timer, "daemon"):
            timer.daemon = True
        self._timer = timer
        timer.start()

    def flush(self) -> None:
        """Run a pending write immediately.  No-op if nothing is pending."""
        if not self._dirty:
            return
        self._cancel_timer()
        self._run()

    def cancel(self) -> None:
        self._dirty = False
        self._cancel_timer()

    def _fire(self, generation: int) -> None:
        # A later schedule(), flush() or cancel() supersedes this expiry.
        if generation != self._generation or not self._dirty:
            return
        self._timer = None
        self._run()

    def _run(self) -> None:
        self._dirty = False
        try:
            self._callback()
        except Exception:
            logger.exception("Debounced write failed")

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        self._generation += 1
