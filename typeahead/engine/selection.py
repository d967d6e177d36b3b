"""Selection state and the recently-selected list."""

from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from loguru import logger

from .models import Candidate

SelectionValue = Union[Optional[Candidate], List[Candidate]]

RECENT_CAPACITY = 5


class RecentList:
    """Bounded, most-recent-first list of selected candidates, unique by id."""

    def __init__(self, capacity: int = RECENT_CAPACITY):
        self.capacity = capacity
        self._items: List[Candidate] = []

    def push(self, candidate: Candidate) -> None:
        entry = candidate.mark_recent()
        rest = [c for c in self._items if c.id != entry.id]
        self._items = [entry] + rest[:self.capacity - 1]

    @property
    def items(self) -> List[Candidate]:
        return list(self._items)

    def clear(self) -> None:
        self._items = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))


class SelectionController:
    """
    Tracks the current selection.

    In multiple mode the selection is an ordered set keyed by id, in
    insertion order. In single mode it holds at most one candidate and a
    selection closes the dropdown through `on_close`.
    """

    def __init__(
        self,
        multiple: bool = False,
        selected: Optional[Union[Candidate, Iterable[Candidate]]] = None,
        on_change: Optional[Callable[[SelectionValue], Any]] = None,
        on_close: Optional[Callable[[], Any]] = None,
        recent: Optional[RecentList] = None
    ):
        self.multiple = multiple
        self.on_change = on_change
        self.on_close = on_close
        self.recent = recent if recent is not None else RecentList()
        self._selected: Dict[str, Candidate] = {}

        if isinstance(selected, Candidate):
            selected = [selected]
        for candidate in selected or []:
            if not multiple:
                self._selected.clear()
            self._selected.setdefault(candidate.id, candidate)

    @property
    def selected(self) -> List[Candidate]:
        """Selected candidates as a list, whatever the mode."""
        return list(self._selected.values())

    @property
    def value(self) -> SelectionValue:
        """The selection state in its mode's shape: one candidate or a list."""
        if self.multiple:
            return self.selected
        return next(iter(self._selected.values()), None)

    def is_selected(self, candidate_id: str) -> bool:
        return candidate_id in self._selected

    def toggle(self, candidate: Candidate) -> SelectionValue:
        if self.multiple:
            if candidate.id in self._selected:
                del self._selected[candidate.id]
                logger.debug(f"Deselected {candidate.id}")
            else:
                self._selected[candidate.id] = candidate
                logger.debug(f"Selected {candidate.id}")
        else:
            self._selected = {candidate.id: candidate}
            logger.debug(f"Selected {candidate.id}")
            if self.on_close:
                self.on_close()

        self.recent.push(candidate)
        self._notify()
        return self.value

    def remove(self, candidate_id: str) -> bool:
        """Remove by id in multiple mode. Returns False for a no-op."""
        if not self.multiple:
            logger.debug("remove() ignored in single-selection mode")
            return False
        if candidate_id not in self._selected:
            return False

        del self._selected[candidate_id]
        self._notify()
        return True

    def clear(self) -> None:
        if not self._selected:
            return
        self._selected = {}
        self._notify()

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self.value)
