"""Dropdown open/closed state and the highlighted-row cursor."""

from enum import Enum
from typing import Any, Callable, Optional, Sequence

from loguru import logger

from .models import Candidate

NO_HIGHLIGHT = -1


class NavState(Enum):
    CLOSED = "closed"
    OPEN = "open"


class NavigationState:
    """
    Keyboard cursor over the current result list.

    The list is read through `results` on every move, so bounds always
    reflect what is displayed now and never a stale snapshot.
    """

    def __init__(
        self,
        results: Callable[[], Sequence[Candidate]],
        on_confirm: Optional[Callable[[Candidate], Any]] = None
    ):
        self._results = results
        self.on_confirm = on_confirm
        self.state = NavState.CLOSED
        self.highlighted_index = NO_HIGHLIGHT

    @property
    def is_open(self) -> bool:
        return self.state is NavState.OPEN

    @property
    def highlighted(self) -> Optional[Candidate]:
        results = self._results()
        if 0 <= self.highlighted_index < len(results):
            return results[self.highlighted_index]
        return None

    def open(self) -> None:
        if not self.is_open:
            self.state = NavState.OPEN
            self.highlighted_index = NO_HIGHLIGHT

    def close(self) -> None:
        self.state = NavState.CLOSED
        self.highlighted_index = NO_HIGHLIGHT

    def escape(self) -> None:
        self.close()

    def reset_highlight(self) -> None:
        self.highlighted_index = NO_HIGHLIGHT

    def move_down(self) -> int:
        length = len(self._results())
        if length == 0:
            self.highlighted_index = NO_HIGHLIGHT
        elif self.highlighted_index >= length - 1:
            self.highlighted_index = 0
        else:
            self.highlighted_index += 1
        return self.highlighted_index

    def move_up(self) -> int:
        length = len(self._results())
        if length == 0:
            self.highlighted_index = NO_HIGHLIGHT
        elif self.highlighted_index <= 0:
            self.highlighted_index = length - 1
        else:
            self.highlighted_index = min(self.highlighted_index - 1, length - 1)
        return self.highlighted_index

    def confirm(self) -> Optional[Candidate]:
        """Hand the highlighted item to `on_confirm`; no-op without a valid highlight."""
        candidate = self.highlighted
        if candidate is None:
            return None
        if self.on_confirm:
            self.on_confirm(candidate)
        return candidate

    def sync(self) -> None:
        """Drop a highlight that fell outside a shrunken result list."""
        if self.highlighted_index >= len(self._results()):
            self.highlighted_index = NO_HIGHLIGHT

    def handle_key(self, key: str) -> bool:
        """Apply a navigation key. Returns True if the key was consumed."""
        if not self.is_open:
            if key in ("ArrowDown", "Enter"):
                self.open()
                return True
            return False

        if key == "ArrowDown":
            self.move_down()
        elif key == "ArrowUp":
            self.move_up()
        elif key == "Enter":
            self.confirm()
        elif key == "Escape":
            self.escape()
        elif key == "Tab":
            self.close()
        else:
            return False

        logger.debug(f"Key {key}: state={self.state.value} index={self.highlighted_index}")
        return True
