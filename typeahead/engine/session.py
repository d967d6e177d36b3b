"""
One typeahead widget session.

Wires input text through the debouncer into the search engine, keeps the
displayed results, and routes keyboard and selection actions. Every search
carries a generation number; a response whose generation is no longer the
latest is discarded, so a slow reply for an old query never replaces newer
results.
"""

from typing import Any, Callable, Iterable, List, Optional, Union

from loguru import logger

from .bus import (
    RECENT_UPDATED, SEARCH_COMPLETED, SEARCH_DISCARDED, SEARCH_FAILED, SELECTION_CHANGED,
    Event, EventBus
)
from .config import TypeaheadConfig
from .debounce import Debouncer
from .errors import FetchFailure, TypeaheadError
from .highlight import MatchHighlight, highlight_candidate
from .models import Candidate, parse_candidates
from .navigation import NavigationState
from .search import Fetcher, GroupBy, ResultGroup, SearchEngine
from .selection import RecentList, SelectionController, SelectionValue


class TypeaheadSession:
    """Session state for one widget: query, results, selection, cursor."""

    def __init__(
        self,
        candidates: Iterable[Any] = (),
        config: Optional[TypeaheadConfig] = None,
        fetch: Optional[Fetcher] = None,
        group_by: Optional[GroupBy] = None,
        on_change: Optional[Callable[[SelectionValue], Any]] = None,
        selected: Optional[Union[Candidate, Iterable[Candidate]]] = None,
        event_bus: Optional[EventBus] = None,
        error_reporter: Optional[Callable[[TypeaheadError], Any]] = None
    ):
        self.config = config or TypeaheadConfig()
        self._error_reporter = error_reporter
        self.engine = SearchEngine(self.config, error_reporter=self._report_error)
        self.candidates = parse_candidates(candidates, on_error=self._report_error)
        self.fetch = fetch
        self.group_by = group_by
        self.event_bus = event_bus

        self.query = ""
        self.results: List[Candidate] = []
        self.results_query = ""
        self.is_loading = False
        self._generation = 0

        self.recent = RecentList()
        self.navigation = NavigationState(lambda: self.results, on_confirm=self.select)
        self.selection = SelectionController(
            multiple=self.config.multiple,
            selected=selected,
            on_change=on_change,
            on_close=self.navigation.close,
            recent=self.recent
        )
        self.debouncer = Debouncer(self.run_search, self.config.search.debounce_ms)

    @property
    def generation(self) -> int:
        return self._generation

    async def load_initial(self) -> List[Candidate]:
        """Populate the dropdown with the empty-query list, without debouncing."""
        return await self.run_search("")

    def set_query(self, text: str) -> None:
        """Record new input text and schedule a debounced search for it."""
        self.query = text
        self.navigation.reset_highlight()
        self.debouncer.trigger(text)

    async def run_search(self, query: str) -> List[Candidate]:
        self._generation += 1
        generation = self._generation
        remote = self.fetch is not None and not self.engine.is_fallback_query(query)
        if remote:
            self.is_loading = True

        results = await self.engine.search(query, self.candidates, self.fetch)

        if generation != self._generation:
            logger.debug(f"Discarding stale results for {query!r} (generation {generation})")
            self._emit(SEARCH_DISCARDED, {"query": query, "generation": generation})
            return self.results

        self.results = results
        self.results_query = query
        self.is_loading = False
        self.navigation.sync()
        self._emit(SEARCH_COMPLETED, {
            "query": query,
            "generation": generation,
            "result_count": len(results),
            "remote": remote
        })
        return results

    def select(self, candidate: Candidate) -> SelectionValue:
        value = self.selection.toggle(candidate)
        if not self.selection.multiple:
            self.query = candidate.label
        self._emit(SELECTION_CHANGED, {"candidate_id": candidate.id, "selected": self._selected_ids()})
        self._emit(RECENT_UPDATED, {"recent": [c.id for c in self.recent]})
        return value

    def remove(self, candidate_id: str) -> bool:
        removed = self.selection.remove(candidate_id)
        if removed:
            self._emit(SELECTION_CHANGED, {"candidate_id": candidate_id, "selected": self._selected_ids()})
        return removed

    def handle_key(self, key: str) -> bool:
        return self.navigation.handle_key(key)

    def focus(self) -> None:
        self.navigation.open()

    def grouped_results(self) -> List[ResultGroup]:
        return self.engine.group(self.results, self.group_by)

    def highlights(self) -> List[MatchHighlight]:
        """Match spans against the query that produced the displayed results."""
        case_sensitive = self.config.search.case_sensitive
        return [highlight_candidate(c, self.results_query, case_sensitive) for c in self.results]

    def close(self) -> None:
        """Teardown: cancel pending and in-flight debounced searches."""
        self.debouncer.close()
        self.navigation.close()

    def _selected_ids(self) -> List[str]:
        return [c.id for c in self.selection.selected]

    def _report_error(self, error: TypeaheadError) -> None:
        if self._error_reporter:
            self._error_reporter(error)
        else:
            self.engine.errors.report(error)
        if isinstance(error, FetchFailure):
            self._emit(SEARCH_FAILED, {"query": error.query, "error": str(error)})

    def _emit(self, event_type: str, data: dict) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(Event(type=event_type, data=data, source="typeahead"))
