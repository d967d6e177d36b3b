"""Search engine: filtering, ranking and fallback for one typeahead widget."""

import asyncio
import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Sequence, Union

from loguru import logger

from .config import TypeaheadConfig
from .errors import ErrorAggregator, FetchFailure, TypeaheadError
from .fallback import FallbackSelector
from .models import Candidate, parse_candidates
from .ranking import Ranker
from .strategies import resolve_strategy

FetchResult = Iterable[Union[Candidate, dict]]
Fetcher = Callable[[str], Union[Awaitable[FetchResult], FetchResult]]
GroupBy = Callable[[Candidate], Optional[str]]

DEFAULT_GROUP = "Other"


@dataclass
class ResultGroup:
    """A run of results sharing one category label."""
    category: str
    candidates: List[Candidate] = field(default_factory=list)


class SearchEngine:
    """
    Produces the ordered, size-capped result list for a query.

    Short queries get the fallback list. Longer ones are matched against local
    candidates or against whatever the external fetcher returns; fetch
    failures are reported and turn into an empty result.
    """

    def __init__(
        self,
        config: Optional[TypeaheadConfig] = None,
        error_reporter: Optional[Callable[[TypeaheadError], Any]] = None
    ):
        self.config = config or TypeaheadConfig()
        self.errors = ErrorAggregator()
        self._report = error_reporter or self.errors.report

        self._matches = resolve_strategy(self.config.search.algorithm)
        self._fallback = FallbackSelector(
            show_recent=self.config.show_recent,
            show_trending=self.config.show_trending
        )

    def is_fallback_query(self, query: str) -> bool:
        return not query or len(query) < self.config.search.min_query_length

    def searchable_text(self, candidate: Candidate) -> str:
        return " ".join(candidate.field_text(name) for name in self.config.filter_by)

    def filter(self, query: str, candidates: Sequence[Candidate]) -> List[Candidate]:
        """Candidates accepted by the configured match strategy, input order."""
        search_config = self.config.search
        return [
            c for c in candidates
            if self._matches(query, self.searchable_text(c), search_config)
        ]

    def select(self, query: str, candidates: Iterable[Any]) -> List[Candidate]:
        """Synchronous search over a local candidate set."""
        candidates = parse_candidates(candidates, on_error=self._report)
        max_results = self.config.search.max_results

        if self.is_fallback_query(query):
            return self._fallback.select(candidates, max_results)

        ranked = Ranker.rank(self.filter(query, candidates), query)
        logger.debug(f"Query {query!r}: {len(ranked)} matches of {len(candidates)}")
        return ranked[:max_results]

    async def search(
        self,
        query: str,
        candidates: Iterable[Any] = (),
        fetch: Optional[Fetcher] = None
    ) -> List[Candidate]:
        """
        Search for `query`.

        Args:
            query: Current input text
            candidates: Local candidate set, used for fallback and when no fetcher is given
            fetch: Optional external source called with the query

        Returns:
            Ranked candidates, at most `max_results`. Never raises for fetch failures.
        """
        if fetch is None or self.is_fallback_query(query):
            return self.select(query, candidates)

        try:
            fetched = await self._fetch(fetch, query)
        except Exception as e:
            self._report(FetchFailure(query, e))
            return []

        return self.select(query, fetched)

    async def _fetch(self, fetch: Fetcher, query: str) -> FetchResult:
        timeout_ms = self.config.search.fetch_timeout_ms

        result = fetch(query)
        if inspect.isawaitable(result):
            if timeout_ms:
                result = await asyncio.wait_for(result, timeout=timeout_ms / 1000.0)
            else:
                result = await result

        if result is None:
            return []
        return list(result)

    @staticmethod
    def group(results: Sequence[Candidate], group_by: Optional[GroupBy] = None) -> List[ResultGroup]:
        """
        Partition ranked results into groups, in first-seen group order.

        Without a grouping function the whole list is one unlabeled group.
        """
        if group_by is None:
            return [ResultGroup(category="", candidates=list(results))]

        groups = {}
        for candidate in results:
            category = group_by(candidate) or DEFAULT_GROUP
            groups.setdefault(category, ResultGroup(category=category)).candidates.append(candidate)
        return list(groups.values())
