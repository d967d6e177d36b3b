"""Results shown before the query is long enough to search."""

from typing import List, Sequence

from loguru import logger

from .models import Candidate, unique_by_id


class FallbackSelector:
    """
    Builds the empty-query list: recent items, then trending, then the most
    popular, de-duplicated by id. The recent/trending/popular order is fixed.
    """

    RECENT_LIMIT = 3
    TRENDING_LIMIT = 3
    POPULAR_LIMIT = 4

    def __init__(self, show_recent: bool = True, show_trending: bool = True):
        self.show_recent = show_recent
        self.show_trending = show_trending

    def select(self, candidates: Sequence[Candidate], max_results: int) -> List[Candidate]:
        recent = []
        if self.show_recent:
            recent = [c for c in candidates if c.recent][:self.RECENT_LIMIT]

        trending = []
        if self.show_trending:
            trending = [c for c in candidates if c.trending][:self.TRENDING_LIMIT]

        # sorted() leaves the caller's list untouched
        popular = sorted(candidates, key=lambda c: -c.score)[:self.POPULAR_LIMIT]

        merged = unique_by_id(recent + trending + popular)
        logger.debug(
            f"Fallback: {len(recent)} recent, {len(trending)} trending, "
            f"{len(popular)} popular -> {len(merged)} unique"
        )
        return merged[:max_results]
