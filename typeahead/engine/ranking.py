"""Ordering of matched candidates."""

from typing import Iterable, List

from .models import Candidate


class Ranker:
    """
    Orders matches: labels starting with the query first, then by descending
    popularity. The sort is stable, so equal-rank items keep their input
    order and do not jump around between keystrokes.
    """

    @staticmethod
    def is_prefix_match(candidate: Candidate, query: str) -> bool:
        return candidate.label.lower().startswith(query.lower())

    @staticmethod
    def rank(matched: Iterable[Candidate], query: str) -> List[Candidate]:
        return sorted(
            matched,
            key=lambda c: (not Ranker.is_prefix_match(c, query), -c.score)
        )
