"""Typo-tolerant matching of a query against a block of text."""

from typing import Iterator

from .distance import similarity


class FuzzyMatcher:
    """
    Decides whether a query fuzzily matches a text field.

    Checks run in order and stop at the first hit:
    1. case-insensitive substring containment
    2. whole-word similarity for each whitespace-separated word
    3. sliding windows of the query's length inside each longer word
    """

    @staticmethod
    def matches(query: str, text: str, threshold: float) -> bool:
        if not query:
            return True

        query_lower = query.lower()
        text_lower = text.lower()

        if query_lower in text_lower:
            return True

        for word in text_lower.split():
            if similarity(query_lower, word) >= threshold:
                return True

            if len(word) >= len(query_lower):
                for window in FuzzyMatcher._windows(word, len(query_lower)):
                    if similarity(query_lower, window) >= threshold:
                        return True

        return False

    @staticmethod
    def _windows(word: str, size: int) -> Iterator[str]:
        for start in range(len(word) - size + 1):
            yield word[start:start + size]


def fuzzy_match(query: str, text: str, threshold: float) -> bool:
    return FuzzyMatcher.matches(query, text, threshold)
