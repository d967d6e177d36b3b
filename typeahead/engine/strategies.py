"""Match strategies: predicates deciding whether a candidate is included."""

import unicodedata
from typing import Callable, Dict, Union

from loguru import logger

from .config import MatchAlgorithm, SearchConfig
from .fuzzy import FuzzyMatcher

MatchPredicate = Callable[[str, str, SearchConfig], bool]


def fold_accents(text: str) -> str:
    """Strip combining marks: 'Café' -> 'Cafe'."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def _contains_ignore_case(query: str, text: str) -> bool:
    return query.lower() in text.lower()


def exact_match(query: str, text: str, config: SearchConfig) -> bool:
    if not config.accent_sensitive:
        query, text = fold_accents(query), fold_accents(text)
    if config.case_sensitive:
        return query in text
    return _contains_ignore_case(query, text)


def fuzzy_strategy(query: str, text: str, config: SearchConfig) -> bool:
    return FuzzyMatcher.matches(query, text, config.fuzzy_threshold)


def semantic_match(query: str, text: str, config: SearchConfig) -> bool:
    # Token overlap only; boolean, no weighting by overlap count.
    if _contains_ignore_case(query, text):
        return True
    text_lower = text.lower()
    return any(token in text_lower for token in query.lower().split())


def hybrid_match(query: str, text: str, config: SearchConfig) -> bool:
    return (
        _contains_ignore_case(query, text)
        or FuzzyMatcher.matches(query, text, config.fuzzy_threshold)
    )


STRATEGIES: Dict[MatchAlgorithm, MatchPredicate] = {
    MatchAlgorithm.EXACT: exact_match,
    MatchAlgorithm.FUZZY: fuzzy_strategy,
    MatchAlgorithm.SEMANTIC: semantic_match,
    MatchAlgorithm.HYBRID: hybrid_match,
}


def resolve_strategy(algorithm: Union[MatchAlgorithm, str, None]) -> MatchPredicate:
    """Map an algorithm name to its predicate; anything unknown is hybrid."""
    try:
        return STRATEGIES[MatchAlgorithm(algorithm)]
    except ValueError:
        logger.warning(f"Unknown algorithm {algorithm!r}, using hybrid")
        return hybrid_match
