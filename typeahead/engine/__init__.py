"""Query matching, ranking and session state for typeahead widgets."""

from .config import MatchAlgorithm, SearchConfig, TypeaheadConfig
from .errors import (
    ConfigurationOutOfRange, ErrorAggregator, FetchFailure, MalformedCandidate, TypeaheadError
)
from .models import Candidate, parse_candidates, unique_by_id
from .search import ResultGroup, SearchEngine
from .session import TypeaheadSession

__all__ = [
    "Candidate",
    "ConfigurationOutOfRange",
    "ErrorAggregator",
    "FetchFailure",
    "MalformedCandidate",
    "MatchAlgorithm",
    "ResultGroup",
    "SearchConfig",
    "SearchEngine",
    "TypeaheadConfig",
    "TypeaheadError",
    "TypeaheadSession",
    "parse_candidates",
    "unique_by_id",
]
