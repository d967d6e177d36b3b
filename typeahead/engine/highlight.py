"""Match offsets for the rendering layer to decorate."""

import re
from dataclasses import dataclass, field
from typing import List, NamedTuple

from .models import Candidate


class Span(NamedTuple):
    start: int
    end: int


@dataclass
class MatchHighlight:
    """Where the query occurs in a candidate's label and description."""
    candidate_id: str
    label: List[Span] = field(default_factory=list)
    description: List[Span] = field(default_factory=list)

    @property
    def has_match(self) -> bool:
        return bool(self.label or self.description)


def find_spans(text: str, query: str, case_sensitive: bool = False) -> List[Span]:
    """Non-overlapping occurrences of `query` in `text`, left to right."""
    if not query or not text:
        return []
    flags = 0 if case_sensitive else re.IGNORECASE
    return [
        Span(m.start(), m.end())
        for m in re.finditer(re.escape(query), text, flags)
    ]


def highlight_candidate(candidate: Candidate, query: str, case_sensitive: bool = False) -> MatchHighlight:
    return MatchHighlight(
        candidate_id=candidate.id,
        label=find_spans(candidate.label, query, case_sensitive),
        description=find_spans(candidate.description or "", query, case_sensitive),
    )
