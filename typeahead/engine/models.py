"""Candidate records and helpers for normalizing candidate sets."""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional
from dataclasses import dataclass, field, replace

from loguru import logger

from .errors import MalformedCandidate


@dataclass(frozen=True, eq=False)
class Candidate:
    """One selectable item. Identity is the `id` field alone."""
    id: str
    label: str
    value: str = ""
    category: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    popularity: Optional[float] = None
    recent: bool = False
    trending: bool = False

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise MalformedCandidate(self.id, "missing id")
        if not isinstance(self.label, str) or not self.label:
            raise MalformedCandidate(self.id, "missing label")
        if self.popularity is not None and self.popularity < 0:
            object.__setattr__(self, "popularity", 0)

    def __eq__(self, other):
        if not isinstance(other, Candidate):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    @property
    def score(self) -> float:
        """Popularity with absence treated as 0."""
        return self.popularity or 0

    def field_text(self, name: str) -> str:
        """Text of a named field for matching; unknown names fall through to metadata."""
        if name in _FIELD_NAMES:
            value = getattr(self, name)
        else:
            value = self.metadata.get(name)
        if value is None or isinstance(value, dict):
            return ""
        return str(value)

    def mark_recent(self) -> "Candidate":
        return self if self.recent else replace(self, recent=True)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Candidate":
        """Build a candidate from a plain mapping (YAML, JSON, remote payload)."""
        if not isinstance(data, Mapping):
            raise MalformedCandidate(data, "not a mapping")

        raw_id = data.get("id")
        if raw_id is None or raw_id == "":
            raise MalformedCandidate(data, "missing id")
        label = data.get("label")
        if not isinstance(label, str) or not label:
            raise MalformedCandidate(data, "missing label")

        popularity = data.get("popularity")
        if popularity is not None:
            try:
                popularity = float(popularity)
            except (TypeError, ValueError):
                raise MalformedCandidate(data, "popularity is not a number")

        metadata = data.get("metadata") or {}
        if not isinstance(metadata, Mapping):
            raise MalformedCandidate(data, "metadata is not a mapping")
        value = data.get("value")

        return cls(
            id=str(raw_id),
            label=label,
            value="" if value is None else str(value),
            category=_optional_text(data.get("category")),
            description=_optional_text(data.get("description")),
            image=_optional_text(data.get("image")),
            metadata=dict(metadata),
            popularity=popularity,
            recent=_flag(data, "recent"),
            trending=_flag(data, "trending"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "value": self.value,
            "category": self.category,
            "description": self.description,
            "image": self.image,
            "metadata": dict(self.metadata),
            "popularity": self.popularity,
            "recent": self.recent,
            "trending": self.trending,
        }


_FIELD_NAMES = frozenset(Candidate.__dataclass_fields__) - {"metadata"}

_TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
_FALSE_WORDS = frozenset({"false", "no", "off", "0", ""})


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _flag(data: Mapping[str, Any], name: str) -> bool:
    """Read a boolean flag, accepting the string forms remote payloads use."""
    value = data.get(name)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise MalformedCandidate(data, f"{name} is not a boolean")


def parse_candidates(
    items: Optional[Iterable[Any]],
    on_error: Optional[Callable[[MalformedCandidate], Any]] = None
) -> List[Candidate]:
    """
    Normalize a candidate source into Candidate records.

    Malformed entries are skipped and reported; the rest of the set survives.
    """
    if items is None:
        return []

    candidates = []
    for item in items:
        if isinstance(item, Candidate):
            candidates.append(item)
            continue
        try:
            candidates.append(Candidate.from_mapping(item))
        except MalformedCandidate as e:
            if on_error:
                on_error(e)
            else:
                logger.warning(f"Skipping candidate: {e}")
    return candidates


def unique_by_id(items: Iterable[Candidate]) -> List[Candidate]:
    """Drop repeated ids, keeping the first occurrence."""
    seen_ids = set()
    unique = []
    for candidate in items:
        if candidate.id not in seen_ids:
            seen_ids.add(candidate.id)
            unique.append(candidate)
    return unique
