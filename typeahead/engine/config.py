"""Configuration management for the typeahead engine."""

from enum import Enum
from pathlib import Path
from typing import Optional, Any, Mapping, Tuple, Union

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .errors import ConfigurationOutOfRange


class MatchAlgorithm(str, Enum):
    """Available match strategies."""
    EXACT = "exact"
    FUZZY = "fuzzy"
    SEMANTIC = "semantic"
    HYBRID = "hybrid"


def _clamp(field_name: str, value, low, high=None):
    clamped = max(low, value)
    if high is not None:
        clamped = min(high, clamped)
    if clamped != value:
        logger.warning(str(ConfigurationOutOfRange(field_name, value, clamped)))
    return clamped


class SearchConfig(BaseModel):
    """
    Matching behaviour. Accepts camelCase or snake_case keys; unknown keys are
    ignored and out-of-range values are clamped rather than rejected.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    algorithm: MatchAlgorithm = MatchAlgorithm.HYBRID
    fuzzy_threshold: float = 0.5
    min_query_length: int = 1
    max_results: int = 10
    debounce_ms: int = 300
    case_sensitive: bool = False
    accent_sensitive: bool = False
    fetch_timeout_ms: int = 5000

    @field_validator('algorithm', mode='before')
    @classmethod
    def validate_algorithm(cls, v: Any) -> MatchAlgorithm:
        if isinstance(v, MatchAlgorithm):
            return v
        try:
            return MatchAlgorithm(str(v).lower())
        except ValueError:
            logger.warning(f"Unknown algorithm {v!r}, falling back to hybrid")
            return MatchAlgorithm.HYBRID

    @field_validator('fuzzy_threshold')
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        return _clamp('fuzzy_threshold', v, 0.0, 1.0)

    @field_validator('min_query_length', 'debounce_ms', 'fetch_timeout_ms')
    @classmethod
    def validate_non_negative(cls, v: int, info) -> int:
        return _clamp(info.field_name, v, 0)

    @field_validator('max_results')
    @classmethod
    def validate_max_results(cls, v: int) -> int:
        return _clamp('max_results', v, 1)

    @classmethod
    def from_partial(
        cls,
        overrides: Optional[Union["SearchConfig", Mapping[str, Any]]] = None
    ) -> "SearchConfig":
        """Merge a partial mapping over the defaults."""
        if isinstance(overrides, SearchConfig):
            return overrides
        return cls.model_validate(dict(overrides or {}))


class TypeaheadConfig(BaseModel):
    """Widget-level configuration for a typeahead session."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    search: SearchConfig = Field(default_factory=SearchConfig, alias="searchConfig")
    filter_by: Tuple[str, ...] = ("label", "value", "description")
    multiple: bool = False
    show_recent: bool = True
    show_trending: bool = True
    show_categories: bool = True

    @field_validator('search', mode='before')
    @classmethod
    def validate_search(cls, v: Any) -> Any:
        if v is None:
            return SearchConfig()
        return v

    @field_validator('filter_by')
    @classmethod
    def validate_filter_by(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            logger.warning("filter_by is empty, matching on label only")
            return ("label",)
        return v

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "TypeaheadConfig":
        """Load configuration from YAML file."""
        if config_path is None:
            candidates = [
                Path("typeahead.yaml"),
                Path.home() / ".config" / "typeahead" / "config.yaml",
            ]
            for candidate in candidates:
                if candidate.exists():
                    config_path = candidate
                    break
            else:
                raise FileNotFoundError(
                    f"No config file found. Searched: {[str(c) for c in candidates]}"
                )

        logger.info(f"Loading config from: {config_path}")
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}

        return cls.model_validate(data)

    def save(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w') as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, default_flow_style=False)
