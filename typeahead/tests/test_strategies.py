"""Tests for match strategies."""

import pytest

from typeahead.engine.config import MatchAlgorithm, SearchConfig
from typeahead.engine.strategies import (
    exact_match, fold_accents, fuzzy_strategy, hybrid_match, resolve_strategy, semantic_match
)

TEXT = "MacBook Pro M3 macbook-pro-m3 Professional laptop with M3 chip"


class TestExact:

    def test_case_insensitive_by_default(self):
        assert exact_match("macbook pro", TEXT, SearchConfig())

    def test_case_sensitive(self):
        config = SearchConfig(case_sensitive=True)
        assert exact_match("MacBook", TEXT, config)
        assert not exact_match("MACBOOK", TEXT, config)

    def test_no_typo_tolerance(self):
        assert not exact_match("macbok", TEXT, SearchConfig())

    def test_accent_folding(self):
        assert exact_match("cafe", "Café Latte", SearchConfig())
        assert not exact_match("cafe", "Café Latte", SearchConfig(accent_sensitive=True))

    def test_fold_accents(self):
        assert fold_accents("Crème Brûlée") == "Creme Brulee"


class TestSemantic:

    def test_any_token_overlap(self):
        assert semantic_match("apple laptop", TEXT, SearchConfig())

    def test_no_overlap(self):
        assert not semantic_match("gaming console", TEXT, SearchConfig())

    def test_repeated_spaces_do_not_match_everything(self):
        assert not semantic_match("gaming  console", TEXT, SearchConfig())


class TestFuzzyAndHybrid:

    def test_fuzzy_uses_threshold(self):
        assert fuzzy_strategy("macbok", TEXT, SearchConfig(fuzzy_threshold=0.5))
        assert not fuzzy_strategy("macbok", TEXT, SearchConfig(fuzzy_threshold=1.0))

    def test_hybrid_substring(self):
        assert hybrid_match("laptop", TEXT, SearchConfig(fuzzy_threshold=1.0))

    def test_hybrid_typo(self):
        assert hybrid_match("profesional", TEXT, SearchConfig())


@pytest.mark.parametrize("algorithm,expected", [
    (MatchAlgorithm.EXACT, exact_match),
    ("fuzzy", fuzzy_strategy),
    ("semantic", semantic_match),
    ("hybrid", hybrid_match),
    ("vector", hybrid_match),
    (None, hybrid_match),
])
def test_resolve_strategy(algorithm, expected):
    assert resolve_strategy(algorithm) is expected
