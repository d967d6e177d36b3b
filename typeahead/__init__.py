"""Typeahead search: matching, ranking and fallback suggestions."""

__version__ = "0.1.0"
