"""Tests for the command line interface."""

import json
import sys

import pytest
import yaml
from click.testing import CliRunner
from loguru import logger

from typeahead.cli.typeahead_cli import cli


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    # the CLI points loguru at the runner's stderr, which is closed afterwards
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def catalog(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump({"candidates": [
        {"id": 1, "label": "MacBook Pro", "category": "Laptops", "popularity": 90},
        {"id": 2, "label": "MacBook Air", "category": "Laptops", "popularity": 70},
        {"id": 3, "label": "Dell XPS", "category": "Laptops", "popularity": 80, "recent": True},
    ]}))
    return path


def test_search_json(catalog):
    runner = CliRunner()
    result = runner.invoke(cli, ["search", "macbok", "--catalog", str(catalog), "--json"])

    assert result.exit_code == 0, result.output
    assert [item["id"] for item in json.loads(result.output)] == ["1", "2"]


def test_search_with_limit_and_algorithm(catalog):
    runner = CliRunner()
    result = runner.invoke(cli, [
        "search", "macbook", "--catalog", str(catalog), "--algorithm", "exact", "--limit", "1", "--json"
    ])

    assert result.exit_code == 0, result.output
    assert [item["id"] for item in json.loads(result.output)] == ["1"]


def test_search_table_output(catalog):
    runner = CliRunner()
    result = runner.invoke(cli, ["search", "dell", "--catalog", str(catalog), "--group-by", "category"])

    assert result.exit_code == 0, result.output
    assert "Dell XPS" in result.output
    assert "Laptops" in result.output


def test_search_no_results(catalog):
    runner = CliRunner()
    result = runner.invoke(cli, ["search", "qqqq", "--catalog", str(catalog), "--algorithm", "exact"])

    assert result.exit_code == 0
    assert "No results found" in result.output


def test_malformed_catalog_entries_are_skipped(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump([
        {"id": 1, "label": "Kindle Paperwhite", "popularity": 60},
        {"id": 2, "description": "missing label"},
    ]))
    runner = CliRunner()
    result = runner.invoke(cli, ["suggest", "--catalog", str(path)])

    assert result.exit_code == 0, result.output
    assert "Kindle" in result.output


def test_search_numeric_description(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump([
        {"id": 1, "label": "Model 2024", "description": 2024, "category": 3, "recent": "false"},
    ]))
    runner = CliRunner()
    result = runner.invoke(cli, ["search", "model", "--catalog", str(path), "--group-by", "category"])

    assert result.exit_code == 0, result.output
    assert "Model 2024" in result.output
    assert "2024" in result.output


def test_suggest(catalog):
    runner = CliRunner()
    result = runner.invoke(cli, ["suggest", "--catalog", str(catalog), "--json"])

    assert result.exit_code == 0, result.output
    assert [item["id"] for item in json.loads(result.output)] == ["3", "1", "2"]


def test_distance():
    runner = CliRunner()
    result = runner.invoke(cli, ["distance", "kitten", "sitting"])

    assert result.exit_code == 0
    assert "distance: 3" in result.output
    assert "similarity: 0.571" in result.output
