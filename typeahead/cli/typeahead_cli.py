#!/usr/bin/env python3
"""
Command line front end for the typeahead engine.

Usage:
    typeahead search "query" --catalog items.yaml   - Rank catalog items for a query
    typeahead suggest --catalog items.yaml           - Show the empty-query suggestions
    typeahead distance "kitten" "sitting"            - Edit distance and similarity
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import yaml
from loguru import logger
from rich.console import Console
from rich.table import Table
from rich.text import Text

from typeahead.engine.config import MatchAlgorithm, SearchConfig, TypeaheadConfig
from typeahead.engine.distance import distance as edit_distance, similarity
from typeahead.engine.highlight import highlight_candidate
from typeahead.engine.models import Candidate, parse_candidates
from typeahead.engine.search import SearchEngine

console = Console()


def setup_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>",
        level="DEBUG" if verbose else "WARNING"
    )


def load_catalog(path: Path) -> List[Candidate]:
    """Read candidates from a YAML list, or a mapping with a `candidates` key."""
    with open(path, 'r') as f:
        data = yaml.safe_load(f) or []

    if isinstance(data, dict):
        data = data.get("candidates", [])
    if not isinstance(data, list):
        raise click.BadParameter(f"{path} does not contain a list of candidates")

    candidates = parse_candidates(data)
    logger.info(f"Loaded {len(candidates)} candidates from {path}")
    return candidates


def build_config(config_path: Optional[Path], overrides: Dict[str, Any]) -> TypeaheadConfig:
    base = TypeaheadConfig.load(config_path) if config_path else TypeaheadConfig()
    search = {**base.search.model_dump(), **{k: v for k, v in overrides.items() if v is not None}}
    return TypeaheadConfig.model_validate({
        **base.model_dump(),
        "search": SearchConfig.model_validate(search)
    })


def render_label(candidate: Candidate, query: str) -> Text:
    text = Text(candidate.label, style="bold")
    for span in highlight_candidate(candidate, query).label:
        text.stylize("black on yellow", span.start, span.end)
    if candidate.trending:
        text.append(" ↑", style="dark_orange")
    if candidate.recent:
        text.append(" ⏱", style="blue")
    return text


def display_results(engine: SearchEngine, results: List[Candidate], query: str, group_field: Optional[str]):
    """Display results grouped into rich tables."""
    if not results:
        console.print("[yellow]No results found[/yellow]")
        return

    group_by = (lambda c: c.field_text(group_field)) if group_field else None
    for group in engine.group(results, group_by):
        table = Table(title=group.category or None)
        table.add_column("Item", no_wrap=False)
        table.add_column("Description", style="dim", no_wrap=False)
        if engine.config.show_categories:
            table.add_column("Category", style="magenta")
        table.add_column("Popularity", justify="right", style="yellow")

        for candidate in group.candidates:
            row = [render_label(candidate, query), candidate.description or ""]
            if engine.config.show_categories:
                row.append(candidate.category or "")
            row.append(f"{candidate.popularity:g}" if candidate.popularity else "")
            table.add_row(*row)

        console.print(table)


def emit(engine: SearchEngine, results: List[Candidate], query: str, as_json: bool, group_field: Optional[str]):
    if as_json:
        click.echo(json.dumps([c.to_dict() for c in results], indent=2))
    else:
        display_results(engine, results, query, group_field)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Debug logging to stderr")
def cli(verbose: bool):
    """Typeahead search over a candidate catalog."""
    setup_logging(verbose)


@cli.command()
@click.argument("query")
@click.option("--catalog", "-c", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True)
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--algorithm", "-a", type=click.Choice([a.value for a in MatchAlgorithm]))
@click.option("--threshold", "-t", type=float, help="Fuzzy similarity threshold (0-1)")
@click.option("--limit", "-l", type=int, help="Max results")
@click.option("--min-length", type=int, help="Minimum query length before matching")
@click.option("--group-by", "group_field", help="Field to group results by, e.g. category")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
def search(
    query: str,
    catalog: Path,
    config_path: Optional[Path],
    algorithm: Optional[str],
    threshold: Optional[float],
    limit: Optional[int],
    min_length: Optional[int],
    group_field: Optional[str],
    as_json: bool
):
    """Rank catalog items for QUERY."""
    config = build_config(config_path, {
        "algorithm": algorithm,
        "fuzzy_threshold": threshold,
        "max_results": limit,
        "min_query_length": min_length,
    })
    engine = SearchEngine(config)
    results = asyncio.run(engine.search(query, load_catalog(catalog)))
    emit(engine, results, query, as_json, group_field)


@cli.command()
@click.option("--catalog", "-c", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True)
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--limit", "-l", type=int, help="Max results")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
def suggest(catalog: Path, config_path: Optional[Path], limit: Optional[int], as_json: bool):
    """Show recent, trending and popular items for an empty query."""
    config = build_config(config_path, {"max_results": limit})
    engine = SearchEngine(config)
    results = engine.select("", load_catalog(catalog))
    emit(engine, results, "", as_json, None)


@cli.command()
@click.argument("a")
@click.argument("b")
def distance(a: str, b: str):
    """Edit distance and similarity between A and B."""
    console.print(f"distance: [cyan]{edit_distance(a, b)}[/cyan]")
    console.print(f"similarity: [cyan]{similarity(a, b):.3f}[/cyan]")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
