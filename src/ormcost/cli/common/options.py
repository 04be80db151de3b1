"""Common CLI options for the CLI."""

import typer

DocumentArg = typer.Argument(
    ...,
    exists=True,
    dir_okay=False,
    readable=True,
    help="JSON document with entities, relationships and access patterns",
)

PatternArg = typer.Argument(
    ...,
    help="Access pattern name (or root entity for unnamed patterns)",
)

NameOpt = typer.Option(
    None,
    "--name",
    help="Regex on access pattern name",
)

ParallelOpt = typer.Option(
    4,
    "--parallel",
    "-n",
    help="Number of access patterns to analyze in parallel",
)

DedupeOpt = typer.Option(
    None,
    "--dedupe/--no-dedupe",
    help="Collapse repeated foreign keys at one lazy depth into one lookup",
    show_default=False,
)

MaxDepthOpt = typer.Option(
    None,
    "--max-depth",
    min=0,
    help="Maximum navigation depth accepted (default 8)",
    show_default=False,
)

TieBreakOpt = typer.Option(
    None,
    "--tie-break",
    help="Ranking objective (default queriesThenBytes)",
    show_default=False,
)

StrategyOpt = typer.Option(
    None,
    "--strategy",
    "-s",
    help="Force one loading strategy on every step (default: as declared)",
    show_default=False,
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log plan construction details",
)
