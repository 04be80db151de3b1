"""CLI application for ORM access-pattern cost analysis."""

import typer

from ormcost.cli.commands.analyze import analyze
from ormcost.cli.commands.explain import plan, schema
from ormcost.cli.common.options import VerboseOpt
from ormcost.cli.common.output import setup_logging

app = typer.Typer(
    help="ormcost - estimate N+1 and join-explosion costs of ORM access patterns",
    no_args_is_help=True,
)


@app.callback()
def _init(verbose: bool = VerboseOpt):
    """Configure logging for every command."""
    setup_logging(verbose)


app.command(help="Compare loading strategies per access pattern.")(analyze)
app.command(help="Show the plan for one access pattern.")(plan)
app.command(help="List entities and relationships.")(schema)


if __name__ == "__main__":
    app()
