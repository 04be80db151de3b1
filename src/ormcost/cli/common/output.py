"""Output formatting utilities for the CLI."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.theme import Theme

from ormcost.core.advisor import Recommendation
from ormcost.core.estimator import breakdown
from ormcost.core.plan import ExecutionPlan
from ormcost.core.schema import SchemaModel

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)
err_console = Console(theme=_THEME, stderr=True)


def setup_logging(verbose: bool) -> None:
    """Route library log records through Rich; debug level when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _num(value: int) -> str:
    return f"{value:,}"


def _signed(value: int) -> str:
    return f"{value:+,}"


def _avg(value: float) -> str:
    return f"{value:,.2f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def comparison_table(self, rec: Recommendation, title: str | None = None) -> None:
        """
        Render the advisor's ranked comparison, best strategy first.

        The declared (per-step) assignment is appended as a last row.
        """
        t = Table(title=title or rec.pattern.label, show_lines=False)
        t.add_column("Rank", style="meta", no_wrap=True)
        t.add_column("Strategy", style="ok")
        t.add_column("Queries", justify="right")
        t.add_column("Rows", justify="right")
        t.add_column("Bytes", justify="right")

        for i, r in enumerate(rec.results, start=1):
            t.add_row(
                str(i),
                r.strategy,
                _num(r.query_count),
                _num(r.total_rows),
                _num(r.total_bytes),
            )
        d = rec.declared
        t.add_row(
            "-",
            f"[meta]{d.strategy}[/]",
            _num(d.query_count),
            _num(d.total_rows),
            _num(d.total_bytes),
        )

        console.print(t)

    def recommendation(self, rec: Recommendation) -> None:
        """Print the recommended strategy and its margin over the runner-up."""
        best = rec.best
        msg = f"Recommended: [ok]{best.strategy}[/] ({rec.tie_break.value})"
        delta = rec.delta
        if delta is not None and rec.runner_up is not None:
            msg += (
                f"; vs {rec.runner_up.strategy}: "
                f"{_signed(delta.query_count)} queries, "
                f"{_signed(delta.total_bytes)} bytes"
            )
        console.print(f"[title]›[/] {msg}")

    def plan_table(self, plan: ExecutionPlan, title: str | None = None) -> None:
        """Render the query shapes of a plan with their per-query costs."""
        t = Table(title=title or f"{plan.pattern.label} ({plan.label})", show_lines=False)
        t.add_column("Depth", style="meta", no_wrap=True)
        t.add_column("Kind", style="ok")
        t.add_column("Entities")
        t.add_column("Round trips", justify="right")
        t.add_column("Rows/trip", justify="right")
        t.add_column("Width", justify="right")
        t.add_column("Bytes", justify="right")

        for c in breakdown(plan):
            t.add_row(
                str(c.op.depth),
                c.op.kind.value,
                " ⋈ ".join(c.op.entities),
                _num(c.round_trips),
                _avg(c.op.row_count),
                _num(c.op.row_width),
                _num(c.bytes),
            )

        console.print(t)

    def entities_table(self, schema: SchemaModel, title: str = "Entities") -> None:
        """Render entities with their columns and full row width."""
        t = Table(title=title, show_lines=False)
        t.add_column("Entity", style="ok")
        t.add_column("Primary key", style="meta")
        t.add_column("Columns")
        t.add_column("Row width", justify="right")

        for e in schema.entities:
            cols = ", ".join(f"{c.name}({c.byte_width})" for c in e.columns)
            t.add_row(e.name, e.primary_key, cols, _num(e.row_width()))

        console.print(t)

    def relationships_table(
        self, schema: SchemaModel, title: str = "Relationships"
    ) -> None:
        """Render navigation edges parent -> child."""
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok")
        t.add_column("Edge")
        t.add_column("Foreign key", style="meta")
        t.add_column("Cardinality")
        t.add_column("Fan-out", justify="right")

        for r in schema.relationships:
            t.add_row(
                r.name,
                f"{r.parent} → {r.child}",
                r.foreign_key_column,
                r.cardinality.value,
                f"{r.fan_out:g}",
            )

        console.print(t)

    def batch_summary_table(self, analyses: Iterable[Any], title: str = "Summary") -> None:
        """
        Expects objects with .pattern, .recommendation and .error
        (like ormcost.core.batch.PatternAnalysis)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Pattern", style="ok")
        t.add_column("Recommended")
        t.add_column("Queries", justify="right")
        t.add_column("Bytes", justify="right")
        t.add_column("Error", style="err")

        for a in analyses:
            rec = getattr(a, "recommendation", None)
            if rec is None:
                t.add_row(a.pattern.label, "[err]FAIL[/]", "", "", str(a.error or ""))
                continue
            t.add_row(
                a.pattern.label,
                rec.best.strategy,
                _num(rec.best.query_count),
                _num(rec.best.total_bytes),
                "",
            )

        console.print(t)


out = Out()
