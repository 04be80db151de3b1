"""Commands for comparing loading strategies."""

from pathlib import Path

import typer

from ormcost.cli.common.context import build_analysis_context
from ormcost.cli.common.exits import die, warn_exit
from ormcost.cli.common.options import (
    DedupeOpt,
    DocumentArg,
    MaxDepthOpt,
    NameOpt,
    ParallelOpt,
    TieBreakOpt,
)
from ormcost.cli.common.output import out
from ormcost.core.batch import analyze_patterns_parallel, filter_patterns
from ormcost.core.config import TieBreak


def analyze(
    document: Path = DocumentArg,
    name: str | None = NameOpt,
    parallel: int = ParallelOpt,
    dedupe: bool | None = DedupeOpt,
    max_depth: int | None = MaxDepthOpt,
    tie_break: TieBreak | None = TieBreakOpt,
):
    """
    Compare lazy, eager-include and projected loading for each access pattern.
    """
    appctx = build_analysis_context(
        document, dedupe=dedupe, max_depth=max_depth, tie_break=tie_break
    )

    try:
        patterns = filter_patterns(appctx.document.patterns, name)
    except ValueError as e:
        die(str(e), code=1)

    if not patterns:
        warn_exit("No access patterns found", code=0)

    out.kv(
        {
            "document": appctx.path,
            "dedupeRepeatedLazyKeys": appctx.config.dedupe_repeated_lazy_keys,
            "maxNavigationDepth": appctx.config.max_navigation_depth,
            "tieBreak": appctx.config.tie_break.value,
        }
    )

    try:
        with out.status("Analyzing access patterns..."):
            analyses = analyze_patterns_parallel(appctx.advisor, patterns, parallel)
    except ValueError as e:
        die(str(e), code=1)

    for a in analyses:
        if a.recommendation is None:
            out.error(f"{a.pattern.label}: {a.error}")
            continue
        out.comparison_table(a.recommendation)
        out.recommendation(a.recommendation)

    if len(analyses) > 1:
        out.batch_summary_table(analyses)

    failed = sum(1 for a in analyses if not a.ok)
    if failed:
        out.error(f"{failed} of {len(analyses)} access pattern(s) failed")
        raise typer.Exit(1)

    out.success(f"Analyzed {len(analyses)} access pattern(s)")
