"""Commands for inspecting a schema document and individual plans."""

from pathlib import Path

from ormcost.cli.common.context import build_analysis_context
from ormcost.cli.common.exits import EXIT_DOCUMENT_ERROR, die, exit_from_exc
from ormcost.cli.common.options import (
    DedupeOpt,
    DocumentArg,
    MaxDepthOpt,
    PatternArg,
    StrategyOpt,
)
from ormcost.cli.common.output import out
from ormcost.core.errors import AnalysisError, DocumentError
from ormcost.core.estimator import estimate
from ormcost.core.patterns import LoadStrategy


def plan(
    document: Path = DocumentArg,
    pattern: str = PatternArg,
    strategy: LoadStrategy | None = StrategyOpt,
    dedupe: bool | None = DedupeOpt,
    max_depth: int | None = MaxDepthOpt,
):
    """
    Show the logical queries issued for one access pattern.
    """
    appctx = build_analysis_context(document, dedupe=dedupe, max_depth=max_depth)

    try:
        access = appctx.document.pattern(pattern)
    except DocumentError as e:
        die(str(e), code=EXIT_DOCUMENT_ERROR)

    try:
        built = appctx.advisor.builder.build(access, strategy)
    except AnalysisError as e:
        exit_from_exc(e)

    out.plan_table(built)
    cost = estimate(built)
    out.kv(
        {
            "queries": f"{cost.query_count:,}",
            "rows": f"{cost.total_rows:,}",
            "bytes": f"{cost.total_bytes:,}",
        }
    )


def schema(document: Path = DocumentArg):
    """
    List entities (with row widths) and relationships of a document.
    """
    appctx = build_analysis_context(document)
    out.entities_table(appctx.document.schema)
    out.relationships_table(appctx.document.schema)
