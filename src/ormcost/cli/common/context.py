"""Application context management for the CLI."""

from dataclasses import dataclass
from pathlib import Path

from ormcost.cli.common.exits import EXIT_DOCUMENT_ERROR, die
from ormcost.core.advisor import PlanAdvisor
from ormcost.core.config import AnalyzerConfig, TieBreak
from ormcost.core.errors import AnalysisError, DocumentError
from ormcost.core.loader import Document, load_document


@dataclass
class AnalysisContext:
    """Application context holding the loaded document, config and advisor."""

    path: Path
    document: Document
    config: AnalyzerConfig
    advisor: PlanAdvisor


def build_analysis_context(
    path: Path,
    *,
    dedupe: bool | None = None,
    max_depth: int | None = None,
    tie_break: TieBreak | None = None,
) -> AnalysisContext:
    """Load a document and build the advisor for it.

    Configuration layers, lowest first: defaults, ORMCOST_* environment
    variables, the document's `config` section, then CLI flags.

    Args:
        path: JSON document to load.
        dedupe: --dedupe/--no-dedupe override.
        max_depth: --max-depth override.
        tie_break: --tie-break override.

    Returns:
        AnalysisContext: Loaded document with a ready advisor.
    """
    try:
        document = load_document(path, AnalyzerConfig.from_env())
    except DocumentError as exc:
        die(str(exc), code=EXIT_DOCUMENT_ERROR)
    except AnalysisError as exc:
        die(f"Invalid schema in {path}: {exc}", code=EXIT_DOCUMENT_ERROR)

    config = document.config.with_overrides(
        dedupe_repeated_lazy_keys=dedupe,
        max_navigation_depth=max_depth,
        tie_break=tie_break,
    )
    advisor = PlanAdvisor(document.schema, config)
    return AnalysisContext(path=path, document=document, config=config, advisor=advisor)
