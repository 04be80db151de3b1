"""Analyzer configuration.

The options here are explicit, inspectable assumptions about the data layer
rather than hidden defaults. Values can come from code, from environment
variables, or from CLI flags layered on top.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping


class TieBreak(str, Enum):
    """Ranking objective used by the plan advisor."""

    QUERIES_THEN_BYTES = "queriesThenBytes"
    BYTES_THEN_QUERIES = "bytesThenQueries"


@dataclass(frozen=True)
class AnalyzerConfig:
    """
    Global analyzer options.

    Attributes:
        dedupe_repeated_lazy_keys: Collapse repeated foreign-key values at
            the same lazy navigation depth into one lookup (models an ORM
            identity map / change tracker).
        max_navigation_depth: Longest navigation chain accepted.
        tie_break: Ranking objective for the advisor.
    """

    dedupe_repeated_lazy_keys: bool = False
    max_navigation_depth: int = 8
    tie_break: TieBreak = TieBreak.QUERIES_THEN_BYTES

    _DEDUPE_ENV = "ORMCOST_DEDUPE"
    _MAX_DEPTH_ENV = "ORMCOST_MAX_DEPTH"
    _TIE_BREAK_ENV = "ORMCOST_TIE_BREAK"

    def __post_init__(self):
        object.__setattr__(self, "tie_break", TieBreak(self.tie_break))
        if self.max_navigation_depth < 0:
            raise ValueError("max_navigation_depth must be >= 0")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AnalyzerConfig":
        """Build a config from ORMCOST_* variables, ignoring malformed values."""
        env = os.environ if environ is None else environ
        defaults = cls()

        dedupe = defaults.dedupe_repeated_lazy_keys
        raw = env.get(cls._DEDUPE_ENV, "").strip().lower()
        if raw in {"1", "true", "yes"}:
            dedupe = True
        elif raw in {"0", "false", "no"}:
            dedupe = False

        max_depth = defaults.max_navigation_depth
        raw = env.get(cls._MAX_DEPTH_ENV)
        if raw is not None:
            try:
                max_depth = max(int(raw), 0)
            except ValueError:
                pass

        tie_break = defaults.tie_break
        raw = env.get(cls._TIE_BREAK_ENV)
        if raw:
            try:
                tie_break = TieBreak(raw.strip())
            except ValueError:
                pass

        return cls(
            dedupe_repeated_lazy_keys=dedupe,
            max_navigation_depth=max_depth,
            tie_break=tie_break,
        )

    def with_overrides(self, **overrides) -> "AnalyzerConfig":
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
