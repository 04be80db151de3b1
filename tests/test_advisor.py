import pytest

from ormcost.core.advisor import (
    CostDelta,
    PlanAdvisor,
    candidate_strategies,
    rank_key,
)
from ormcost.core.config import AnalyzerConfig, TieBreak
from ormcost.core.errors import DepthLimitExceeded, NotFound
from ormcost.core.estimator import CostResult
from ormcost.core.patterns import AccessPattern, LoadStrategy, NavigationStep


def test_worked_example_prefers_eager_projected(navigation_schema, menu_pattern):
    rec = PlanAdvisor(navigation_schema).advise(menu_pattern)

    table = {r.strategy: (r.query_count, r.total_bytes) for r in rec.results}
    assert table == {
        "lazy": (5, 1648),
        "eagerInclude": (1, 1648),
        "eagerProjected": (1, 1632),
    }
    assert rec.strategy is LoadStrategy.EAGER_PROJECTED
    assert rec.runner_up.strategy == "eagerInclude"
    assert rec.delta == CostDelta(query_count=0, total_bytes=16)


def test_dedupe_changes_only_the_lazy_row(navigation_schema, menu_pattern):
    config = AnalyzerConfig(dedupe_repeated_lazy_keys=True)
    rec = PlanAdvisor(navigation_schema, config).advise(menu_pattern)

    lazy = rec.result_for(LoadStrategy.LAZY)
    assert (lazy.query_count, lazy.total_bytes) == (4, 1444)
    assert rec.result_for(LoadStrategy.EAGER_INCLUDE).total_bytes == 1648


def test_bytes_then_queries_objective(navigation_schema, menu_pattern):
    config = AnalyzerConfig(
        dedupe_repeated_lazy_keys=True, tie_break=TieBreak.BYTES_THEN_QUERIES
    )
    rec = PlanAdvisor(navigation_schema, config).advise(menu_pattern)

    assert [r.strategy for r in rec.results] == [
        "lazy",
        "eagerProjected",
        "eagerInclude",
    ]
    assert rec.delta == CostDelta(query_count=-3, total_bytes=188)


def test_projection_candidate_skipped_without_projection(navigation_schema):
    pattern = AccessPattern("Navigation", 4, (NavigationStep("Navigation.MenuIcon"),))
    rec = PlanAdvisor(navigation_schema).advise(pattern)

    assert candidate_strategies(pattern) == [
        LoadStrategy.LAZY,
        LoadStrategy.EAGER_INCLUDE,
    ]
    assert {r.strategy for r in rec.results} == {"lazy", "eagerInclude"}
    assert rec.result_for(LoadStrategy.EAGER_PROJECTED) is None


def test_cartesian_explosion_can_make_lazy_cheaper_in_bytes(blog_schema):
    pattern = AccessPattern(
        "Blog",
        20,
        (NavigationStep("Blog.Posts"), NavigationStep("Post.Comments")),
    )
    config = AnalyzerConfig(tie_break=TieBreak.BYTES_THEN_QUERIES)
    rec = PlanAdvisor(blog_schema, config).advise(pattern)

    eager = rec.result_for(LoadStrategy.EAGER_INCLUDE)
    lazy = rec.result_for(LoadStrategy.LAZY)
    assert eager.total_rows == 1000
    assert eager.total_bytes == 1000 * (104 + 1008 + 212)
    assert lazy.total_bytes < eager.total_bytes
    assert rec.strategy is LoadStrategy.LAZY


def test_declared_assignment_is_reported(blog_schema):
    pattern = AccessPattern(
        "Blog",
        20,
        (
            NavigationStep("Blog.Posts", strategy=LoadStrategy.EAGER_INCLUDE),
            NavigationStep("Post.Comments", strategy=LoadStrategy.LAZY),
        ),
    )
    rec = PlanAdvisor(blog_schema).advise(pattern)

    assert rec.declared.strategy == "declared"
    assert rec.declared.query_count == 201


def test_root_only_pattern_ties_resolve_to_lazy(navigation_schema):
    rec = PlanAdvisor(navigation_schema).advise(AccessPattern("Navigation", 4))

    assert rec.best.query_count == 1
    assert rec.runner_up is not None
    assert rec.delta == CostDelta(query_count=0, total_bytes=0)
    assert rec.strategy is LoadStrategy.LAZY


def test_advice_is_idempotent(navigation_schema, menu_pattern):
    advisor = PlanAdvisor(navigation_schema)

    assert advisor.advise(menu_pattern) == advisor.advise(menu_pattern)


def test_rank_key_breaks_exact_ties_by_strategy_order():
    lazy = CostResult(total_bytes=10, query_count=1, strategy="lazy")
    eager = CostResult(total_bytes=10, query_count=1, strategy="eagerInclude")

    assert rank_key(lazy, TieBreak.QUERIES_THEN_BYTES) < rank_key(
        eager, TieBreak.QUERIES_THEN_BYTES
    )


def test_advisor_surfaces_pattern_errors(navigation_schema):
    advisor = PlanAdvisor(navigation_schema, AnalyzerConfig(max_navigation_depth=0))

    with pytest.raises(DepthLimitExceeded):
        advisor.advise(
            AccessPattern("Navigation", 4, (NavigationStep("Navigation.MenuIcon"),))
        )
    with pytest.raises(NotFound, match="Ghost"):
        advisor.advise(AccessPattern("Ghost", 4))
