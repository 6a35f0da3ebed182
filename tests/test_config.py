"""Tests for crawl configuration."""

import pytest

from gamecrawl import ConfigError, CountBudget, CrawlConfig, TimeBudget, budget_from_options
from gamecrawl.aio import CrawlPlan, StopReason
from gamecrawl.testing import FakeGraphFetcher, wide_graph


class TestBudgets:
    """Budget construction and the count/time exclusivity."""

    def test_count_budget(self):
        budget = budget_from_options(count=5)
        assert budget == CountBudget(5)
        assert budget.kind == "count"

    def test_time_budget(self):
        budget = budget_from_options(duration=2.5)
        assert budget == TimeBudget(2.5)
        assert budget.kind == "time"

    def test_conflicting_budget(self):
        with pytest.raises(ConfigError, match="mutually exclusive"):
            budget_from_options(count=5, duration=10)

    def test_missing_budget(self):
        with pytest.raises(ConfigError, match="required"):
            budget_from_options()


class TestCrawlConfig:
    """CrawlConfig.validate collects every problem."""

    def test_valid_config(self):
        config = CrawlConfig.by_count([400], 10, max_concurrent=4, max_retries=1)
        assert config.validate() == []
        config.check()

    def test_by_time(self):
        config = CrawlConfig.by_time([400, 620], 30.0)
        assert config.budget == TimeBudget(30.0)
        assert config.seeds == [400, 620]

    def test_no_seeds(self):
        errors = CrawlConfig.by_count([], 10).validate()
        assert "at least one seed is required" in errors

    @pytest.mark.parametrize("seeds", ["400", b"400"])
    def test_string_seeds_are_rejected(self, seeds):
        errors = CrawlConfig(seeds=seeds, budget=CountBudget(5)).validate()
        assert errors == ["seeds must be a sequence of ids, not a single string"]

    def test_missing_budget(self):
        errors = CrawlConfig(seeds=[400]).validate()
        assert "a count or duration budget is required" in errors

    def test_collects_all_errors(self):
        config = CrawlConfig(
            seeds=[],
            budget=CountBudget(0),
            max_concurrent=0,
            max_retries=-1,
            retry_backoff=-1.0,
            max_depth=-1,
        )
        assert len(config.validate()) == 6

    def test_non_positive_duration(self):
        errors = CrawlConfig.by_time([400], 0).validate()
        assert errors == ["time budget must be positive"]

    def test_check_raises(self):
        with pytest.raises(ConfigError) as exc_info:
            CrawlConfig(seeds=[400], budget=CountBudget(-3)).check()
        assert exc_info.value.errors == ["count budget must be positive"]


class TestCrawlPlan:
    """CrawlPlan refuses to start on bad configuration."""

    def test_invalid_config_raises_before_fetching(self):
        fetcher = FakeGraphFetcher({'A': []})
        with pytest.raises(ConfigError):
            CrawlPlan(CrawlConfig(seeds=[], budget=CountBudget(1)), fetcher=fetcher)
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_execute(self):
        fetcher = FakeGraphFetcher({'A': ['B'], 'B': []})
        plan = CrawlPlan(CrawlConfig.by_count(['A'], 5), fetcher=fetcher)

        result = await plan.execute()

        assert result.node_ids == ['A', 'B']
        assert plan.last_run.result().node_ids == ['A', 'B']

    @pytest.mark.asyncio
    async def test_stream(self):
        fetcher = FakeGraphFetcher({'A': ['B', 'C'], 'B': [], 'C': []})
        plan = CrawlPlan(CrawlConfig.by_count(['A'], 2), fetcher=fetcher)

        seen = [record.node_id async for record in plan.stream()]

        assert seen == ['A', 'B']
        assert plan.last_run.result().stop_reason.value == "count_reached"

    @pytest.mark.asyncio
    async def test_plan_does_not_close_callers_fetcher(self):
        closed = []

        class TrackingFetcher(FakeGraphFetcher):
            async def close(self):
                closed.append(True)

        plan = CrawlPlan(CrawlConfig.by_count(['A'], 1), fetcher=TrackingFetcher({'A': []}))
        await plan.execute()

        assert closed == []

    @pytest.mark.asyncio
    async def test_early_break_drains_before_closing_owned_fetcher(self):
        graph = wide_graph('root', 10)
        in_flight_at_close = []

        class ClosingFetcher(FakeGraphFetcher):
            async def close(self):
                in_flight_at_close.append(self.in_flight)

        class OwningPlan(CrawlPlan):
            def _create_fetcher(self):
                return ClosingFetcher(graph, delays={leaf: 0.05 for leaf in graph['root']})

        plan = OwningPlan(CrawlConfig.by_count(['root'], 100, max_concurrent=5))
        stream = plan.stream()
        seen = []
        async for record in stream:
            seen.append(record.node_id)
            if len(seen) == 2:
                break
        await stream.aclose()

        assert in_flight_at_close == [0]
        assert plan.last_run.in_flight == {}
        assert plan.last_run.result().stop_reason is StopReason.STREAM_CLOSED
