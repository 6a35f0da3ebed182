"""Tests for termination policies."""

import pytest

from gamecrawl.aio.core import CountPolicy, DeadlinePolicy, create_termination_policy
from gamecrawl.config import CountBudget, TimeBudget
from gamecrawl.testing import FakeClock


class TestCountPolicy:
    """Count budgets close dispatch and acceptance at the target."""

    def test_terminal_at_target(self):
        policy = CountPolicy(3)
        policy.start()

        assert not policy.is_terminal(2)
        assert policy.is_terminal(3)
        assert policy.is_terminal(4)

    def test_acceptance_closes_at_target(self):
        policy = CountPolicy(2)
        assert policy.accepts(0)
        assert policy.accepts(1)
        assert not policy.accepts(2)

    def test_full_headroom_at_start(self):
        policy = CountPolicy(2)
        policy.start()

        assert policy.remaining(0) == 2
        assert not policy.is_terminal(0)

    def test_reason(self):
        assert CountPolicy(1).reason == "count_reached"


class TestDeadlinePolicy:
    """Time budgets close dispatch at the deadline only."""

    def test_not_terminal_before_start(self):
        clock = FakeClock()
        policy = DeadlinePolicy(5.0, clock)
        clock.advance(100)
        assert not policy.is_terminal(0)

    def test_terminal_at_deadline(self):
        clock = FakeClock(start=10.0)
        policy = DeadlinePolicy(5.0, clock)
        policy.start()

        assert policy.deadline == 15.0
        clock.advance(4.9)
        assert not policy.is_terminal(0)
        clock.advance(0.1)
        assert policy.is_terminal(0)

    def test_always_accepts_in_flight_results(self):
        clock = FakeClock()
        policy = DeadlinePolicy(1.0, clock)
        policy.start()
        clock.advance(10)

        assert policy.is_terminal(0)
        assert policy.accepts(1000)

    def test_elapsed(self):
        clock = FakeClock()
        policy = DeadlinePolicy(1.0, clock)
        assert policy.elapsed() == 0.0
        policy.start()
        clock.advance(2.5)
        assert policy.elapsed() == 2.5


class TestFactory:
    """create_termination_policy picks the variant from the budget."""

    def test_count_budget(self):
        policy = create_termination_policy(CountBudget(7))
        assert isinstance(policy, CountPolicy)
        assert policy.target == 7

    def test_time_budget(self):
        clock = FakeClock()
        policy = create_termination_policy(TimeBudget(3.0), clock)
        assert isinstance(policy, DeadlinePolicy)
        assert policy.clock is clock

    def test_unknown_budget(self):
        with pytest.raises(ValueError):
            create_termination_policy("ten")
