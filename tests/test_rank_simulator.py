"""Tests for engine/rank_simulator.py"""

import math
import random
import sys
sys.path.append(".")

import pytest

from engine.models import AnalyticsInputError, LongTermGoal, SubjectScore, TestRecord
from engine.rank_simulator import RankSimulator, box_muller, parse_target_rank


def history(marks, ranks):
    return [
        TestRecord(id=f"t{i}", test_date=f"2024-02-{i + 1:02d}", test_name=f"Mock {i + 1}",
                   total=SubjectScore(marks=m, rank=r))
        for i, (m, r) in enumerate(zip(marks, ranks))
    ]


HISTORY = history([120, 150, 135, 170, 160], [4000, 2200, 3000, 1200, 1600])


def simulator(seed=7, **kwargs):
    return RankSimulator(rng=random.Random(seed), **kwargs)


class ZeroFirstRandom(random.Random):
    """Returns 0.0 once before behaving normally."""

    def __init__(self, seed):
        super().__init__(seed)
        self.zero_pending = True

    def random(self):
        if self.zero_pending:
            self.zero_pending = False
            return 0.0
        return super().random()


def test_box_muller_resamples_zero():
    value = box_muller(ZeroFirstRandom(1))

    assert math.isfinite(value)


def test_percentiles_are_ordered():
    for seed in range(5):
        forecast, _, _ = simulator(seed).run(HISTORY)

        assert forecast.best_case <= forecast.likely <= forecast.worst_case


def test_higher_marks_mean_better_rank():
    model = simulator().fit_rank_model(HISTORY)

    assert model.slope < 0


def test_same_seed_same_forecast():
    first = simulator(42).run(HISTORY)
    second = simulator(42).run(HISTORY)

    assert first == second


def test_needs_three_records():
    assert simulator().run(HISTORY[:2]) == (None, None, None)


def test_goal_probability_bounds_and_default_target():
    _, goal, _ = simulator().run(HISTORY)

    assert 0 <= goal.probability <= 100
    assert goal.target_rank == 1000
    assert goal.text == "Top 1000"


def test_goal_probability_uses_target_from_goal_text():
    goals = [
        LongTermGoal(id="g1", text="Clear boards with 95", completed=True),
        LongTermGoal(id="g2", text="Get under AIR 50000"),
    ]
    _, goal, _ = simulator().run(HISTORY, goals)

    assert goal.target_rank == 50000
    assert goal.text == "Get under AIR 50000"
    assert goal.probability == 100


def test_parse_target_rank_fallback():
    goals = [LongTermGoal(id="g1", text="Stay consistent")]

    assert parse_target_rank(goals, 1000) == (1000, None)


def test_goal_probability_counts_ranks_at_or_better_than_target():
    goal = simulator().goal_probability([10.0, 20.0, 30.0, 40.0], [LongTermGoal(id="g", text="Top 20")])

    assert goal.probability == 50


def test_percentile_index_is_floored_and_clamped():
    ranks = list(range(10))
    sim = simulator()

    assert sim.percentile(ranks, 0.05) == 0
    assert sim.percentile(ranks, 0.5) == 5
    assert sim.percentile(ranks, 0.95) == 9
    assert sim.percentile(ranks, 1.0) == 9


def test_distribution_has_40_buckets_sorted_descending():
    forecast, _, _ = simulator().run(HISTORY)
    ranks = [b.rank for b in forecast.distribution]

    assert len(forecast.distribution) == 40
    assert ranks == sorted(ranks, reverse=True)
    # Samples outside [p1, p99] are not counted
    assert 0.95 <= sum(b.probability for b in forecast.distribution) <= 1.0


def test_zero_variance_history_gives_single_bucket():
    forecast, _, _ = simulator().run(history([150, 150, 150], [2000, 2000, 2000]))

    assert forecast.best_case == forecast.likely == forecast.worst_case == 2000
    assert len(forecast.distribution) == 1
    assert forecast.distribution[0].probability == 1.0


def test_huge_log_rank_is_clamped():
    sim = simulator()
    model = sim.fit_rank_model(history([10, 20, 30], [1, 1, 1]))
    model.slope = 100.0

    assert math.isfinite(sim.project_rank(model, 50))


@pytest.mark.parametrize("kwargs", [{"simulation_count": 0}, {"bucket_count": -1}])
def test_invalid_configuration(kwargs):
    with pytest.raises(AnalyticsInputError):
        RankSimulator(**kwargs)


def test_rank_model_is_fitted_once_per_run(caplog):
    with caplog.at_level("WARNING", logger="engine.trend_modeler"):
        simulator().run(history([150, 150, 150], [2000, 2000, 2000]))

    degenerate = [r for r in caplog.records if "Degenerate regression" in r.getMessage()]
    assert len(degenerate) == 1
