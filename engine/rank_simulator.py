"""
Rank Simulator - Monte Carlo rank forecast.

Pipeline:
    1. Fit ln(rank) = slope * marks + intercept over the history
    2. Sample marks ~ Normal(mean, std) with a Box-Muller transform
    3. Map every sample through the log-linear model to a rank
    4. Read best / likely / worst case off the 5th / 50th / 95th percentile
    5. Goal probability = share of samples at or better than the target
    6. 40-bucket histogram over the 1st-99th percentile range

The random source is injected so a seeded run is reproducible.
"""

import bisect
import logging
import math
import random
import re
from typing import List, Optional, Sequence, Tuple

from .models import (
    AnalyticsInputError,
    DistributionBucket,
    GoalProbability,
    LongTermGoal,
    RankForecast,
    RankModel,
    TestRecord,
)
from .trend_modeler import linear_regression_xy, mean_and_std

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"\d+")

# exp() overflows just above 709
MAX_LOG_RANK = 700.0


def box_muller(rng: random.Random) -> float:
    """One standard normal draw."""
    u1 = 0.0
    while u1 == 0.0:
        u1 = rng.random()
    u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def parse_target_rank(goals: Sequence[LongTermGoal], default: int) -> Tuple[int, Optional[LongTermGoal]]:
    """
    Target rank from the first incomplete goal that mentions a number.

    "Get under AIR 5000" -> 5000. Falls back to `default`.
    """
    for goal in goals:
        if goal.completed:
            continue
        match = NUMBER_PATTERN.search(goal.text or "")
        if match:
            return int(match.group(0)), goal
    return default, None


class RankSimulator:
    """Turns score variance into a probabilistic rank forecast."""

    SIMULATION_COUNT = 5000
    MIN_RECORDS = 3
    BUCKET_COUNT = 40
    DEFAULT_TARGET_RANK = 1000

    def __init__(self, rng: Optional[random.Random] = None,
                 simulation_count: int = SIMULATION_COUNT,
                 bucket_count: int = BUCKET_COUNT,
                 default_target_rank: int = DEFAULT_TARGET_RANK):
        if simulation_count <= 0:
            raise AnalyticsInputError("simulation_count must be positive")
        if bucket_count <= 0:
            raise AnalyticsInputError("bucket_count must be positive")
        self.rng = rng or random.Random()
        self.simulation_count = simulation_count
        self.bucket_count = bucket_count
        self.default_target_rank = default_target_rank

    # ==================== Model ====================

    def fit_rank_model(self, records: Sequence[TestRecord]) -> Optional[RankModel]:
        if len(records) < self.MIN_RECORDS:
            return None
        marks = [r.total.marks for r in records]
        log_ranks = [math.log(max(1, r.total.rank)) for r in records]
        slope, intercept = linear_regression_xy(marks, log_ranks)
        return RankModel(slope=slope, intercept=intercept)

    def project_rank(self, model: RankModel, marks: float) -> float:
        log_rank = model.expected_log_rank(marks)
        if log_rank > MAX_LOG_RANK:
            logger.warning("Projected log-rank %.1f clamped to %.1f", log_rank, MAX_LOG_RANK)
            log_rank = MAX_LOG_RANK
        return math.exp(log_rank)

    # ==================== Simulation ====================

    def simulate(self, records: Sequence[TestRecord],
                 model: Optional[RankModel] = None) -> Optional[List[float]]:
        """Sorted simulated ranks, or None with too little history."""
        if model is None:
            model = self.fit_rank_model(records)
        if model is None:
            return None

        mean, std = mean_and_std([r.total.marks for r in records])
        ranks = [
            self.project_rank(model, mean + box_muller(self.rng) * std)
            for _ in range(self.simulation_count)
        ]
        ranks.sort()

        logger.debug("Simulated %d ranks (mean marks %.1f, std %.1f)", len(ranks), mean, std)
        return ranks

    def percentile(self, ranks: Sequence[float], fraction: float) -> float:
        index = min(len(ranks) - 1, int(math.floor(len(ranks) * fraction)))
        return ranks[index]

    def forecast(self, ranks: Sequence[float]) -> RankForecast:
        return RankForecast(
            best_case=round(self.percentile(ranks, 0.05)),
            likely=round(self.percentile(ranks, 0.50)),
            worst_case=round(self.percentile(ranks, 0.95)),
            distribution=self.distribution(ranks),
        )

    def goal_probability(self, ranks: Sequence[float], goals: Sequence[LongTermGoal] = ()) -> GoalProbability:
        target, goal = parse_target_rank(goals, self.default_target_rank)
        hits = bisect.bisect_right(ranks, target)
        probability = hits / len(ranks) * 100 if ranks else 0.0
        return GoalProbability(
            target_rank=target,
            probability=round(probability),
            text=goal.text if goal else f"Top {target}",
        )

    def distribution(self, ranks: Sequence[float]) -> List[DistributionBucket]:
        """
        Equal-width histogram over [p1, p99], sorted by rank descending.

        The last bucket is closed on the right so p99 itself is counted.
        """
        if not ranks:
            return []

        total = len(ranks)
        low = self.percentile(ranks, 0.01)
        high = self.percentile(ranks, 0.99)
        width = (high - low) / self.bucket_count

        if width <= 0:
            count = bisect.bisect_right(ranks, high) - bisect.bisect_left(ranks, low)
            return [DistributionBucket(rank=round(low), probability=count / total)]

        buckets = []
        for i in range(self.bucket_count):
            start = low + i * width
            end = high if i == self.bucket_count - 1 else start + width
            if i == self.bucket_count - 1:
                count = bisect.bisect_right(ranks, end) - bisect.bisect_left(ranks, start)
            else:
                count = bisect.bisect_left(ranks, end) - bisect.bisect_left(ranks, start)
            buckets.append(DistributionBucket(rank=round(start + width / 2), probability=count / total))

        buckets.sort(key=lambda b: b.rank, reverse=True)
        return buckets

    # ==================== Entry Point ====================

    def run(self, records: Sequence[TestRecord],
            goals: Sequence[LongTermGoal] = ()) -> Tuple[Optional[RankForecast], Optional[GoalProbability], Optional[RankModel]]:
        """Forecast, goal probability and fitted model; all None with < 3 tests."""
        model = self.fit_rank_model(records)
        if model is None:
            return None, None, None
        ranks = self.simulate(records, model)
        return self.forecast(ranks), self.goal_probability(ranks, goals), model
