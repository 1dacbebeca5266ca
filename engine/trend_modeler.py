"""
Trend Modeler - Linear trends over the test history.

Features:
    - Ordinary least-squares regression on score / rank series
    - Next-test score and rank projection with a percentile trend line
    - Performance summary (averages, consistency, latest-vs-average)
    - Volatility metrics ("Sharpe ratio" of scores, 2-sigma testing zone)
    - Time-per-question against the user's targets

Regression:
    slope     = (nΣxy - ΣxΣy) / (nΣx² - (Σx)²)
    intercept = (Σy - slope·Σx) / n
"""

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import (
    SUBJECTS,
    Comparison,
    PercentileForecast,
    PerformanceSummary,
    QuestionAttempt,
    RadarPoint,
    TestRecord,
    TimeManagementStat,
    TrendPoint,
    UserSettings,
    VolatilityMetrics,
)

logger = logging.getLogger(__name__)

DEFAULT_COHORT_SIZE = 10000
COHORT_HEADROOM = 1.2
SUBJECT_NAMES = {"total": "Overall", "physics": "Physics", "chemistry": "Chemistry", "maths": "Maths"}


# ==================== Regression ====================

def linear_regression_xy(x: Sequence[float], y: Sequence[float]) -> Tuple[float, float]:
    """
    Fit y = slope * x + intercept.

    A degenerate fit (no points, or every x equal) returns a flat line
    through the mean of y.
    """
    n = len(y)
    if n == 0:
        return 0.0, 0.0

    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(a * b for a, b in zip(x, y))
    sum_xx = sum(a * a for a in x)

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        logger.warning("Degenerate regression over %d points; using flat trend", n)
        return 0.0, sum_y / n

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def linear_regression(y: Sequence[float]) -> Tuple[float, float]:
    """Regress a series against its index (0, 1, 2, ...)."""
    return linear_regression_xy(range(len(y)), y)


def mean_and_std(values: Sequence[float]) -> Tuple[float, float]:
    """Mean and population standard deviation."""
    if not values:
        return 0.0, 0.0
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return mean, math.sqrt(variance)


def percentile_for_rank(rank: float, cohort_size: float) -> float:
    if cohort_size <= 0:
        return 0.0
    return max(0.0, (cohort_size - rank) / cohort_size * 100)


# ==================== Trend Modeler ====================

class TrendModeler:
    """Projects the next test from the historical series."""

    def __init__(self, default_cohort_size: int = DEFAULT_COHORT_SIZE):
        self.default_cohort_size = default_cohort_size

    def cohort_size(self, records: Sequence[TestRecord], settings: Optional[UserSettings] = None) -> float:
        """
        Number of exam takers used to turn ranks into percentiles.

        Uses the profile's size for the latest test's exam sub-type when
        configured, else max(default, largest observed rank * 1.2).
        """
        sub_type = records[-1].sub_type if records else None
        if settings and sub_type and settings.cohort_sizes.get(sub_type, 0) > 0:
            return settings.cohort_sizes[sub_type]

        max_rank = max((r.total.rank for r in records), default=0)
        return max(self.default_cohort_size, max_rank * COHORT_HEADROOM)

    def percentile_forecast(self, records: Sequence[TestRecord],
                            settings: Optional[UserSettings] = None) -> Optional[PercentileForecast]:
        """Score / rank projection for the next test. None with < 2 tests."""
        if len(records) < 2:
            return None

        cohort = self.cohort_size(records, settings)
        scores = [r.total.marks for r in records]
        ranks = [r.total.rank for r in records]

        score_slope, score_intercept = linear_regression(scores)
        rank_slope, rank_intercept = linear_regression(ranks)

        next_index = len(records)
        predicted_score = score_slope * next_index + score_intercept
        predicted_rank = max(1.0, rank_slope * next_index + rank_intercept)

        chart_data = [
            TrendPoint(
                name=f"T{i + 1}",
                test_name=record.test_name,
                score=record.total.marks,
                rank=record.total.rank,
                percentile=percentile_for_rank(record.total.rank, cohort),
                trend_percentile=percentile_for_rank(rank_slope * i + rank_intercept, cohort),
            )
            for i, record in enumerate(records)
        ]

        return PercentileForecast(
            chart_data=chart_data,
            predicted_score=round(predicted_score),
            predicted_rank=round(predicted_rank),
            predicted_percentile=round(percentile_for_rank(predicted_rank, cohort), 1),
            next_index=next_index,
            cohort_size=cohort,
        )

    # ==================== Summary KPIs ====================

    def performance_summary(self, records: Sequence[TestRecord]) -> Optional[PerformanceSummary]:
        if not records:
            return None

        latest = records[-1]
        n = len(records)

        avg_scores = {s: sum(r.subject(s).marks for r in records) / n for s in SUBJECTS}
        strongest = ("N/A", 0.0)
        best = -math.inf
        for subject, avg in avg_scores.items():
            if avg > best:
                best = avg
                strongest = (SUBJECT_NAMES[subject], avg)

        avg_score, std = mean_and_std([r.total.marks for r in records])
        avg_rank = sum(r.total.rank for r in records) / n
        accuracies = [r.metrics("total").accuracy for r in records]
        avg_accuracy = sum(accuracies) / n
        consistency = (1 - std / avg_score) * 100 if avg_score > 0 else 0.0

        return PerformanceSummary(
            latest_score=latest.total.marks,
            latest_rank=latest.total.rank,
            latest_accuracy=accuracies[-1],
            avg_scores=avg_scores,
            strongest_subject=strongest,
            consistency_score=consistency,
            score_comparison=_compare(latest.total.marks, avg_score),
            rank_comparison=_compare(latest.total.rank, avg_rank),
            accuracy_comparison=_compare(accuracies[-1], avg_accuracy),
            radar=self.radar(records),
        )

    def radar(self, records: Sequence[TestRecord], window: int = 3) -> List[RadarPoint]:
        """Average per-subject score over the most recent tests."""
        recent = list(records)[-window:]
        if not recent:
            return []

        points = []
        for subject in SUBJECTS:
            scores = [r.subject(subject) for r in recent]
            average = sum(s.marks for s in scores) / len(scores)
            full_mark = max([s.max_marks or 60 for s in scores] + [60])
            points.append(RadarPoint(subject=SUBJECT_NAMES[subject], average=round(average), full_mark=full_mark))
        return points

    def volatility_metrics(self, records: Sequence[TestRecord]) -> Optional[VolatilityMetrics]:
        """Score volatility and whether the latest test left the 2-sigma band."""
        if len(records) < 2:
            return None

        mean, std = mean_and_std([r.total.marks for r in records])
        latest = records[-1].total.marks
        upper = mean + 2 * std
        lower = mean - 2 * std
        consistency = (1 - std / mean) * 100 if mean > 0 else 0.0

        if latest > upper:
            message = "Breaking Out (High)"
        elif latest < lower:
            message = "Breaking Down (Low)"
        else:
            message = "Stable"

        return VolatilityMetrics(
            sharpe_ratio=round(mean / std, 2) if std > 0 else 0.0,
            volatility_score=round(consistency),
            std_dev=round(std, 1),
            upper_band=upper,
            lower_band=lower,
            is_testing_out_of_zone=message != "Stable",
            zone_message=message,
        )

    def time_management(self, attempts: Iterable[QuestionAttempt],
                        settings: Optional[UserSettings] = None) -> List[TimeManagementStat]:
        """Average logged time per question, per subject."""
        totals: Dict[str, List[float]] = {}
        for attempt in attempts:
            if attempt.time_spent is not None and attempt.time_spent > 0:
                totals.setdefault(attempt.subject, []).append(attempt.time_spent)

        targets = settings.target_times if settings else {}
        stats = []
        for subject in sorted(totals):
            times = totals[subject]
            avg = sum(times) / len(times)
            target = targets.get(subject)
            stats.append(TimeManagementStat(
                subject=subject,
                avg_time=avg,
                target_time=target,
                timed_attempts=len(times),
                over_target=target is not None and avg > target,
            ))
        return stats


def _compare(latest: float, average: float) -> Comparison:
    if latest > average:
        trend = "up"
    elif latest < average:
        trend = "down"
    else:
        trend = "flat"
    return Comparison(diff=latest - average, trend=trend)
