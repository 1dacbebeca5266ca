"""
Error Aggregator - Groups wrong / partially-correct attempts.

Features:
    - Weak topic ranking (error count, tests affected, subject)
    - Pareto cumulative impact over the top ranked topics
    - Fatigue curve: error rate per question-number decile
    - Error reason distribution, per-test error trend, per-type performance
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence

from .models import (
    ErrorAnalysis,
    ErrorReason,
    ErrorTrendPoint,
    FatigueBucket,
    ParetoPoint,
    QuestionAttempt,
    QuestionStatus,
    QuestionTypePerformance,
    ReasonCount,
    TestRecord,
    WeakTopicStat,
    record_date_key,
)

logger = logging.getLogger(__name__)


class ErrorAggregator:
    """
    Aggregates error attempts into rankings and curves.

    An "error" is any attempt with status Wrong or Partially Correct.
    Attempts tagged with the "N/A" topic (or no topic) count toward
    totals but never appear in topic rankings.
    """

    PARETO_TOPICS = 20
    BUCKET_WIDTH = 10

    def __init__(self, pareto_topics: int = PARETO_TOPICS, bucket_width: int = BUCKET_WIDTH):
        self.pareto_topics = pareto_topics
        self.bucket_width = bucket_width

    def analyze(self, attempts: Sequence[QuestionAttempt],
                records: Sequence[TestRecord] = ()) -> ErrorAnalysis:
        """Run every aggregation over one attempt set."""
        errors = [a for a in attempts if a.is_error]
        weakest = self.weakest_topics(errors)

        logger.debug("Aggregated %d errors over %d attempts into %d weak topics",
                     len(errors), len(attempts), len(weakest))

        return ErrorAnalysis(
            total_errors=len(errors),
            weakest_topics=weakest,
            pareto=self.pareto(weakest),
            fatigue=self.fatigue_curve(attempts),
            error_reason_distribution=self.reason_distribution(errors),
            error_trend=self.error_trend(errors, records),
            performance_by_question_type=self.performance_by_question_type(attempts),
            error_reasons_by_subject=self.reasons_by_subject(errors),
            reasons_by_topic=self.reasons_by_topic(errors),
        )

    # ==================== Weak Topics ====================

    def weakest_topics(self, attempts: Iterable[QuestionAttempt]) -> List[WeakTopicStat]:
        """
        Rank topics by error count (descending).

        Equal counts are ordered alphabetically by topic so the ranking
        never depends on input order. The subject is the one seen first.
        """
        counts: Dict[str, int] = defaultdict(int)
        tests: Dict[str, set] = defaultdict(set)
        subjects: Dict[str, str] = {}

        for attempt in attempts:
            if not attempt.is_error or not attempt.has_topic:
                continue
            counts[attempt.topic] += 1
            tests[attempt.topic].add(attempt.test_id)
            subjects.setdefault(attempt.topic, attempt.subject)

        ranked = [
            WeakTopicStat(
                topic=topic,
                error_count=count,
                distinct_tests_affected=len(tests[topic]),
                subject=subjects[topic],
            )
            for topic, count in counts.items()
        ]
        ranked.sort(key=lambda s: (-s.error_count, s.topic))
        return ranked

    def pareto(self, weakest: Sequence[WeakTopicStat]) -> List[ParetoPoint]:
        """
        Cumulative share of errors covered by the top ranked topics.

        The denominator is every topic-attributed error, so when all
        topics fit in the window the curve ends at 100.
        """
        total = sum(s.error_count for s in weakest)
        running = 0
        points = []

        for stat in weakest[:self.pareto_topics]:
            running += stat.error_count
            points.append(ParetoPoint(
                topic=stat.topic,
                count=stat.error_count,
                cumulative_percentage=running / total * 100 if total > 0 else 0.0,
            ))

        return points

    # ==================== Fatigue ====================

    def fatigue_curve(self, attempts: Iterable[QuestionAttempt]) -> List[FatigueBucket]:
        """Error rate per question-number bucket, over ALL attempts."""
        buckets: Dict[int, List[int]] = {}  # bucket start -> [attempts, errors]

        for attempt in attempts:
            start = (attempt.question_number - 1) // self.bucket_width * self.bucket_width + 1
            bucket = buckets.setdefault(start, [0, 0])
            bucket[0] += 1
            if attempt.is_error:
                bucket[1] += 1

        return [
            FatigueBucket(
                range=f"{start}-{start + self.bucket_width - 1}",
                error_rate=errors / total * 100 if total > 0 else 0.0,
                attempts=total,
            )
            for start, (total, errors) in sorted(buckets.items())
        ]

    # ==================== Error Reasons ====================

    def reason_distribution(self, errors: Iterable[QuestionAttempt]) -> List[ReasonCount]:
        counts: Dict[str, int] = defaultdict(int)
        for attempt in errors:
            if attempt.reason_for_error:
                counts[attempt.reason_for_error] += 1

        ranked = [ReasonCount(name=name, value=value) for name, value in counts.items()]
        ranked.sort(key=lambda r: (-r.value, r.name))
        return ranked

    def reasons_by_subject(self, errors: Iterable[QuestionAttempt]) -> Dict[str, Dict[str, int]]:
        by_subject: Dict[str, Dict[str, int]] = {}
        for attempt in errors:
            if attempt.reason_for_error:
                reasons = by_subject.setdefault(attempt.subject, {})
                reasons[attempt.reason_for_error] = reasons.get(attempt.reason_for_error, 0) + 1
        return by_subject

    def reasons_by_topic(self, errors: Iterable[QuestionAttempt]) -> Dict[str, Dict[str, int]]:
        by_topic: Dict[str, Dict[str, int]] = {}
        for attempt in errors:
            if attempt.has_topic and attempt.reason_for_error:
                reasons = by_topic.setdefault(attempt.topic, {})
                reasons[attempt.reason_for_error] = reasons.get(attempt.reason_for_error, 0) + 1
        return by_topic

    def error_trend(self, errors: Iterable[QuestionAttempt],
                    records: Sequence[TestRecord]) -> List[ErrorTrendPoint]:
        """
        Per-test error reason counts, ordered by test date.

        Only tests present in `records` get a point; errors from unknown
        tests are left out of the trend.
        """
        known_reasons = [r.value for r in ErrorReason]
        entries: Dict[str, Dict] = {}

        for record in records:
            entries[record.id] = {
                "record": record,
                "total": 0,
                "counts": {reason: 0 for reason in known_reasons},
            }

        for attempt in errors:
            entry = entries.get(attempt.test_id)
            if entry is None or not attempt.reason_for_error:
                continue
            counts = entry["counts"]
            counts[attempt.reason_for_error] = counts.get(attempt.reason_for_error, 0) + 1
            entry["total"] += 1

        ordered = sorted(entries.values(), key=lambda e: record_date_key(e["record"].test_date))

        trend = []
        for entry in ordered:
            divisor = entry["total"] or 1
            record = entry["record"]
            trend.append(ErrorTrendPoint(
                test_id=record.id,
                date=record.test_date,
                name=record.test_name,
                total_errors=entry["total"],
                reason_counts=dict(entry["counts"]),
                reason_percentages={
                    reason: count / divisor * 100 for reason, count in entry["counts"].items()
                },
            ))
        return trend

    # ==================== Question Types ====================

    def performance_by_question_type(self, attempts: Iterable[QuestionAttempt]) -> List[QuestionTypePerformance]:
        stats: Dict[str, Dict[str, float]] = {}

        for attempt in attempts:
            if not attempt.question_type:
                continue
            entry = stats.setdefault(attempt.question_type, {"count": 0, "errors": 0, "marks": 0.0})
            entry["count"] += 1
            if attempt.status == QuestionStatus.WRONG:
                entry["errors"] += 1
            entry["marks"] += attempt.marks_awarded

        performance = [
            QuestionTypePerformance(
                name=name,
                errors=int(entry["errors"]),
                total_attempts=int(entry["count"]),
                error_rate=entry["errors"] / entry["count"] * 100 if entry["count"] > 0 else 0.0,
                avg_marks=entry["marks"] / entry["count"] if entry["count"] > 0 else 0.0,
            )
            for name, entry in stats.items()
        ]
        performance.sort(key=lambda p: p.errors, reverse=True)
        return performance
