"""
ROI Classifier - Where does study time pay off most?

Each topic with enough attempts gets an (effort, impact) point:
    impact = weightage * wrong * 10
    effort = 1 / (accuracy + 0.2) * weightage * error_type_modifier * 15

Quadrants (thresholds are scale-dependent on the constants above):
    high impact, low effort  -> Quick Wins
    high impact, high effort -> Big Bets
    low impact,  low effort  -> Maintenance
    low impact,  high effort -> Money Pits
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from .models import (
    ErrorReason,
    NextBestAction,
    QuestionAttempt,
    QuestionStatus,
    ROIPoint,
    Weightage,
)
from .syllabus import TOPIC_WEIGHTAGE

logger = logging.getLogger(__name__)

QUICK_WINS = "Quick Wins"
BIG_BETS = "Big Bets"
MAINTENANCE = "Maintenance"
MONEY_PITS = "Money Pits"

# Silly mistakes and misreads are cheap to fix; conceptual gaps are not
ERROR_TYPE_MODIFIERS = {
    ErrorReason.SILLY_MISTAKE.value: 0.4,
    ErrorReason.MISREAD_QUESTION.value: 0.4,
    ErrorReason.CONCEPTUAL_GAP.value: 1.5,
}


def weightage_for(topic: str, table: Mapping[str, str]) -> Weightage:
    try:
        return Weightage(table.get(topic, Weightage.MEDIUM.value))
    except ValueError:
        logger.warning("Unknown weightage %r for topic %r; using Medium", table.get(topic), topic)
        return Weightage.MEDIUM


def dominant_reason(reasons: Mapping[str, int], default: str) -> str:
    """Most frequent reason; the first one seen wins a tie."""
    best, best_count = default, 0
    for reason, count in reasons.items():
        if count > best_count:
            best, best_count = reason, count
    return best


class ROIClassifier:

    MIN_ATTEMPTS = 3
    IMPACT_THRESHOLD = 30.0
    EFFORT_THRESHOLD = 30.0

    def __init__(self, weightage: Optional[Mapping[str, str]] = None,
                 impact_threshold: float = IMPACT_THRESHOLD,
                 effort_threshold: float = EFFORT_THRESHOLD,
                 min_attempts: int = MIN_ATTEMPTS):
        self.weightage = TOPIC_WEIGHTAGE if weightage is None else weightage
        self.impact_threshold = impact_threshold
        self.effort_threshold = effort_threshold
        self.min_attempts = min_attempts

    def quadrant(self, effort: float, impact: float) -> str:
        high_impact = impact >= self.impact_threshold
        high_effort = effort >= self.effort_threshold
        if high_impact:
            return BIG_BETS if high_effort else QUICK_WINS
        return MONEY_PITS if high_effort else MAINTENANCE

    def classify(self, attempts: Iterable[QuestionAttempt]) -> List[ROIPoint]:
        topics: Dict[str, Dict] = {}

        for attempt in attempts:
            if not attempt.has_topic:
                continue
            stats = topics.setdefault(attempt.topic, {
                "attempts": 0, "correct": 0, "wrong": 0,
                "subject": attempt.subject, "reasons": {},
            })
            stats["attempts"] += 1
            if attempt.status == QuestionStatus.FULLY_CORRECT:
                stats["correct"] += 1
            if attempt.is_error:
                stats["wrong"] += 1
                if attempt.reason_for_error:
                    reasons = stats["reasons"]
                    reasons[attempt.reason_for_error] = reasons.get(attempt.reason_for_error, 0) + 1

        points = []
        for topic, stats in topics.items():
            if stats["attempts"] < self.min_attempts:
                continue
            points.append(self.score_topic(topic, stats))

        logger.debug("Classified %d of %d topics", len(points), len(topics))
        return points

    def score_topic(self, topic: str, stats: Mapping) -> ROIPoint:
        weight = weightage_for(topic, self.weightage).multiplier
        accuracy = stats["correct"] / stats["attempts"] if stats["attempts"] > 0 else 0.0
        reason = dominant_reason(stats["reasons"], ErrorReason.GUESS.value)
        modifier = ERROR_TYPE_MODIFIERS.get(reason, 1.0)

        impact = weight * stats["wrong"] * 10
        effort = (1 / (accuracy + 0.2)) * weight * modifier * 15

        return ROIPoint(
            topic=topic,
            subject=stats["subject"],
            effort=effort,
            impact=impact,
            bubble_size=stats["attempts"] * 5,
            quadrant=self.quadrant(effort, impact),
        )

    def next_best_action(self, attempts: Iterable[QuestionAttempt]) -> Optional[NextBestAction]:
        """The topic with the most Wrong answers, and why they happen."""
        topics: Dict[str, Dict] = {}
        for attempt in attempts:
            if attempt.status != QuestionStatus.WRONG or not attempt.has_topic:
                continue
            stats = topics.setdefault(attempt.topic, {"count": 0, "subject": attempt.subject, "reasons": {}})
            stats["count"] += 1
            if attempt.reason_for_error:
                stats["reasons"][attempt.reason_for_error] = stats["reasons"].get(attempt.reason_for_error, 0) + 1

        if not topics:
            return None

        topic, stats = max(topics.items(), key=lambda item: item[1]["count"])
        return NextBestAction(
            topic=topic,
            subject=stats["subject"],
            error_count=stats["count"],
            dominant_reason=dominant_reason(stats["reasons"], "General Practice"),
            potential_gain=stats["count"] * 4,
        )
