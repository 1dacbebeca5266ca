"""
Marking - Question marking schemes and per-subject metric blocks.

A question type label either carries its scheme explicitly
("Single Correct (+4, -1)") or is resolved from keyword defaults.
"""

import math
import re
from typing import Optional, Tuple

from .models import QuestionAttempt, QuestionStatus, SubjectMetrics, SubjectScore

SCHEME_PATTERN = re.compile(r"\(\s*\+(\d+)\s*,\s*(-?\d+)\s*\)")

# Keyword -> (positive, negative) when the label carries no scheme
KEYWORD_SCHEMES = [
    ("single", (3, -1)),
    ("multiple", (4, -2)),
    ("integer", (3, 0)),
]
FALLBACK_SCHEME = (4, -1)


def get_marking_scheme(question_type: str,
                       attempt: Optional[QuestionAttempt] = None) -> Tuple[float, float]:
    """
    Resolve (positive, negative) marks for a question.

    Explicit marks on the attempt win over anything parsed from the label.
    """
    if attempt is not None and attempt.positive_marks is not None and attempt.negative_marks is not None:
        return attempt.positive_marks, attempt.negative_marks

    label = question_type or ""
    match = SCHEME_PATTERN.search(label)
    if match:
        return int(match.group(1)), int(match.group(2))

    lower = label.lower()
    for keyword, scheme in KEYWORD_SCHEMES:
        if keyword in lower:
            return scheme

    return FALLBACK_SCHEME


def scheme_for(attempt: QuestionAttempt) -> Tuple[float, float]:
    return get_marking_scheme(attempt.question_type, attempt)


def marks_for_status(status: QuestionStatus, question_type: str,
                     attempt: Optional[QuestionAttempt] = None) -> Optional[float]:
    """Marks a status earns under the scheme. Partial credit is user-entered, so None."""
    positive, negative = get_marking_scheme(question_type, attempt)

    if status == QuestionStatus.FULLY_CORRECT:
        return positive
    if status == QuestionStatus.WRONG:
        return negative
    if status == QuestionStatus.UNANSWERED:
        return 0
    return None


def calculate_metrics(score: SubjectScore, total_questions: int = 25) -> SubjectMetrics:
    """Accuracy, attempt rate and related ratios for one score block."""
    correct, wrong, partial, marks = score.correct, score.wrong, score.partial, score.marks
    attempted = correct + wrong + partial

    accuracy = correct / (correct + wrong) * 100 if (correct + wrong) > 0 else 0.0
    attempt_rate = attempted / total_questions * 100 if total_questions > 0 else 0.0
    if wrong > 0:
        cw_ratio = correct / wrong
    else:
        cw_ratio = math.inf if correct > 0 else 0.0
    spaq = marks / attempted if attempted > 0 else 0.0
    unattempted = (total_questions - attempted) / total_questions * 100 if total_questions > 0 else 0.0
    negative_impact = wrong * 1 / (correct * 4) * 100 if correct > 0 else 0.0
    realized = marks / (correct * 4) * 100 if correct > 0 else 0.0

    return SubjectMetrics(
        accuracy=accuracy,
        attempt_rate=attempt_rate,
        cw_ratio=cw_ratio,
        spaq=spaq,
        unattempted_percent=unattempted,
        negative_mark_impact=negative_impact,
        score_potential_realized=realized,
    )
