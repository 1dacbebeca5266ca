"""
Models - Input records and derived analytics structures.

Features:
    - Test records with per-subject score blocks
    - Question attempt logs (one row per logged question)
    - Static-table enums (status, error reason, weightage)
    - Result dataclasses for every analytics component
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple


class AnalyticsInputError(ValueError):
    """Raised when input cannot be turned into a record at all."""


# ==================== Enums ====================

class QuestionStatus(Enum):
    FULLY_CORRECT = "Fully Correct"
    PARTIALLY_CORRECT = "Partially Correct"
    WRONG = "Wrong"
    UNANSWERED = "Unanswered"

    @classmethod
    def parse(cls, value) -> "QuestionStatus":
        if isinstance(value, cls):
            return value
        for status in cls:
            if value in (status.value, status.name):
                return status
        raise AnalyticsInputError(f"Unknown question status: {value!r}")


class ErrorReason(Enum):
    SILLY_MISTAKE = "Silly Mistake"
    CONCEPTUAL_GAP = "Conceptual Gap"
    TIME_PRESSURE = "Time Pressure"
    MISREAD_QUESTION = "Misread Question"
    GUESS = "Guess"


class Weightage(Enum):
    """Exam importance tier of a topic."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def multiplier(self) -> float:
        return {"High": 1.5, "Medium": 1.0, "Low": 0.7}[self.value]


ERROR_STATUSES = (QuestionStatus.WRONG, QuestionStatus.PARTIALLY_CORRECT)
SUBJECTS = ("physics", "chemistry", "maths")
NO_TOPIC = "N/A"


# ==================== Input Records ====================

@dataclass(frozen=True)
class SubjectScore:
    """Score block for one subject (or the total) of a test."""
    marks: float = 0.0
    rank: int = 0
    correct: int = 0
    wrong: int = 0
    unanswered: int = 0
    partial: int = 0
    max_marks: Optional[float] = None


@dataclass(frozen=True)
class SubjectMetrics:
    """Derived accuracy / attempt-rate block for a SubjectScore."""
    accuracy: float
    attempt_rate: float
    cw_ratio: float
    spaq: float  # Score per attempted question
    unattempted_percent: float
    negative_mark_impact: float
    score_potential_realized: float


@dataclass(frozen=True)
class TestRecord:
    """One completed exam. Replaced wholesale on edit, never mutated."""
    __test__ = False  # Not a pytest test class

    id: str
    test_date: str  # ISO date, e.g. "2024-03-10"
    test_name: str
    physics: SubjectScore = field(default_factory=SubjectScore)
    chemistry: SubjectScore = field(default_factory=SubjectScore)
    maths: SubjectScore = field(default_factory=SubjectScore)
    total: SubjectScore = field(default_factory=SubjectScore)
    test_type: Optional[str] = None
    sub_type: Optional[str] = None  # e.g. "JEE Mains"
    difficulty: Optional[str] = None
    topper_score: Optional[float] = None

    def subject(self, name: str) -> SubjectScore:
        return getattr(self, name)

    def metrics(self, name: str = "total", total_questions: Optional[int] = None) -> SubjectMetrics:
        from .marking import calculate_metrics

        if total_questions is None:
            total_questions = 75 if name == "total" else 25
        return calculate_metrics(self.subject(name), total_questions)

    @classmethod
    def from_dict(cls, data: dict) -> "TestRecord":
        """Build from a camelCase or snake_case dict (e.g. a sync-layer export)."""
        def score(key: str) -> SubjectScore:
            block = data.get(key) or {}
            return SubjectScore(
                marks=block.get("marks") or 0.0,
                rank=block.get("rank") or 0,
                correct=block.get("correct") or 0,
                wrong=block.get("wrong") or 0,
                unanswered=block.get("unanswered") or 0,
                partial=block.get("partial") or 0,
                max_marks=block.get("max_marks", block.get("maxMarks")),
            )

        try:
            record_id = data["id"]
        except KeyError:
            raise AnalyticsInputError("Test record without an id") from None

        return cls(
            id=str(record_id),
            test_date=data.get("test_date", data.get("testDate")) or "",
            test_name=data.get("test_name", data.get("testName")) or "",
            physics=score("physics"),
            chemistry=score("chemistry"),
            maths=score("maths"),
            total=score("total"),
            test_type=data.get("test_type", data.get("type")),
            sub_type=data.get("sub_type", data.get("subType")),
            difficulty=data.get("difficulty"),
            topper_score=data.get("topper_score", data.get("topperScore")),
        )


@dataclass(frozen=True)
class QuestionAttempt:
    """A single logged question from a test."""
    test_id: str
    subject: str
    question_number: int
    status: QuestionStatus
    topic: str = NO_TOPIC
    marks_awarded: float = 0.0
    question_type: str = ""
    positive_marks: Optional[float] = None
    negative_marks: Optional[float] = None
    reason_for_error: Optional[str] = None
    time_spent: Optional[float] = None  # Seconds

    @property
    def is_error(self) -> bool:
        return self.status in ERROR_STATUSES

    @property
    def has_topic(self) -> bool:
        return bool(self.topic) and self.topic != NO_TOPIC

    @classmethod
    def from_dict(cls, data: dict) -> "QuestionAttempt":
        """Build from a camelCase or snake_case dict."""
        def get(snake: str, camel: str, default=None):
            return data.get(snake, data.get(camel, default))

        return cls(
            test_id=str(get("test_id", "testId") or ""),
            subject=data.get("subject") or "",
            question_number=int(get("question_number", "questionNumber") or 0),
            status=QuestionStatus.parse(data.get("status")),
            topic=data.get("topic") or NO_TOPIC,
            marks_awarded=get("marks_awarded", "marksAwarded") or 0.0,
            question_type=get("question_type", "questionType") or "",
            positive_marks=get("positive_marks", "positiveMarks"),
            negative_marks=get("negative_marks", "negativeMarks"),
            reason_for_error=get("reason_for_error", "reasonForError"),
            time_spent=get("time_spent", "timeSpent"),
        )


@dataclass(frozen=True)
class LongTermGoal:
    id: str
    text: str
    completed: bool = False


@dataclass
class UserSettings:
    """Optional profile settings that tune the models."""
    cohort_sizes: Dict[str, int] = field(default_factory=dict)  # sub_type -> takers
    target_times: Dict[str, float] = field(default_factory=dict)  # subject -> seconds/question


# ==================== Error Aggregation Results ====================

@dataclass
class WeakTopicStat:
    topic: str
    error_count: int
    distinct_tests_affected: int
    subject: str


@dataclass
class ParetoPoint:
    topic: str
    count: int
    cumulative_percentage: float


@dataclass
class FatigueBucket:
    range: str  # "1-10", "11-20", ...
    error_rate: float
    attempts: int


@dataclass
class ReasonCount:
    name: str
    value: int


@dataclass
class ErrorTrendPoint:
    test_id: str
    date: str
    name: str
    total_errors: int
    reason_counts: Dict[str, int]
    reason_percentages: Dict[str, float]


@dataclass
class QuestionTypePerformance:
    name: str
    errors: int
    total_attempts: int
    error_rate: float
    avg_marks: float


@dataclass
class ErrorAnalysis:
    """Everything the Error Aggregator derives from one attempt set."""
    total_errors: int = 0
    weakest_topics: List[WeakTopicStat] = field(default_factory=list)
    pareto: List[ParetoPoint] = field(default_factory=list)
    fatigue: List[FatigueBucket] = field(default_factory=list)
    error_reason_distribution: List[ReasonCount] = field(default_factory=list)
    error_trend: List[ErrorTrendPoint] = field(default_factory=list)
    performance_by_question_type: List[QuestionTypePerformance] = field(default_factory=list)
    error_reasons_by_subject: Dict[str, Dict[str, int]] = field(default_factory=dict)
    reasons_by_topic: Dict[str, Dict[str, int]] = field(default_factory=dict)


# ==================== Pattern Results ====================

@dataclass
class PanicEvent:
    """A run of consecutive wrong/unanswered questions in one test."""
    test_id: str
    test_name: str
    start_question: int
    end_question: int
    chain_length: int
    lost_marks: float


@dataclass
class DependencyAlert:
    """A weak topic whose prerequisite is also weak."""
    symptom_topic: str
    root_cause_topic: str
    error_count: int


@dataclass
class GuessStats:
    total_guesses: int = 0
    safe_guesses: int = 0
    risky_guesses: int = 0
    risky_misses: int = 0
    correct_guesses: int = 0
    intuition_score: float = 0.0
    # Correct guesses are rarely tagged, so intuition_score is biased low.
    intuition_confidence: str = "low"
    efficiency: float = 0.0
    net_score_impact: float = 0.0


# ==================== Trend & Forecast Results ====================

@dataclass
class TrendPoint:
    name: str
    test_name: str
    score: float
    rank: int
    percentile: float
    trend_percentile: float


@dataclass
class PercentileForecast:
    chart_data: List[TrendPoint]
    predicted_score: int
    predicted_rank: int
    predicted_percentile: float
    next_index: int
    cohort_size: float


@dataclass
class RankModel:
    """Log-linear fit: ln(rank) = slope * marks + intercept."""
    slope: float
    intercept: float

    def expected_log_rank(self, marks: float) -> float:
        return self.slope * marks + self.intercept


@dataclass
class DistributionBucket:
    rank: int  # Bucket midpoint
    probability: float


@dataclass
class RankForecast:
    best_case: int
    likely: int
    worst_case: int
    distribution: List[DistributionBucket]


@dataclass
class GoalProbability:
    target_rank: int
    probability: int  # Percent, 0-100
    text: str


@dataclass
class Comparison:
    diff: float
    trend: str  # "up", "down", "flat"


@dataclass
class RadarPoint:
    subject: str
    average: int
    full_mark: float


@dataclass
class PerformanceSummary:
    latest_score: float
    latest_rank: int
    latest_accuracy: float
    avg_scores: Dict[str, float]
    strongest_subject: Tuple[str, float]
    consistency_score: float
    score_comparison: Comparison
    rank_comparison: Comparison
    accuracy_comparison: Comparison
    radar: List[RadarPoint]


@dataclass
class VolatilityMetrics:
    sharpe_ratio: float
    volatility_score: int
    std_dev: float
    upper_band: float
    lower_band: float
    is_testing_out_of_zone: bool
    zone_message: str


@dataclass
class TimeManagementStat:
    subject: str
    avg_time: float
    target_time: Optional[float]
    timed_attempts: int
    over_target: bool


# ==================== Prioritisation Results ====================

@dataclass
class ROIPoint:
    topic: str
    subject: str
    effort: float
    impact: float
    bubble_size: int
    quadrant: str


@dataclass
class NextBestAction:
    topic: str
    subject: str
    error_count: int
    dominant_reason: str
    potential_gain: int


def record_date_key(value: str) -> datetime:
    """Sort key for an ISO test date. Unparseable dates sort first."""
    try:
        return datetime.fromisoformat(value).replace(tzinfo=None)
    except (TypeError, ValueError):
        return datetime.min
