"""
Engine module - Exam performance analytics and rank prediction.

Components:
    - error_aggregator: Weak topics, Pareto impact, fatigue curve
    - panic_detector: Consecutive-failure cascades within a test
    - guess_profiler: Risk profile of tagged guesses
    - knowledge_graph: Topic prerequisite DAG + dependency alerts
    - trend_modeler: Linear score / rank / percentile trends
    - rank_simulator: Monte Carlo rank forecast and goal probability
    - roi_classifier: Effort / impact study quadrants
    - analytics: Facade computing every aggregate from one snapshot
"""

from .analytics import AnalyticsEngine, AnalyticsReport, AnalyticsSnapshot
from .error_aggregator import ErrorAggregator
from .guess_profiler import GuessProfiler
from .knowledge_graph import DependencyPropagator, TopicDependencyGraph
from .models import AnalyticsInputError, LongTermGoal, QuestionAttempt, QuestionStatus, TestRecord, UserSettings
from .panic_detector import PanicDetector
from .rank_simulator import RankSimulator
from .roi_classifier import ROIClassifier
from .trend_modeler import TrendModeler

__all__ = [
    "AnalyticsEngine",
    "AnalyticsReport",
    "AnalyticsSnapshot",
    "AnalyticsInputError",
    "ErrorAggregator",
    "GuessProfiler",
    "DependencyPropagator",
    "TopicDependencyGraph",
    "PanicDetector",
    "RankSimulator",
    "ROIClassifier",
    "TrendModeler",
    "LongTermGoal",
    "QuestionAttempt",
    "QuestionStatus",
    "TestRecord",
    "UserSettings",
]
