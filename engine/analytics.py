"""
Analytics Engine - One call from input snapshot to every aggregate.

Think of it as the full diagnostic work-up:
1. Examine symptoms (error aggregation, panic cascades, guessing)
2. Diagnose root causes (prerequisite propagation)
3. Forecast (trend lines, Monte Carlo rank simulation)
4. Prescribe focus (effort / impact quadrants)

Every call recomputes from scratch. Whether and how to cache a report
is up to the caller (see redis_store.AnalyticsStore).
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .error_aggregator import ErrorAggregator
from .guess_profiler import GuessProfiler
from .knowledge_graph import DependencyPropagator, TopicDependencyGraph
from .models import (
    AnalyticsInputError,
    DependencyAlert,
    ErrorAnalysis,
    GoalProbability,
    GuessStats,
    LongTermGoal,
    NextBestAction,
    PanicEvent,
    PercentileForecast,
    PerformanceSummary,
    QuestionAttempt,
    RankForecast,
    RankModel,
    ROIPoint,
    TestRecord,
    TimeManagementStat,
    UserSettings,
    VolatilityMetrics,
    record_date_key,
)
from .panic_detector import PanicDetector
from .rank_simulator import RankSimulator
from .roi_classifier import ROIClassifier
from .trend_modeler import TrendModeler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Immutable view of everything the engine reads."""
    records: Tuple[TestRecord, ...] = ()
    attempts: Tuple[QuestionAttempt, ...] = ()
    goals: Tuple[LongTermGoal, ...] = ()
    settings: UserSettings = field(default_factory=UserSettings)

    @classmethod
    def build(cls, records: Sequence[TestRecord] = (), attempts: Sequence[QuestionAttempt] = (),
              goals: Sequence[LongTermGoal] = (), settings: Optional[UserSettings] = None) -> "AnalyticsSnapshot":
        return cls(tuple(records), tuple(attempts), tuple(goals), settings or UserSettings())

    @property
    def ordered_records(self) -> List[TestRecord]:
        """Records in chronological order (stable for equal dates)."""
        return sorted(self.records, key=lambda r: record_date_key(r.test_date))

    def orphaned_attempts(self) -> List[QuestionAttempt]:
        known = {r.id for r in self.records}
        return [a for a in self.attempts if a.test_id not in known]


@dataclass
class RootCauseReport:
    errors: ErrorAnalysis
    panic_events: List[PanicEvent]
    guess_stats: GuessStats
    dependency_alerts: List[DependencyAlert]


@dataclass
class ForecastReport:
    rank_prediction: Optional[RankForecast]
    goal_probability: Optional[GoalProbability]
    rank_model: Optional[RankModel]
    percentile_data: Optional[PercentileForecast]


@dataclass
class AnalyticsReport:
    root_cause: RootCauseReport
    forecast: ForecastReport
    strategic_roi: List[ROIPoint]
    next_best_action: Optional[NextBestAction]
    summary: Optional[PerformanceSummary]
    volatility: Optional[VolatilityMetrics]
    time_management: List[TimeManagementStat]
    orphaned_attempts: int = 0

    def to_dict(self) -> Dict:
        return asdict(self)


class AnalyticsEngine:
    """
    Wires every component together.

    Components are injectable so a caller can swap the dependency graph,
    weightage table, thresholds or the simulator's random source.
    """

    def __init__(
        self,
        dependency_graph: Optional[TopicDependencyGraph] = None,
        weightage: Optional[Mapping[str, str]] = None,
        aggregator: Optional[ErrorAggregator] = None,
        panic_detector: Optional[PanicDetector] = None,
        guess_profiler: Optional[GuessProfiler] = None,
        propagator: Optional[DependencyPropagator] = None,
        trend_modeler: Optional[TrendModeler] = None,
        simulator: Optional[RankSimulator] = None,
        roi_classifier: Optional[ROIClassifier] = None,
    ):
        """
        Args:
            dependency_graph: Topic prerequisites for the default propagator
            weightage: Topic -> "High" / "Medium" / "Low" for the default ROI classifier

        A table and a ready-built component that would consume it cannot
        both be given.
        """
        if dependency_graph is not None and propagator is not None:
            raise AnalyticsInputError("Pass either dependency_graph or propagator, not both")
        if weightage is not None and roi_classifier is not None:
            raise AnalyticsInputError("Pass either weightage or roi_classifier, not both")

        self.aggregator = aggregator or ErrorAggregator()
        self.panic_detector = panic_detector or PanicDetector()
        self.guess_profiler = guess_profiler or GuessProfiler()
        self.propagator = propagator or DependencyPropagator(dependency_graph or TopicDependencyGraph())
        self.trend_modeler = trend_modeler or TrendModeler()
        self.simulator = simulator or RankSimulator()
        self.roi_classifier = roi_classifier or ROIClassifier(weightage=weightage)

    def root_cause(self, snapshot: AnalyticsSnapshot) -> RootCauseReport:
        errors = self.aggregator.analyze(snapshot.attempts, snapshot.records)
        return RootCauseReport(
            errors=errors,
            panic_events=self.panic_detector.detect(snapshot.attempts, snapshot.records),
            guess_stats=self.guess_profiler.profile(snapshot.attempts),
            dependency_alerts=self.propagator.propagate(errors.weakest_topics),
        )

    def forecast(self, snapshot: AnalyticsSnapshot) -> ForecastReport:
        records = snapshot.ordered_records
        prediction, goal, model = self.simulator.run(records, snapshot.goals)
        return ForecastReport(
            rank_prediction=prediction,
            goal_probability=goal,
            rank_model=model,
            percentile_data=self.trend_modeler.percentile_forecast(records, snapshot.settings),
        )

    def analyze(self, snapshot: AnalyticsSnapshot) -> AnalyticsReport:
        orphaned = snapshot.orphaned_attempts()
        if orphaned:
            logger.warning("%d attempts reference unknown tests", len(orphaned))

        logger.info("Analyzing %d tests and %d attempts", len(snapshot.records), len(snapshot.attempts))
        records = snapshot.ordered_records

        return AnalyticsReport(
            root_cause=self.root_cause(snapshot),
            forecast=self.forecast(snapshot),
            strategic_roi=self.roi_classifier.classify(snapshot.attempts),
            next_best_action=self.roi_classifier.next_best_action(snapshot.attempts),
            summary=self.trend_modeler.performance_summary(records),
            volatility=self.trend_modeler.volatility_metrics(records),
            time_management=self.trend_modeler.time_management(snapshot.attempts, snapshot.settings),
            orphaned_attempts=len(orphaned),
        )
