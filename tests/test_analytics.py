"""Tests for engine/analytics.py"""

import json
import random
import sys
sys.path.append(".")

import pytest

from engine import (
    AnalyticsEngine,
    AnalyticsInputError,
    AnalyticsSnapshot,
    DependencyPropagator,
    RankSimulator,
    ROIClassifier,
    TopicDependencyGraph,
)
from engine.models import LongTermGoal, QuestionAttempt, QuestionStatus, SubjectScore, TestRecord

W = QuestionStatus.WRONG
C = QuestionStatus.FULLY_CORRECT
U = QuestionStatus.UNANSWERED


def records():
    rows = [("t1", "2024-01-07", 120, 4000), ("t3", "2024-01-21", 160, 1500), ("t2", "2024-01-14", 140, 2500)]
    return [
        TestRecord(id=tid, test_date=date, test_name=f"Mock {tid}",
                   total=SubjectScore(marks=marks, rank=rank, correct=40, wrong=10),
                   maths=SubjectScore(marks=marks / 3))
        for tid, date, marks, rank in rows
    ]


def attempts():
    rows = []
    for n, (status, topic, reason) in enumerate([
        (W, "Limits", "Conceptual Gap"),
        (W, "C&D", "Conceptual Gap"),
        (W, "C&D", "Silly Mistake"),
        (U, "C&D", None),
        (C, "C&D", None),
        (W, "Limits", "Guess"),
    ], start=1):
        rows.append(QuestionAttempt(test_id="t1", subject="maths", question_number=n, status=status,
                                    topic=topic, reason_for_error=reason,
                                    question_type="Single Correct (+4, -1)",
                                    marks_awarded=-1 if status == W else (4 if status == C else 0)))
    return rows


def engine(seed=3):
    return AnalyticsEngine(simulator=RankSimulator(rng=random.Random(seed), simulation_count=1000))


def test_snapshot_orders_records_by_date():
    snapshot = AnalyticsSnapshot.build(records=records())

    assert [r.id for r in snapshot.ordered_records] == ["t1", "t2", "t3"]


def test_orphaned_attempts():
    orphan = QuestionAttempt(test_id="gone", subject="maths", question_number=1, status=W)
    snapshot = AnalyticsSnapshot.build(records=records(), attempts=attempts() + [orphan])

    assert snapshot.orphaned_attempts() == [orphan]
    assert engine().analyze(snapshot).orphaned_attempts == 1


def test_root_cause_report():
    report = engine().root_cause(AnalyticsSnapshot.build(records=records(), attempts=attempts()))

    assert report.errors.total_errors == 4
    assert report.panic_events[0].chain_length == 4
    assert report.panic_events[0].test_name == "Mock t1"
    assert report.guess_stats.total_guesses == 1
    assert [(a.symptom_topic, a.root_cause_topic) for a in report.dependency_alerts] == [("C&D", "Limits")]


def test_forecast_report():
    goals = [LongTermGoal(id="g1", text="Top 2000")]
    report = engine().forecast(AnalyticsSnapshot.build(records=records(), goals=goals))

    assert report.rank_prediction is not None
    assert report.goal_probability.target_rank == 2000
    assert report.rank_model.slope < 0
    # Chronological order: 120 -> 140 -> 160
    assert report.percentile_data.predicted_score == 180


def test_full_report_is_json_serialisable():
    report = engine().analyze(AnalyticsSnapshot.build(records=records(), attempts=attempts()))
    data = report.to_dict()

    json.dumps(data)
    assert data["summary"]["latest_score"] == 160
    assert data["next_best_action"]["topic"] == "Limits"
    assert len(data["forecast"]["rank_prediction"]["distribution"]) == 40


def test_same_seed_same_report():
    snapshot = AnalyticsSnapshot.build(records=records(), attempts=attempts())

    assert engine(11).analyze(snapshot) == engine(11).analyze(snapshot)


def test_empty_snapshot_produces_empty_report():
    report = engine().analyze(AnalyticsSnapshot.build())

    assert report.root_cause.errors.total_errors == 0
    assert report.root_cause.panic_events == []
    assert report.root_cause.dependency_alerts == []
    assert report.forecast.rank_prediction is None
    assert report.forecast.percentile_data is None
    assert report.strategic_roi == []
    assert report.next_best_action is None
    assert report.summary is None
    assert report.volatility is None


def test_export_with_null_scores_still_analyzes():
    exported = TestRecord.from_dict({"id": "t4", "testDate": "2024-01-28", "total": {"marks": None, "rank": None}})
    broken = QuestionAttempt.from_dict({"testId": "t4", "subject": "maths", "questionNumber": None,
                                        "status": "Wrong", "marksAwarded": None})
    snapshot = AnalyticsSnapshot.build(records=records() + [exported], attempts=attempts() + [broken])

    report = engine().analyze(snapshot)

    assert report.forecast.rank_prediction is not None
    assert report.summary.latest_score == 0
    assert report.root_cause.errors.total_errors == 5


def test_weightage_table_reaches_roi_classifier():
    custom = AnalyticsEngine(weightage={"C&D": "Low"})

    assert custom.roi_classifier.weightage == {"C&D": "Low"}


def test_dependency_graph_reaches_propagator():
    graph = TopicDependencyGraph.from_mapping({"B": ["A"]})

    assert AnalyticsEngine(dependency_graph=graph).propagator.graph is graph


@pytest.mark.parametrize("kwargs", [
    {"dependency_graph": TopicDependencyGraph.from_mapping({}), "propagator": DependencyPropagator()},
    {"weightage": {}, "roi_classifier": ROIClassifier()},
])
def test_table_and_component_together_are_rejected(kwargs):
    with pytest.raises(AnalyticsInputError):
        AnalyticsEngine(**kwargs)
