"""Tests for engine/error_aggregator.py"""

import sys
sys.path.append(".")

from engine.error_aggregator import ErrorAggregator
from engine.models import QuestionAttempt, QuestionStatus, SubjectScore, TestRecord

W = QuestionStatus.WRONG
P = QuestionStatus.PARTIALLY_CORRECT
C = QuestionStatus.FULLY_CORRECT
U = QuestionStatus.UNANSWERED


def attempt(test_id, number, status, topic="N/A", subject="physics", reason=None, qtype="", marks=0.0):
    return QuestionAttempt(
        test_id=test_id, subject=subject, question_number=number, status=status,
        topic=topic, reason_for_error=reason, question_type=qtype, marks_awarded=marks,
    )


def record(test_id, date, name=None):
    return TestRecord(id=test_id, test_date=date, test_name=name or test_id, total=SubjectScore(marks=100, rank=500))


def sample_attempts():
    return [
        attempt("t1", 1, W, "Limits", "maths", "Conceptual Gap"),
        attempt("t1", 2, W, "Limits", "maths", "Silly Mistake"),
        attempt("t2", 3, P, "Limits", "maths", "Conceptual Gap"),
        attempt("t1", 4, W, "Electrostatics", "physics", "Time Pressure"),
        attempt("t2", 5, W, "GOC", "chemistry", "Guess"),
        attempt("t2", 6, C, "GOC", "chemistry"),
        attempt("t2", 7, U, "GOC", "chemistry"),
        attempt("t2", 8, W, "N/A", "physics", "Silly Mistake"),
    ]


def test_weak_topic_counts_add_up():
    aggregator = ErrorAggregator()
    attempts = [a for a in sample_attempts() if a.topic != "N/A"]

    ranked = aggregator.weakest_topics(attempts)

    errors = [a for a in attempts if a.status in (W, P)]
    assert sum(s.error_count for s in ranked) == len(errors)
    assert ranked[0].topic == "Limits"
    assert ranked[0].error_count == 3
    assert ranked[0].distinct_tests_affected == 2
    assert ranked[0].subject == "maths"


def test_na_topic_counts_in_total_but_not_ranking():
    analysis = ErrorAggregator().analyze(sample_attempts())

    assert analysis.total_errors == 6
    assert "N/A" not in [s.topic for s in analysis.weakest_topics]


def test_equal_counts_rank_alphabetically():
    attempts = [
        attempt("t1", 1, W, "Zeta"),
        attempt("t1", 2, W, "Alpha"),
        attempt("t1", 3, W, "Mid"),
    ]
    ranked = ErrorAggregator().weakest_topics(attempts)

    assert [s.topic for s in ranked] == ["Alpha", "Mid", "Zeta"]


def test_pareto_is_non_decreasing_and_ends_at_100():
    analysis = ErrorAggregator().analyze(sample_attempts())
    cumulative = [p.cumulative_percentage for p in analysis.pareto]

    assert cumulative == sorted(cumulative)
    assert abs(cumulative[-1] - 100.0) < 1e-9


def test_pareto_window_is_top_20():
    attempts = [attempt("t1", i, W, f"Topic {i:02d}") for i in range(1, 31)]
    pareto = ErrorAggregator().analyze(attempts).pareto

    assert len(pareto) == 20
    assert abs(pareto[-1].cumulative_percentage - 20 / 30 * 100) < 1e-9


def test_fatigue_buckets_use_all_attempts():
    attempts = [attempt("t1", n, C) for n in range(1, 11)]
    attempts += [attempt("t1", 11, W), attempt("t1", 12, C), attempt("t1", 13, P), attempt("t1", 14, U)]

    fatigue = ErrorAggregator().fatigue_curve(attempts)

    assert [b.range for b in fatigue] == ["1-10", "11-20"]
    assert fatigue[0].attempts == 10
    assert fatigue[0].error_rate == 0
    assert fatigue[1].attempts == 4
    assert fatigue[1].error_rate == 50.0


def test_reason_distribution_sorted_by_count():
    distribution = ErrorAggregator().analyze(sample_attempts()).error_reason_distribution

    assert distribution[0].value == 2
    assert {d.name for d in distribution[:2]} == {"Conceptual Gap", "Silly Mistake"}
    assert distribution[0].name == "Conceptual Gap"


def test_error_trend_ordered_by_date():
    records = [record("t2", "2024-02-01"), record("t1", "2024-01-01")]
    trend = ErrorAggregator().analyze(sample_attempts(), records).error_trend

    assert [p.test_id for p in trend] == ["t1", "t2"]
    t1 = trend[0]
    assert t1.total_errors == 3
    assert t1.reason_counts["Conceptual Gap"] == 1
    assert abs(t1.reason_percentages["Silly Mistake"] - 100 / 3) < 1e-9


def test_error_trend_for_test_without_errors():
    trend = ErrorAggregator().analyze([], [record("t9", "2024-03-01")]).error_trend

    assert trend[0].total_errors == 0
    assert all(v == 0 for v in trend[0].reason_percentages.values())


def test_performance_by_question_type():
    attempts = [
        attempt("t1", 1, W, qtype="Integer", marks=0),
        attempt("t1", 2, C, qtype="Integer", marks=4),
        attempt("t1", 3, C, qtype="Single Correct", marks=4),
    ]
    performance = ErrorAggregator().performance_by_question_type(attempts)

    assert performance[0].name == "Integer"
    assert performance[0].errors == 1
    assert performance[0].error_rate == 50.0
    assert performance[0].avg_marks == 2.0


def test_reason_breakdowns():
    analysis = ErrorAggregator().analyze(sample_attempts())

    assert analysis.error_reasons_by_subject["maths"] == {"Conceptual Gap": 2, "Silly Mistake": 1}
    assert analysis.reasons_by_topic["Limits"]["Conceptual Gap"] == 2
    assert "N/A" not in analysis.reasons_by_topic


def test_empty_input():
    analysis = ErrorAggregator().analyze([])

    assert analysis.total_errors == 0
    assert analysis.weakest_topics == []
    assert analysis.pareto == []
    assert analysis.fatigue == []
