"""Tests for engine/marking.py and the record constructors in engine/models.py"""

import math
import sys
sys.path.append(".")

import pytest

from engine.marking import calculate_metrics, get_marking_scheme, marks_for_status
from engine.models import AnalyticsInputError, QuestionAttempt, QuestionStatus, SubjectScore, TestRecord


@pytest.mark.parametrize("label, scheme", [
    ("Single Correct (+4, -1)", (4, -1)),
    ("Numerical ( +4 , 0 )", (4, 0)),
    ("Single Correct", (3, -1)),
    ("Multiple Correct", (4, -2)),
    ("Integer Type", (3, 0)),
    ("Matrix Match", (4, -1)),
    ("", (4, -1)),
])
def test_marking_scheme_from_label(label, scheme):
    assert get_marking_scheme(label) == scheme


def test_explicit_marks_win():
    attempt = QuestionAttempt(test_id="t1", subject="physics", question_number=1,
                              status=QuestionStatus.WRONG, question_type="Single Correct (+4, -1)",
                              positive_marks=5, negative_marks=-2)

    assert get_marking_scheme(attempt.question_type, attempt) == (5, -2)


def test_marks_for_status():
    label = "Single Correct (+4, -1)"

    assert marks_for_status(QuestionStatus.FULLY_CORRECT, label) == 4
    assert marks_for_status(QuestionStatus.WRONG, label) == -1
    assert marks_for_status(QuestionStatus.UNANSWERED, label) == 0
    assert marks_for_status(QuestionStatus.PARTIALLY_CORRECT, label) is None


def test_calculate_metrics():
    metrics = calculate_metrics(SubjectScore(marks=70, correct=20, wrong=10, partial=0))

    assert metrics.accuracy == pytest.approx(200 / 3)
    assert metrics.attempt_rate == 120.0
    assert metrics.cw_ratio == 2
    assert metrics.spaq == pytest.approx(70 / 30)


def test_metrics_without_wrong_answers():
    metrics = calculate_metrics(SubjectScore(marks=40, correct=10))

    assert math.isinf(metrics.cw_ratio)
    assert calculate_metrics(SubjectScore()).cw_ratio == 0.0


def test_record_metrics_use_75_questions_for_total():
    record = TestRecord(id="t1", test_date="2024-01-01", test_name="Mock",
                        total=SubjectScore(correct=30, wrong=15))

    assert record.metrics().attempt_rate == 60.0
    assert record.metrics("physics").attempt_rate == 0.0


def test_record_from_camel_case_dict():
    record = TestRecord.from_dict({
        "id": 7, "testDate": "2024-05-01", "testName": "AITS 3", "subType": "JEE Advanced",
        "total": {"marks": 180, "rank": 900, "maxMarks": 300},
    })

    assert record.id == "7"
    assert record.sub_type == "JEE Advanced"
    assert record.total.max_marks == 300
    assert record.physics == SubjectScore()


def test_record_without_id_is_rejected():
    with pytest.raises(AnalyticsInputError):
        TestRecord.from_dict({"testDate": "2024-05-01"})


def test_attempt_from_dict():
    attempt = QuestionAttempt.from_dict({
        "testId": "t1", "subject": "maths", "questionNumber": "4", "status": "UNANSWERED",
        "topic": "", "marksAwarded": None,
    })

    assert attempt.status == QuestionStatus.UNANSWERED
    assert attempt.question_number == 4
    assert attempt.topic == "N/A"
    assert attempt.marks_awarded == 0.0
    assert not attempt.has_topic


def test_unknown_status_is_rejected():
    with pytest.raises(AnalyticsInputError):
        QuestionAttempt.from_dict({"testId": "t1", "subject": "maths", "questionNumber": 1, "status": "Maybe"})


def test_null_fields_become_neutral_values():
    record = TestRecord.from_dict({
        "id": "t4", "testDate": None, "testName": None,
        "total": {"marks": None, "rank": None, "correct": None, "wrong": None},
        "physics": None,
    })

    assert record.total == SubjectScore()
    assert record.physics == SubjectScore()
    assert record.test_date == ""
    assert record.test_name == ""


def test_attempt_with_null_fields():
    attempt = QuestionAttempt.from_dict({
        "testId": None, "subject": None, "questionNumber": None, "status": "Wrong",
    })

    assert attempt.question_number == 0
    assert attempt.test_id == ""
    assert attempt.subject == ""
