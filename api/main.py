"""
FastAPI Backend for the exam analytics engine.

Endpoints:
    GET  /                              - Health check
    POST /analyze                       - Full analytics report
    POST /root-cause                    - Weak topics, panic events, guesses, dependency alerts
    POST /forecast                      - Rank forecast, goal probability, percentile trend
    POST /roi                           - Effort / impact quadrants and next best action
    GET  /analyze/{student_id}/{rev}    - Previously cached report
"""

import logging
import random
from dataclasses import asdict
from typing import Dict, List, Optional

import redis
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

import config
from engine import (
    AnalyticsEngine,
    AnalyticsInputError,
    AnalyticsSnapshot,
    LongTermGoal,
    QuestionAttempt,
    RankSimulator,
    ROIClassifier,
    TestRecord,
    TrendModeler,
    UserSettings,
)
from redis_store import AnalyticsStore

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ==================== Initialize ====================

app = FastAPI(
    title="Exam Insights API",
    description="Diagnostic and predictive analytics over exam history",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

store: Optional[AnalyticsStore] = AnalyticsStore() if config.ANALYTICS_CACHE_ENABLED else None


# ==================== Request/Response Models ====================

class SubjectScoreIn(BaseModel):
    marks: float = 0.0
    rank: int = 0
    correct: int = 0
    wrong: int = 0
    unanswered: int = 0
    partial: int = 0
    max_marks: Optional[float] = None


class TestRecordIn(BaseModel):
    id: str
    test_date: str
    test_name: str = ""
    physics: SubjectScoreIn = Field(default_factory=SubjectScoreIn)
    chemistry: SubjectScoreIn = Field(default_factory=SubjectScoreIn)
    maths: SubjectScoreIn = Field(default_factory=SubjectScoreIn)
    total: SubjectScoreIn = Field(default_factory=SubjectScoreIn)
    test_type: Optional[str] = None
    sub_type: Optional[str] = None
    difficulty: Optional[str] = None
    topper_score: Optional[float] = None


class QuestionAttemptIn(BaseModel):
    test_id: str
    subject: str
    question_number: int
    status: str
    topic: str = "N/A"
    marks_awarded: float = 0.0
    question_type: str = ""
    positive_marks: Optional[float] = None
    negative_marks: Optional[float] = None
    reason_for_error: Optional[str] = None
    time_spent: Optional[float] = None


class LongTermGoalIn(BaseModel):
    id: str
    text: str
    completed: bool = False


class SettingsIn(BaseModel):
    cohort_sizes: Dict[str, int] = Field(default_factory=dict)
    target_times: Dict[str, float] = Field(default_factory=dict)


class AnalyticsRequest(BaseModel):
    records: List[TestRecordIn] = Field(default_factory=list)
    attempts: List[QuestionAttemptIn] = Field(default_factory=list)
    goals: List[LongTermGoalIn] = Field(default_factory=list)
    settings: SettingsIn = Field(default_factory=SettingsIn)
    seed: Optional[int] = None  # Reproducible Monte Carlo run
    student_id: Optional[str] = None  # With revision: cache the report
    revision: Optional[int] = None


# ==================== Helper Functions ====================

def to_snapshot(request: AnalyticsRequest) -> AnalyticsSnapshot:
    """Convert the request body into the engine's immutable snapshot."""
    try:
        return AnalyticsSnapshot.build(
            records=[TestRecord.from_dict(r.model_dump()) for r in request.records],
            attempts=[QuestionAttempt.from_dict(a.model_dump()) for a in request.attempts],
            goals=[LongTermGoal(**g.model_dump()) for g in request.goals],
            settings=UserSettings(**request.settings.model_dump()),
        )
    except AnalyticsInputError as e:
        raise HTTPException(status_code=422, detail=str(e))


def build_engine(seed: Optional[int] = None) -> AnalyticsEngine:
    if seed is None:
        seed = config.SIMULATION_SEED
    return AnalyticsEngine(
        trend_modeler=TrendModeler(default_cohort_size=config.DEFAULT_COHORT_SIZE),
        simulator=RankSimulator(
            rng=random.Random(seed),
            simulation_count=config.SIMULATION_COUNT,
            default_target_rank=config.DEFAULT_TARGET_RANK,
        ),
        roi_classifier=ROIClassifier(
            impact_threshold=config.ROI_IMPACT_THRESHOLD,
            effort_threshold=config.ROI_EFFORT_THRESHOLD,
        ),
    )


# ==================== Endpoints ====================

@app.get("/")
def root():
    return {
        "status": "ok",
        "message": "Exam Insights API is running",
        "version": "1.0.0",
        "cache_enabled": store is not None,
    }


@app.post("/analyze")
def analyze(request: AnalyticsRequest):
    """
    Full report: root cause, forecast, ROI quadrants and summary KPIs.

    When student_id and revision are given (and caching is enabled) the
    report for that input revision is served from Redis.
    """
    snapshot = to_snapshot(request)
    engine = build_engine(request.seed)

    def compute() -> dict:
        return engine.analyze(snapshot).to_dict()

    if store is not None and request.student_id and request.revision is not None:
        return store.get_or_compute(request.student_id, request.revision, compute)
    return compute()


@app.post("/root-cause")
def root_cause(request: AnalyticsRequest):
    snapshot = to_snapshot(request)
    return asdict(build_engine(request.seed).root_cause(snapshot))


@app.post("/forecast")
def forecast(request: AnalyticsRequest):
    snapshot = to_snapshot(request)
    return asdict(build_engine(request.seed).forecast(snapshot))


@app.post("/roi")
def roi(request: AnalyticsRequest):
    snapshot = to_snapshot(request)
    classifier = build_engine(request.seed).roi_classifier
    action = classifier.next_best_action(snapshot.attempts)
    return {
        "strategic_roi": [asdict(p) for p in classifier.classify(snapshot.attempts)],
        "next_best_action": asdict(action) if action else None,
    }


@app.get("/analyze/{student_id}/{revision}")
def get_cached_report(student_id: str, revision: int):
    if store is None:
        raise HTTPException(status_code=404, detail="Report cache is disabled")

    try:
        report = store.get_report(student_id, revision)
    except redis.exceptions.RedisError as e:
        logger.warning("Analytics cache read failed for %s: %s", student_id, e)
        raise HTTPException(status_code=404, detail="Report cache is unavailable")

    if report is None:
        raise HTTPException(status_code=404, detail="No report cached for this revision")
    return report


# ==================== Run Server ====================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.main:app", host="0.0.0.0", port=8000, reload=True)
