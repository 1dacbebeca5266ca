"""
Panic Detector - Finds failure cascades inside a single test.

A cascade ("death spiral") is a run of consecutive Wrong / Unanswered
questions. Each question in the run costs the marks it could have earned
plus, when answered wrongly, its negative marking.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from .marking import scheme_for
from .models import PanicEvent, QuestionAttempt, QuestionStatus, TestRecord

logger = logging.getLogger(__name__)

CHAIN_STATUSES = (QuestionStatus.WRONG, QuestionStatus.UNANSWERED)
UNKNOWN_TEST = "Unknown Test"


class PanicDetector:
    """Scans per-test attempt sequences for consecutive-failure chains."""

    MIN_CHAIN_LENGTH = 3
    MAX_EVENTS = 5

    def __init__(self, min_chain_length: int = MIN_CHAIN_LENGTH, max_events: int = MAX_EVENTS):
        self.min_chain_length = min_chain_length
        self.max_events = max_events

    def detect(self, attempts: Sequence[QuestionAttempt],
               records: Sequence[TestRecord] = ()) -> List[PanicEvent]:
        """
        Return the worst cascades across all tests.

        Events are ordered by lost marks (descending) and capped at
        `max_events`.
        """
        names = {r.id: r.test_name for r in records}
        by_test: Dict[str, List[QuestionAttempt]] = defaultdict(list)
        for attempt in attempts:
            by_test[attempt.test_id].append(attempt)

        events: List[PanicEvent] = []
        for test_id, test_attempts in by_test.items():
            events.extend(self.scan_test(test_id, test_attempts, names.get(test_id, UNKNOWN_TEST)))

        events.sort(key=lambda e: e.lost_marks, reverse=True)
        logger.debug("Found %d panic events across %d tests", len(events), len(by_test))
        return events[:self.max_events]

    def scan_test(self, test_id: str, attempts: Sequence[QuestionAttempt],
                  test_name: str = UNKNOWN_TEST) -> List[PanicEvent]:
        """Walk one test in question order and emit every long enough chain."""
        ordered = sorted(attempts, key=lambda a: a.question_number)
        events = []

        chain: List[QuestionAttempt] = []
        lost = 0.0

        for attempt in ordered:
            if attempt.status in CHAIN_STATUSES:
                chain.append(attempt)
                positive, negative = scheme_for(attempt)
                lost += positive + (abs(negative) if attempt.status == QuestionStatus.WRONG else 0)
            else:
                event = self._close_chain(test_id, test_name, chain, lost)
                if event:
                    events.append(event)
                chain, lost = [], 0.0

        # A chain still open at the last question
        event = self._close_chain(test_id, test_name, chain, lost)
        if event:
            events.append(event)

        return events

    def _close_chain(self, test_id: str, test_name: str,
                     chain: List[QuestionAttempt], lost: float) -> Optional[PanicEvent]:
        if len(chain) < self.min_chain_length:
            return None
        return PanicEvent(
            test_id=test_id,
            test_name=test_name,
            start_question=chain[0].question_number,
            end_question=chain[-1].question_number,
            chain_length=len(chain),
            lost_marks=lost,
        )
