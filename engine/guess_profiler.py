"""
Guess Profiler - How well does risk-taking pay off?

Attempts tagged with the "Guess" error reason are split by whether their
question type carries negative marking:
    safe guess  -> no penalty for a wrong answer
    risky guess -> a wrong answer costs marks (a "risky miss")

Known bias: most logs only tag failed guesses, so a correct guess is
indistinguishable from a correct deliberate answer unless it was tagged.
The intuition score is therefore reported with low confidence.
"""

import logging
from typing import Iterable, List

from .marking import scheme_for
from .models import ErrorReason, GuessStats, QuestionAttempt, QuestionStatus

logger = logging.getLogger(__name__)


def is_guess(attempt: QuestionAttempt) -> bool:
    return attempt.reason_for_error == ErrorReason.GUESS.value


class GuessProfiler:

    def profile(self, attempts: Iterable[QuestionAttempt]) -> GuessStats:
        guesses: List[QuestionAttempt] = [a for a in attempts if is_guess(a)]
        if not guesses:
            return GuessStats()

        safe = risky = risky_misses = correct = 0
        potential = 0.0

        for attempt in guesses:
            positive, negative = scheme_for(attempt)
            potential += positive

            if negative == 0:
                safe += 1
            else:
                risky += 1
                if attempt.status == QuestionStatus.WRONG:
                    risky_misses += 1

            if attempt.status == QuestionStatus.FULLY_CORRECT:
                correct += 1

        net_impact = sum(a.marks_awarded for a in guesses)
        total = len(guesses)

        logger.debug("Profiled %d guesses (%d risky, %d risky misses)", total, risky, risky_misses)

        return GuessStats(
            total_guesses=total,
            safe_guesses=safe,
            risky_guesses=risky,
            risky_misses=risky_misses,
            correct_guesses=correct,
            intuition_score=correct / total * 100,
            intuition_confidence="low",
            efficiency=net_impact / potential * 100 if potential > 0 else 0.0,
            net_score_impact=net_impact,
        )
