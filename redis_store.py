"""
Redis Store - Caches analytics reports per student and input revision.

The engine itself is stateless; callers bump a revision counter whenever a
student's test records or attempt logs change and look reports up by
(student, revision).

Key Structure:
    analytics:{student_id}:revision          -> String (integer counter)
    analytics:{student_id}:report:{revision} -> String (JSON report)
"""

import json
import logging
from typing import Callable, Dict, Optional

import redis

import config

logger = logging.getLogger(__name__)


class AnalyticsStore:
    def __init__(self, client: Optional[redis.Redis] = None, ttl: int = config.ANALYTICS_CACHE_TTL):
        """Connect to Redis using environment variables unless a client is given."""
        self.client = client or redis.Redis(
            host=config.REDIS_HOST,
            port=config.REDIS_PORT,
            password=config.REDIS_PASSWORD,
            decode_responses=True  # Return strings instead of bytes
        )
        self.ttl = ttl

    # ==================== Key Builders ====================

    def _revision_key(self, student_id: str) -> str:
        """Redis key for the input revision counter."""
        return f"analytics:{student_id}:revision"

    def _report_key(self, student_id: str, revision: int) -> str:
        """Redis key for one cached report."""
        return f"analytics:{student_id}:report:{revision}"

    # ==================== Revisions ====================

    def get_revision(self, student_id: str) -> int:
        """
        Current input revision for a student.

        Args:
            student_id: Student to query

        Returns:
            Revision number (0 if never bumped)
        """
        return int(self.client.get(self._revision_key(student_id)) or 0)

    def bump_revision(self, student_id: str) -> int:
        """
        Mark the student's inputs as changed.

        Returns:
            New revision number
        """
        return self.client.incr(self._revision_key(student_id))

    # ==================== Reports ====================

    def get_report(self, student_id: str, revision: int) -> Optional[Dict]:
        raw = self.client.get(self._report_key(student_id, revision))
        return json.loads(raw) if raw else None

    def save_report(self, student_id: str, revision: int, report: Dict):
        """Store a report; it expires after `ttl` seconds (0 = never)."""
        payload = json.dumps(report)
        key = self._report_key(student_id, revision)
        if self.ttl > 0:
            self.client.set(key, payload, ex=self.ttl)
        else:
            self.client.set(key, payload)

    def get_or_compute(self, student_id: str, revision: int, compute: Callable[[], Dict]) -> Dict:
        """
        Return the cached report for this revision, computing it on a miss.

        Redis failures are logged and the report is computed directly.
        """
        try:
            cached = self.get_report(student_id, revision)
        except redis.exceptions.RedisError as e:
            logger.warning("Analytics cache read failed for %s: %s", student_id, e)
            return compute()

        if cached is not None:
            logger.debug("Cache hit for %s@%d", student_id, revision)
            return cached

        report = compute()
        try:
            self.save_report(student_id, revision, report)
        except redis.exceptions.RedisError as e:
            logger.warning("Analytics cache write failed for %s: %s", student_id, e)
        return report

    def delete_student(self, student_id: str):
        """Drop the revision counter and every cached report for a student."""
        keys = list(self.client.scan_iter(match=f"analytics:{student_id}:report:*"))
        self.client.delete(self._revision_key(student_id), *keys)
