"""
Config - Environment settings (read once from .env / the process env).
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _optional_int(name: str):
    value = os.getenv(name)
    return int(value) if value not in (None, "") else None


REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD") or None

ANALYTICS_CACHE_ENABLED = _flag("ANALYTICS_CACHE_ENABLED")
ANALYTICS_CACHE_TTL = int(os.getenv("ANALYTICS_CACHE_TTL", 3600))

SIMULATION_COUNT = int(os.getenv("SIMULATION_COUNT", 5000))
SIMULATION_SEED = _optional_int("SIMULATION_SEED")  # Unset -> fresh entropy per run

ROI_IMPACT_THRESHOLD = float(os.getenv("ROI_IMPACT_THRESHOLD", 30))
ROI_EFFORT_THRESHOLD = float(os.getenv("ROI_EFFORT_THRESHOLD", 30))

DEFAULT_TARGET_RANK = int(os.getenv("DEFAULT_TARGET_RANK", 1000))
DEFAULT_COHORT_SIZE = int(os.getenv("DEFAULT_COHORT_SIZE", 10000))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
