"""Client-side configuration for taking exams against the exam service."""
import os


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


EXAM_SERVER_URL = os.environ.get("EXAM_SERVER_URL", "http://127.0.0.1:8000")
REQUEST_TIMEOUT_SECONDS = _parse_int_env("REQUEST_TIMEOUT_SECONDS", 30)
TICK_INTERVAL_SECONDS = 1.0
