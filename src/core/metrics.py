"""
Metrics collection for the lead-capture endpoints.

Counters live in process memory and reset on restart; they exist so the
operations team can see at a glance how the forms are doing (including how
many newsletter requests were repeats, which the public response hides).
"""
import threading
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Dict

OUTCOMES = (
    "accepted",
    "created",
    "already_subscribed",
    "throttled",
    "invalid",
    "captcha_failed",
    "storage_unavailable",
    "email_failed",
)


class MetricsCollector:
    """
    Collects outcome counters per flow and per-endpoint request statistics.

    Flows are ``contact`` and ``newsletter``. All methods are thread safe;
    the orchestrators record from the thread pool.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._start_time = datetime.now(timezone.utc)
        self._outcomes: Dict[str, Dict[str, int]] = defaultdict(lambda: dict.fromkeys(OUTCOMES, 0))
        self._requests: Dict[str, Dict[str, Any]] = {}

    def record_outcome(self, flow: str, outcome: str) -> None:
        """Count one ``outcome`` of ``flow``."""
        if outcome not in OUTCOMES:
            raise ValueError(f"Unknown outcome: {outcome}")
        with self._lock:
            self._outcomes[flow][outcome] += 1

    def outcome_count(self, flow: str, outcome: str) -> int:
        with self._lock:
            return self._outcomes[flow][outcome] if flow in self._outcomes else 0

    def record_request_metric(self, endpoint: str, method: str, status_code: int, duration: float) -> None:
        """Record HTTP request metrics."""
        key = f"{method}:{endpoint}"
        with self._lock:
            entry = self._requests.setdefault(key, {"count": 0, "total_duration": 0.0, "status_codes": {}})
            entry["count"] += 1
            entry["total_duration"] += duration
            entry["status_codes"][str(status_code)] = entry["status_codes"].get(str(status_code), 0) + 1

    def get_metrics_summary(self) -> Dict[str, Any]:
        """Snapshot of all collected metrics."""
        with self._lock:
            requests = {
                key: {
                    "count": entry["count"],
                    "avg_duration": entry["total_duration"] / entry["count"] if entry["count"] else 0.0,
                    "status_codes": dict(entry["status_codes"]),
                }
                for key, entry in self._requests.items()
            }
            return {
                "uptime_seconds": (datetime.now(timezone.utc) - self._start_time).total_seconds(),
                "outcomes": {flow: dict(counts) for flow, counts in self._outcomes.items()},
                "requests": requests,
            }

    def reset_metrics(self) -> None:
        with self._lock:
            self._outcomes.clear()
            self._requests.clear()
            self._start_time = datetime.now(timezone.utc)
