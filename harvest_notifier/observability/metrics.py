"""
============================================================================
Harvest Notifier v1.0.0
Prometheus Metrics - Notification Outcomes
============================================================================

METRICS EXPOSED
---------------
- harvest_notifications_total{kind, outcome}
    kind:    harvest | unwrap | error
    outcome: sent | skipped | failed
============================================================================
"""

import logging

from prometheus_client import Counter

logger = logging.getLogger(__name__)

KIND_HARVEST = "harvest"
KIND_UNWRAP = "unwrap"
KIND_ERROR = "error"

OUTCOME_SENT = "sent"
OUTCOME_SKIPPED = "skipped"
OUTCOME_FAILED = "failed"

NOTIFICATIONS_TOTAL = Counter(
    "harvest_notifications_total",
    "Report and alert notifications by kind and outcome",
    ["kind", "outcome"]
)


def record_notification(kind: str, outcome: str) -> None:
    """Increment the notification counter. Metric errors never break a dispatch."""
    try:
        NOTIFICATIONS_TOTAL.labels(kind=kind, outcome=outcome).inc()
    except Exception as e:
        logger.warning(f"[METRICS] Failed to record notification | kind={kind} | outcome={outcome} | error={e}")


__all__ = [
    "KIND_HARVEST",
    "KIND_UNWRAP",
    "KIND_ERROR",
    "OUTCOME_SENT",
    "OUTCOME_SKIPPED",
    "OUTCOME_FAILED",
    "NOTIFICATIONS_TOTAL",
    "record_notification",
]
