"""
Observability helpers (Prometheus counters).
"""

from harvest_notifier.observability.metrics import (
    NOTIFICATIONS_TOTAL,
    record_notification,
)

__all__ = ["NOTIFICATIONS_TOTAL", "record_notification"]
