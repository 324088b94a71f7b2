"""
============================================================================
Harvest Notifier v1.0.0
Notification Policy - Send / Skip / Severity Gate
============================================================================

Reliability Level: L6 Critical
Input Constraints: A harvest or unwrap report, static config flags
Side Effects: Logs skip decisions

GATES (evaluated in order):
1. Transport configured: no endpoint → do not send (WARNING log)
2. Eventfulness: uneventful report and notify_uneventful=False
   → do not send (INFO log with the summary)
   uneventful report and notify_uneventful=True → send at INFO

UNEVENTFUL:
- Harvest: harvested, error, warning and notice counts are all zero
- Unwrap: success and nothing was unwrapped

ROLE PINGS (independent toggle):
    (level >= WARNING or notify_uneventful)
    and ping role ids configured
    and role_ping_enabled
============================================================================
"""

from dataclasses import dataclass, asdict
from typing import Iterable, List, Optional
import logging

from harvest_notifier.config import NotifierConfig
from harvest_notifier.reports.models import Report, ReportLevel

logger = logging.getLogger(__name__)


# =============================================================================
# Skip reasons
# =============================================================================

SKIP_WEBHOOK_MISSING = "webhook_missing"
SKIP_UNEVENTFUL = "uneventful"

ERROR_WEBHOOK_MISSING = "NTF-001-WEBHOOK_MISSING"


@dataclass(frozen=True)
class NotificationDecision:
    should_send: bool
    level: ReportLevel
    skip_reason: Optional[str] = None
    uneventful: bool = False


class NotificationPolicy:
    """
    Pure decision logic over a report and static flags.

    Holds no state between calls; safe to share across concurrent
    dispatches.
    """

    def __init__(
        self,
        notify_uneventful: bool = False,
        ping_role_ids: Iterable[str] = (),
        role_ping_enabled: bool = False
    ) -> None:
        self.notify_uneventful = notify_uneventful
        self.ping_role_ids = [r for r in ping_role_ids if r]  # type: List[str]
        self.role_ping_enabled = role_ping_enabled

    @classmethod
    def from_config(cls, config: NotifierConfig) -> "NotificationPolicy":
        return cls(
            notify_uneventful=config.notify_uneventful,
            ping_role_ids=config.ping_role_ids_on_error,
            role_ping_enabled=config.role_ping_enabled,
        )

    def decide(self, report: Report, endpoint_configured: bool = True) -> NotificationDecision:
        level = report.summary.level()
        uneventful = report.summary.is_uneventful()

        if not endpoint_configured:
            logger.warning(
                f"[{ERROR_WEBHOOK_MISSING}] Report webhook not set, not sending any message | "
                f"kind={report.kind} | chain={report.chain}"
            )
            return NotificationDecision(
                should_send=False,
                level=level,
                skip_reason=SKIP_WEBHOOK_MISSING,
                uneventful=uneventful,
            )

        if uneventful:
            if not self.notify_uneventful:
                logger.info(
                    f"[NOTIFY_SKIP_UNEVENTFUL] Nothing happened, not reporting | "
                    f"kind={report.kind} | chain={report.chain} | "
                    f"summary={asdict(report.summary)}"
                )
                return NotificationDecision(
                    should_send=False,
                    level=ReportLevel.INFO,
                    skip_reason=SKIP_UNEVENTFUL,
                    uneventful=True,
                )
            return NotificationDecision(should_send=True, level=ReportLevel.INFO, uneventful=True)

        return NotificationDecision(should_send=True, level=level)

    def should_ping(self, level: ReportLevel) -> bool:
        if not self.role_ping_enabled or not self.ping_role_ids:
            return False
        return level >= ReportLevel.WARNING or self.notify_uneventful

    def role_ping(self, level: ReportLevel) -> str:
        """Discord role mentions, or "" when pings do not apply."""
        if not self.should_ping(level):
            return ""
        return " ".join(f"<@&{role_id}>" for role_id in self.ping_role_ids)


__all__ = [
    "SKIP_WEBHOOK_MISSING",
    "SKIP_UNEVENTFUL",
    "ERROR_WEBHOOK_MISSING",
    "NotificationDecision",
    "NotificationPolicy",
]
