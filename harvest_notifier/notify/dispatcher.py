"""
============================================================================
Harvest Notifier v1.0.0
Notification Dispatcher - Best-Effort Report Delivery
============================================================================

Reliability Level: L6 Critical
Input Constraints: HarvestReport / UnwrapReport, optional numeric report id
Side Effects: One webhook POST per notification, logs, Prometheus counters

FLOW:
    policy.decide → build content → redact → truncate body → transport.post

The report link and role ping sit in the message trailer and survive
truncation; only the body is cut.

BEST-EFFORT CONTRACT:
- A skipped notification returns success=True, sent=False
- Transport and assembly failures are logged at ERROR and returned as
  success=False; they never propagate into the calling batch job
- InvalidPrecisionError is a programming error and DOES propagate
- No retries, no shared state between calls

ERROR CODES:
- NTF-001-WEBHOOK_MISSING: Endpoint not configured
- NTF-003-REQUEST_FAILED: Transport reported or raised a failure
- NTF-005-ASSEMBLY_FAILED: Message could not be built
============================================================================
"""

from dataclasses import replace
from typing import Any, Dict, Optional, Protocol, Union
import logging

from harvest_notifier.arithmetic.fixed_point import InvalidPrecisionError
from harvest_notifier.config import NotifierConfig
from harvest_notifier.notify.discord_webhook import (
    ERROR_REQUEST_FAILED,
    DiscordWebhookClient,
    NotificationResult,
    ReportAttachment,
    WebhookPayload,
)
from harvest_notifier.notify.messages import (
    ErrorContext,
    MessageContent,
    build_error_message,
    build_harvest_message,
    build_unwrap_message,
)
from harvest_notifier.notify.policy import (
    ERROR_WEBHOOK_MISSING,
    SKIP_WEBHOOK_MISSING,
    NotificationPolicy,
)
from harvest_notifier.notify.redaction import SecretRedactor
from harvest_notifier.observability.metrics import (
    KIND_ERROR,
    OUTCOME_FAILED,
    OUTCOME_SENT,
    OUTCOME_SKIPPED,
    record_notification,
)
from harvest_notifier.reports.models import (
    HarvestReport,
    Report,
    ReportLevel,
    UnwrapReport,
)
from harvest_notifier.reports.serialization import (
    REPORT_CONTENT_TYPE,
    report_filename,
    serialize_report,
)

logger = logging.getLogger(__name__)

ERROR_ASSEMBLY_FAILED = "NTF-005-ASSEMBLY_FAILED"


class WebhookTransport(Protocol):
    """Anything that can deliver a payload (+ optional file) to a webhook URL."""

    def post(
        self,
        webhook_url: str,
        payload: WebhookPayload,
        attachment: Optional[ReportAttachment] = None
    ) -> NotificationResult: ...


class NotificationDispatcher:
    """
    Assembles and delivers report and error notifications.

    USAGE:
        dispatcher = NotificationDispatcher(NotifierConfig.from_environment())
        result = dispatcher.notify_harvest_report(report, report_id=42)
        if not result.success:
            ...  # already logged, the batch job carries on
    """

    def __init__(
        self,
        config: NotifierConfig,
        transport: Optional[WebhookTransport] = None,
        policy: Optional[NotificationPolicy] = None,
        redactor: Optional[SecretRedactor] = None
    ) -> None:
        self._config = config
        self._transport = transport or DiscordWebhookClient(config.request_timeout_seconds)
        self._policy = policy or NotificationPolicy.from_config(config)
        self._redactor = redactor or SecretRedactor(config.secrets())

    @property
    def policy(self) -> NotificationPolicy:
        return self._policy

    @property
    def redactor(self) -> SecretRedactor:
        return self._redactor

    # -------------------------------------------------------------------------
    # Report notifications
    # -------------------------------------------------------------------------

    def notify_report(self, report: Report, report_id: Optional[int] = None) -> NotificationResult:
        if isinstance(report, HarvestReport):
            return self.notify_harvest_report(report, report_id)
        if isinstance(report, UnwrapReport):
            return self.notify_unwrap_report(report, report_id)
        raise TypeError(f"Unsupported report type: {type(report).__name__}")

    def notify_harvest_report(self, report: HarvestReport, report_id: Optional[int] = None) -> NotificationResult:
        return self._notify_report(report, report_id)

    def notify_unwrap_report(self, report: UnwrapReport, report_id: Optional[int] = None) -> NotificationResult:
        return self._notify_report(report, report_id)

    def _notify_report(self, report: Report, report_id: Optional[int]) -> NotificationResult:
        webhook_url = self._config.report_webhook_url
        decision = self._policy.decide(report, endpoint_configured=bool(webhook_url))

        if not decision.should_send:
            record_notification(report.kind, OUTCOME_SKIPPED)
            return NotificationResult(
                success=True,
                sent=False,
                level=decision.level,
                skip_reason=decision.skip_reason,
            )

        logger.info(
            f"[NOTIFY_REPORT] Notifying {report.kind} report | chain={report.chain} | "
            f"level={decision.level.name} | report_id={report_id}"
        )

        try:
            role_ping = self._policy.role_ping(decision.level)
            report_url = self._config.report_url(report_id)
            if isinstance(report, HarvestReport):
                content = build_harvest_message(report, decision.level, self._config, role_ping, report_url)
            else:
                content = build_unwrap_message(report, decision.level, role_ping, report_url)
            attachment = ReportAttachment(
                filename=report_filename(report.chain),
                content=serialize_report(report, pretty=True).encode("utf-8"),
                content_type=REPORT_CONTENT_TYPE,
            )
        except InvalidPrecisionError:
            raise
        except Exception as e:
            return self._assembly_failed(report.kind, decision.level, e)

        return self._send(report.kind, webhook_url, content, attachment, decision.level)

    # -------------------------------------------------------------------------
    # Error alerts
    # -------------------------------------------------------------------------

    def notify_error(
        self,
        context: Union[ErrorContext, Dict[str, Any]],
        error: Any
    ) -> NotificationResult:
        """
        Send a free-form error alert to the alert webhook.

        `context` is an ErrorContext or a {"doing": ..., "data": ...} dict.
        """
        if isinstance(context, dict):
            context = ErrorContext(doing=str(context.get("doing", "unknown")), data=context.get("data"))

        webhook_url = self._config.alert_webhook_url
        if not webhook_url:
            logger.warning(
                f"[{ERROR_WEBHOOK_MISSING}] Alert webhook not set, not sending error alert | "
                f"doing={context.doing}"
            )
            record_notification(KIND_ERROR, OUTCOME_SKIPPED)
            return NotificationResult(
                success=True,
                sent=False,
                level=ReportLevel.ERROR,
                skip_reason=SKIP_WEBHOOK_MISSING,
            )

        logger.info(f"[NOTIFY_ERROR] Sending error alert | doing={context.doing}")

        try:
            content = build_error_message(context, error, self._policy.role_ping(ReportLevel.ERROR))
        except Exception as e:
            return self._assembly_failed(KIND_ERROR, ReportLevel.ERROR, e)

        return self._send(KIND_ERROR, webhook_url, content, None, ReportLevel.ERROR)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _assembly_failed(self, kind: str, level: ReportLevel, error: Exception) -> NotificationResult:
        message = self._redactor.redact(f"{type(error).__name__}: {error}")
        logger.error(
            f"[{ERROR_ASSEMBLY_FAILED}] Could not build {kind} notification: {message}",
            exc_info=True,
        )
        record_notification(kind, OUTCOME_FAILED)
        return NotificationResult(
            success=False,
            level=level,
            error_code=ERROR_ASSEMBLY_FAILED,
            error_message=message,
        )

    def _send(
        self,
        kind: str,
        webhook_url: str,
        content: MessageContent,
        attachment: Optional[ReportAttachment],
        level: ReportLevel
    ) -> NotificationResult:
        payload = WebhookPayload(
            content=content.map(self._redactor.redact).fit(),
            username=self._config.webhook_username,
            avatar_url=self._config.webhook_avatar_url,
        )

        try:
            result = self._transport.post(webhook_url, payload, attachment)
        except Exception as e:
            message = self._redactor.redact(f"{type(e).__name__}: {e}")
            logger.error(
                f"[{ERROR_REQUEST_FAILED}] Something went wrong sending {kind} message: {message}",
                exc_info=True,
            )
            result = NotificationResult(
                success=False,
                error_code=ERROR_REQUEST_FAILED,
                error_message=message,
            )
        else:
            if not result.success:
                message = self._redactor.redact(result.error_message or "")
                logger.error(
                    f"[{result.error_code or ERROR_REQUEST_FAILED}] Something went wrong sending "
                    f"{kind} message | status={result.status_code} | error={message}"
                )
                result = replace(result, error_message=message)

        record_notification(kind, OUTCOME_SENT if result.success else OUTCOME_FAILED)
        return replace(result, level=level)


__all__ = [
    "ERROR_ASSEMBLY_FAILED",
    "WebhookTransport",
    "NotificationDispatcher",
]
