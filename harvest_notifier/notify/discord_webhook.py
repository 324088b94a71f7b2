"""
============================================================================
Harvest Notifier v1.0.0
Discord Webhook Transport
============================================================================

Reliability Level: L5 High
Input Constraints: Discord-compatible webhook URL
Side Effects: One HTTP POST per call

REQUEST SHAPE:
- With attachment: multipart/form-data
    payload_json = {"content": ..., "username"?: ..., "avatar_url"?: ...}
    file1        = report_<chain>.json (application/json, UTF-8)
- Without attachment: JSON body with the same payload

One attempt per call. No retry, no internal queue; the timeout is the
only bound on how long a call can take. Failures come back as a
NotificationResult, never as an exception.

ERROR CODES:
- NTF-002-RATE_LIMITED: HTTP 429 from the webhook
- NTF-003-REQUEST_FAILED: Network error or non-success status
- NTF-004-TIMEOUT: Request timed out
============================================================================
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import json
import logging

import requests

from harvest_notifier import __version__
from harvest_notifier.config import DEFAULT_REQUEST_TIMEOUT_SECONDS
from harvest_notifier.notify.redaction import SecretRedactor
from harvest_notifier.reports.models import ReportLevel

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

ERROR_RATE_LIMITED = "NTF-002-RATE_LIMITED"
ERROR_REQUEST_FAILED = "NTF-003-REQUEST_FAILED"
ERROR_TIMEOUT = "NTF-004-TIMEOUT"

USER_AGENT = f"HarvestNotifier/{__version__}"

# Keep error bodies short in logs
MAX_ERROR_BODY_LENGTH = 300


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class WebhookPayload:
    content: str
    username: Optional[str] = None
    avatar_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = {"content": self.content}  # type: Dict[str, Any]
        if self.username:
            payload["username"] = self.username
        if self.avatar_url:
            payload["avatar_url"] = self.avatar_url
        return payload


@dataclass(frozen=True)
class ReportAttachment:
    filename: str
    content: bytes
    content_type: str = "application/json"


@dataclass
class NotificationResult:
    """
    Outcome of one notification call.

    success=True with sent=False means the policy decided to skip.
    """
    success: bool
    sent: bool = False
    level: Optional[ReportLevel] = None
    skip_reason: Optional[str] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    status_code: Optional[int] = None
    rate_limited: bool = False
    retry_after_seconds: Optional[float] = None


# =============================================================================
# CLIENT
# =============================================================================

class DiscordWebhookClient:
    """
    Posts webhook messages with an optional file attachment.

    USAGE:
        client = DiscordWebhookClient(timeout_seconds=10)
        result = client.post(
            webhook_url,
            WebhookPayload(content="### Harvest ℹ️ INFO for BSC"),
            ReportAttachment("report_bsc.json", b"{...}"),
        )
    """

    def __init__(self, timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout_seconds

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def post(
        self,
        webhook_url: str,
        payload: WebhookPayload,
        attachment: Optional[ReportAttachment] = None
    ) -> NotificationResult:
        # the URL embeds the webhook token; keep it out of every message
        scrub = SecretRedactor([webhook_url]).redact
        headers = {"User-Agent": USER_AGENT}

        try:
            if attachment is not None:
                response = requests.post(
                    webhook_url,
                    data={"payload_json": json.dumps(payload.to_dict())},
                    files={"file1": (attachment.filename, attachment.content, attachment.content_type)},
                    headers=headers,
                    timeout=self._timeout,
                )
            else:
                response = requests.post(
                    webhook_url,
                    json=payload.to_dict(),
                    headers=headers,
                    timeout=self._timeout,
                )

        except requests.Timeout:
            logger.error(f"[{ERROR_TIMEOUT}] Webhook request timed out after {self._timeout}s")
            return NotificationResult(
                success=False,
                error_code=ERROR_TIMEOUT,
                error_message=f"Request timed out after {self._timeout}s",
            )

        except requests.RequestException as e:
            message = scrub(f"{type(e).__name__}: {e}")
            logger.error(f"[{ERROR_REQUEST_FAILED}] Webhook request failed: {message}")
            return NotificationResult(
                success=False,
                error_code=ERROR_REQUEST_FAILED,
                error_message=message,
            )

        if response.status_code == 429:
            retry_after = self._retry_after(response)
            logger.warning(
                f"[{ERROR_RATE_LIMITED}] Webhook rate limit hit, retry after {retry_after}s"
            )
            return NotificationResult(
                success=False,
                error_code=ERROR_RATE_LIMITED,
                error_message="Webhook rate limit exceeded",
                status_code=429,
                rate_limited=True,
                retry_after_seconds=retry_after,
            )

        if not response.ok:
            body = scrub((response.text or "")[:MAX_ERROR_BODY_LENGTH])
            logger.error(
                f"[{ERROR_REQUEST_FAILED}] Unexpected webhook status | "
                f"status={response.status_code} | body={body}"
            )
            return NotificationResult(
                success=False,
                error_code=ERROR_REQUEST_FAILED,
                error_message=f"HTTP {response.status_code}: {body}",
                status_code=response.status_code,
            )

        logger.debug(f"[WEBHOOK_SEND] Message sent | status={response.status_code}")
        return NotificationResult(success=True, sent=True, status_code=response.status_code)

    @staticmethod
    def _retry_after(response: requests.Response) -> Optional[float]:
        header = response.headers.get("Retry-After")
        if header:
            try:
                return float(header)
            except ValueError:
                pass
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("retry_after"), (int, float)):
            return float(body["retry_after"])
        return None


__all__ = [
    "ERROR_RATE_LIMITED",
    "ERROR_REQUEST_FAILED",
    "ERROR_TIMEOUT",
    "WebhookPayload",
    "ReportAttachment",
    "NotificationResult",
    "DiscordWebhookClient",
]
