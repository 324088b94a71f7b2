"""Report notification: policy, message assembly, redaction and delivery."""

from harvest_notifier.notify.discord_webhook import (
    DiscordWebhookClient,
    NotificationResult,
    ReportAttachment,
    WebhookPayload,
)
from harvest_notifier.notify.dispatcher import NotificationDispatcher, WebhookTransport
from harvest_notifier.notify.messages import ErrorContext, MessageContent
from harvest_notifier.notify.policy import NotificationDecision, NotificationPolicy
from harvest_notifier.notify.redaction import (
    REDACTED_PLACEHOLDER,
    RedactingFilter,
    SecretRedactor,
    install_redaction_filter,
    redact,
)

__all__ = [
    "DiscordWebhookClient",
    "NotificationResult",
    "ReportAttachment",
    "WebhookPayload",
    "NotificationDispatcher",
    "WebhookTransport",
    "ErrorContext",
    "MessageContent",
    "NotificationDecision",
    "NotificationPolicy",
    "REDACTED_PLACEHOLDER",
    "RedactingFilter",
    "SecretRedactor",
    "install_redaction_filter",
    "redact",
]
