"""
============================================================================
Harvest Notifier v1.0.0
============================================================================

Turns harvest and native-token unwrap reports into chat notifications.

PIPELINE:
Report → ReportSummary → NotificationPolicy → message assembly
       → SecretRedactor → NotificationDispatcher → webhook transport

Notifications are best-effort: delivery failures are logged and returned
as a NotificationResult, never raised into the batch job.
============================================================================
"""

__version__ = "1.0.0"
