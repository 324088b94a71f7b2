#!/usr/bin/env python3
"""
============================================================================
Harvest Notifier v1.0.0
Notify Report Job - Send One Harvest / Unwrap Report
============================================================================

Reliability Level: Offline Job (Cold Path)
Input Constraints: Path to a report JSON file (serialize_report() shape)
Side Effects: At most one report webhook POST, plus one alert POST when
              the report file cannot be read

USAGE:
    python -m jobs.notify_report --report-file reports/bsc.json --report-id 42

EXIT CODES:
    0: Notification sent or deliberately skipped
    1: Report unreadable or delivery failed
============================================================================
"""

from pathlib import Path
from typing import Optional
import argparse
import logging
import sys

from dotenv import load_dotenv

from harvest_notifier.config import NotifierConfig
from harvest_notifier.notify.discord_webhook import NotificationResult
from harvest_notifier.notify.dispatcher import NotificationDispatcher, WebhookTransport
from harvest_notifier.notify.messages import ErrorContext
from harvest_notifier.notify.redaction import SecretRedactor, install_redaction_filter
from harvest_notifier.schemas.report import ReportParseError, parse_report

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def notify_report_file(
    report_path: str,
    report_id: Optional[int] = None,
    config: Optional[NotifierConfig] = None,
    transport: Optional[WebhookTransport] = None
) -> NotificationResult:
    """
    Read a serialized report and hand it to the dispatcher.

    An unreadable report is itself worth an alert: it goes to the alert
    webhook and the job reports failure.
    """
    config = config or NotifierConfig.from_environment()
    dispatcher = NotificationDispatcher(config, transport=transport)

    try:
        report = parse_report(Path(report_path).read_bytes())
    except (OSError, ReportParseError) as e:
        logger.error(f"[NOTIFY_JOB] Could not load report | path={report_path} | error={e}")
        dispatcher.notify_error(
            ErrorContext(doing="loading report file", data={"path": report_path, "report_id": report_id}),
            e,
        )
        return NotificationResult(success=False, error_code="RPT-001", error_message=str(e))

    result = dispatcher.notify_report(report, report_id=report_id)
    logger.info(
        f"[NOTIFY_JOB] Done | kind={report.kind} | chain={report.chain} | "
        f"success={result.success} | sent={result.sent} | skip_reason={result.skip_reason}"
    )
    return result


def main():
    """CLI entry point for the notify job."""
    parser = argparse.ArgumentParser(
        description="Send a harvest or unwrap report notification"
    )
    parser.add_argument(
        "--report-file",
        type=str,
        required=True,
        help="Path to the report JSON file"
    )
    parser.add_argument(
        "--report-id",
        type=int,
        default=None,
        help="Report id used to build the full report link"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = NotifierConfig.from_environment()
    install_redaction_filter(SecretRedactor(config.secrets()))

    result = notify_report_file(args.report_file, report_id=args.report_id, config=config)

    sys.exit(0 if result.success else 1)


if __name__ == "__main__":
    main()
