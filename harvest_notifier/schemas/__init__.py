"""Pydantic schemas for report payloads read from disk."""

from harvest_notifier.schemas.report import ReportParseError, parse_report

__all__ = ["ReportParseError", "parse_report"]
