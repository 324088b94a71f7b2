"""
Report serialization for the audit attachment.

Wei amounts (fields ending in `_wei`) are written as decimal strings so
values above 2^53 survive any JSON consumer. Settled outcomes use the
{"status": ..., "value"/"reason": ...} shape, enums their values and
datetimes ISO-8601.
"""

import dataclasses
import json
from datetime import datetime
from enum import Enum
from typing import Any, Dict

from harvest_notifier.reports.models import Report
from harvest_notifier.reports.settled import Fulfilled, Rejected, outcome_to_dict

REPORT_CONTENT_TYPE = "application/json"

WEI_SUFFIX = "_wei"


def _to_jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (Fulfilled, Rejected)):
        return outcome_to_dict(value, _to_jsonable)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result = {}  # type: Dict[str, Any]
        for f in dataclasses.fields(value):
            item = getattr(value, f.name)
            if f.name.endswith(WEI_SUFFIX) and isinstance(item, int) and not isinstance(item, bool):
                result[f.name] = str(item)
            else:
                result[f.name] = _to_jsonable(item)
        return result
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return str(value)


def report_to_dict(report: Report) -> Dict[str, Any]:
    return _to_jsonable(report)


def serialize_report(report: Report, pretty: bool = True) -> str:
    return json.dumps(
        report_to_dict(report),
        indent=2 if pretty else None,
        ensure_ascii=False,
    )


def serialize_value(value: Any, pretty: bool = True) -> str:
    """JSON for arbitrary context data (error alerts); never raises on odd types."""
    return json.dumps(_to_jsonable(value), indent=2 if pretty else None, ensure_ascii=False, default=str)


def report_filename(chain: str) -> str:
    return f"report_{chain}.json"


__all__ = [
    "REPORT_CONTENT_TYPE",
    "report_to_dict",
    "serialize_report",
    "serialize_value",
    "report_filename",
]
