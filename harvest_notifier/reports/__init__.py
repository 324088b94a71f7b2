"""Report value objects, settled outcomes and serialization."""

from harvest_notifier.reports.models import (
    REPORT_KIND_HARVEST,
    REPORT_KIND_UNWRAP,
    ReportLevel,
    ItemStatus,
    CollectorBalance,
    ProfitTotals,
    StatusCounts,
    classify_level,
    StrategyResult,
    ReportSummary,
    HarvestReport,
    UnwrapSummary,
    UnwrapDetails,
    UnwrapReport,
    Report,
)
from harvest_notifier.reports.settled import (
    UNAVAILABLE,
    Fulfilled,
    Rejected,
    SettledOutcome,
    project,
    render,
    settle,
)
from harvest_notifier.reports.serialization import serialize_report, report_filename

__all__ = [
    "REPORT_KIND_HARVEST",
    "REPORT_KIND_UNWRAP",
    "ReportLevel",
    "ItemStatus",
    "CollectorBalance",
    "ProfitTotals",
    "StatusCounts",
    "classify_level",
    "StrategyResult",
    "ReportSummary",
    "HarvestReport",
    "UnwrapSummary",
    "UnwrapDetails",
    "UnwrapReport",
    "Report",
    "UNAVAILABLE",
    "Fulfilled",
    "Rejected",
    "SettledOutcome",
    "project",
    "render",
    "settle",
    "serialize_report",
    "report_filename",
]
