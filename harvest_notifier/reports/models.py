"""
============================================================================
Harvest Notifier v1.0.0
Report Models - Harvest and Unwrap Reports
============================================================================

Reliability Level: L6 Critical
Input Constraints: Token amounts are int wei (18 implied decimals)
Side Effects: None (immutable value objects)

REPORT VARIANTS (tagged by `kind`):
- HarvestReport: one batch harvest over many vault strategies
- UnwrapReport: one wrapped-native → native unwrap operation

Both share chain, collector balances (settled outcomes) and ProfitTotals,
which is all the shared formatting code reads. Per-variant detail stays in
the variant's own summary and details.

SEVERITY:
    INFO < WARNING < ERROR
    ERROR if statuses.error > 0, else WARNING if statuses.warning > 0,
    else INFO. No other status count affects the level.
============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Iterable, Optional, Tuple, Union
import logging

from harvest_notifier.reports.settled import SettledOutcome

logger = logging.getLogger(__name__)


REPORT_KIND_HARVEST = "harvest"
REPORT_KIND_UNWRAP = "unwrap"


# =============================================================================
# ENUMS
# =============================================================================

class ReportLevel(IntEnum):
    """
    Notification severity, totally ordered.

    Values line up with the stdlib logging levels.
    """
    INFO = 20
    WARNING = 30
    ERROR = 40

    @property
    def emoji(self) -> str:
        return _LEVEL_EMOJI[self]

    @property
    def label(self) -> str:
        return f"{self.emoji} {self.name}"


_LEVEL_EMOJI = {
    ReportLevel.INFO: "ℹ️",
    ReportLevel.WARNING: "⚠️",
    ReportLevel.ERROR: "🔥",
}


class ItemStatus(str, Enum):
    """Outcome category of a single strategy within a harvest run."""
    INFO = "info"
    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"
    SILENT_ERROR = "silent-error"


# =============================================================================
# BALANCES AND TOTALS
# =============================================================================

@dataclass(frozen=True)
class CollectorBalance:
    """Collector address holdings at one point in time, all in wei."""
    balance_wei: int
    wnative_balance_wei: int
    aggregated_balance_wei: int

    @classmethod
    def of(cls, balance_wei: int, wnative_balance_wei: int) -> "CollectorBalance":
        return cls(
            balance_wei=balance_wei,
            wnative_balance_wei=wnative_balance_wei,
            aggregated_balance_wei=balance_wei + wnative_balance_wei,
        )


@dataclass(frozen=True)
class ProfitTotals:
    """
    Financial deltas of one run, in wei.

    native_gas_used_wei is the native token spent on gas, reported in
    the native column of the profit row.
    """
    native_gas_used_wei: int = 0
    wnative_profit_wei: int = 0
    aggregated_profit_wei: int = 0


# =============================================================================
# HARVEST
# =============================================================================

@dataclass(frozen=True)
class StatusCounts:
    error: int = 0
    warning: int = 0
    notice: int = 0
    info: int = 0
    silent_error: int = 0

    def __post_init__(self) -> None:
        for name in ("error", "warning", "notice", "info", "silent_error"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"status count '{name}' must be a non-negative int, got {value!r}")

    def count(self, status: ItemStatus) -> int:
        return getattr(self, status.value.replace("-", "_"))


def classify_level(statuses: StatusCounts) -> ReportLevel:
    """Error dominates warning dominates info."""
    if statuses.error > 0:
        return ReportLevel.ERROR
    if statuses.warning > 0:
        return ReportLevel.WARNING
    return ReportLevel.INFO


@dataclass(frozen=True)
class StrategyResult:
    """Per-strategy outcome of a harvest run."""
    vault_id: str
    strategy_address: str
    status: ItemStatus = ItemStatus.INFO
    harvested: bool = False
    skipped: bool = False
    warning: bool = False
    not_harvesting_reason: Optional[str] = None
    error_message: Optional[str] = None
    gas_used_wei: int = 0


@dataclass(frozen=True)
class ReportSummary:
    """
    Aggregated counters of a harvest run.

    For a well-formed run every strategy is exactly one of harvested,
    skipped or failed (error / silent-error), see is_consistent().
    """
    total_strategies: int
    skipped: int
    harvested: int
    statuses: StatusCounts = field(default_factory=StatusCounts)
    totals: ProfitTotals = field(default_factory=ProfitTotals)

    def __post_init__(self) -> None:
        for name in ("total_strategies", "skipped", "harvested"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"'{name}' must be a non-negative int, got {value!r}")

    @classmethod
    def from_details(
        cls,
        details: Iterable[StrategyResult],
        totals: Optional[ProfitTotals] = None
    ) -> "ReportSummary":
        counts = {status: 0 for status in ItemStatus}
        total = skipped = harvested = 0
        for item in details:
            total += 1
            counts[item.status] += 1
            if item.harvested:
                harvested += 1
            elif item.skipped:
                skipped += 1

        return cls(
            total_strategies=total,
            skipped=skipped,
            harvested=harvested,
            statuses=StatusCounts(
                error=counts[ItemStatus.ERROR],
                warning=counts[ItemStatus.WARNING],
                notice=counts[ItemStatus.NOTICE],
                info=counts[ItemStatus.INFO],
                silent_error=counts[ItemStatus.SILENT_ERROR],
            ),
            totals=totals or ProfitTotals(),
        )

    def level(self) -> ReportLevel:
        return classify_level(self.statuses)

    def is_uneventful(self, include_notice: bool = True) -> bool:
        """Nothing harvested and nothing worth a look."""
        quiet = (
            self.harvested == 0
            and self.statuses.error == 0
            and self.statuses.warning == 0
        )
        if include_notice:
            quiet = quiet and self.statuses.notice == 0
        return quiet

    def is_consistent(self) -> bool:
        terminal = self.statuses.error + self.statuses.silent_error
        return self.total_strategies == self.skipped + self.harvested + terminal


@dataclass(frozen=True)
class HarvestReport:
    chain: str
    summary: ReportSummary
    collector_balance_before: SettledOutcome = None
    collector_balance_after: SettledOutcome = None
    details: Tuple[StrategyResult, ...] = ()
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    kind: str = field(default=REPORT_KIND_HARVEST, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "details", tuple(self.details))


# =============================================================================
# UNWRAP
# =============================================================================

@dataclass(frozen=True)
class UnwrapSummary:
    success: bool
    unwrapped: bool
    totals: ProfitTotals = field(default_factory=ProfitTotals)

    def level(self) -> ReportLevel:
        return ReportLevel.INFO if self.success else ReportLevel.ERROR

    def is_uneventful(self) -> bool:
        return self.success and not self.unwrapped


@dataclass(frozen=True)
class UnwrapDetails:
    should_unwrap: bool
    reason: Optional[str] = None
    unwrapped_wei: int = 0
    transaction_hash: Optional[str] = None
    error_message: Optional[str] = None


@dataclass(frozen=True)
class UnwrapReport:
    chain: str
    summary: UnwrapSummary
    collector_balance_before: SettledOutcome = None
    collector_balance_after: SettledOutcome = None
    details: Optional[UnwrapDetails] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    kind: str = field(default=REPORT_KIND_UNWRAP, init=False)


Report = Union[HarvestReport, UnwrapReport]


# =============================================================================
# SHARED ACCESSORS
# =============================================================================

def report_level(report: Report) -> ReportLevel:
    return report.summary.level()


def report_is_uneventful(report: Report) -> bool:
    return report.summary.is_uneventful()


def report_totals(report: Report) -> ProfitTotals:
    return report.summary.totals


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
    "report_level",
    "report_is_uneventful",
    "report_totals",
]
