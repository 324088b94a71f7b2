"""
============================================================================
Harvest Notifier v1.0.0
Report Schema - Pydantic Models for Serialized Reports
============================================================================

Reliability Level: L5 High
Input Constraints: JSON produced by serialize_report() (or a compatible
                   producer); wei amounts as decimal strings or ints
Side Effects: None (pure validation)

WEI MANDATE:
- Wei amounts are arbitrary-precision integers
- Floats are rejected outright, they cannot carry 18 decimals of wei
- Decimal strings ("123", "-5") and JSON ints are accepted

ERROR CODES:
- RPT-001: Report payload failed validation
============================================================================
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union
import json
import re

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from harvest_notifier.reports.models import (
    REPORT_KIND_HARVEST,
    REPORT_KIND_UNWRAP,
    CollectorBalance,
    HarvestReport,
    ItemStatus,
    ProfitTotals,
    Report,
    ReportSummary,
    StatusCounts,
    StrategyResult,
    UnwrapDetails,
    UnwrapReport,
    UnwrapSummary,
)
from harvest_notifier.reports.settled import (
    STATUS_FULFILLED,
    STATUS_REJECTED,
    Fulfilled,
    Rejected,
    SettledOutcome,
)


# ============================================================================
# CONSTANTS
# ============================================================================

ERROR_REPORT_INVALID = "RPT-001"

_WEI_PATTERN = re.compile(r"^-?\d+$")


class ReportParseError(ValueError):
    """Raised when a report payload cannot be turned into a report."""

    def __init__(self, message: str) -> None:
        super().__init__(f"[{ERROR_REPORT_INVALID}] {message}")


# ============================================================================
# CUSTOM VALIDATORS
# ============================================================================

def parse_wei(value: Any, field_name: str) -> int:
    """
    Coerce a serialized wei amount to int.

    Raises:
        ValueError: On floats, booleans or non-integer strings
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError(
            f"[{ERROR_REPORT_INVALID}] {field_name} must be an integer wei amount, "
            f"received {type(value).__name__}: {value!r}"
        )
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _WEI_PATTERN.match(value.strip()):
        return int(value.strip())
    raise ValueError(f"[{ERROR_REPORT_INVALID}] {field_name} is not a wei amount: {value!r}")


class _ReportModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class _WeiModel(_ReportModel):
    @field_validator("*", mode="before")
    @classmethod
    def validate_wei_fields(cls, v: Any, info: ValidationInfo) -> Any:
        if info.field_name.endswith("_wei") and v is not None:
            return parse_wei(v, info.field_name)
        return v


# ============================================================================
# SHARED
# ============================================================================

class CollectorBalanceIn(_WeiModel):
    balance_wei: int
    wnative_balance_wei: int
    aggregated_balance_wei: Optional[int] = None

    def to_domain(self) -> CollectorBalance:
        if self.aggregated_balance_wei is None:
            return CollectorBalance.of(self.balance_wei, self.wnative_balance_wei)
        return CollectorBalance(
            balance_wei=self.balance_wei,
            wnative_balance_wei=self.wnative_balance_wei,
            aggregated_balance_wei=self.aggregated_balance_wei,
        )


class SettledBalanceIn(_ReportModel):
    """{"status": "fulfilled", "value": {...}} or {"status": "rejected", "reason": "..."}"""
    status: Literal["fulfilled", "rejected"]
    value: Optional[CollectorBalanceIn] = None
    reason: Optional[str] = None

    @model_validator(mode="after")
    def check_value_present(self) -> "SettledBalanceIn":
        if self.status == STATUS_FULFILLED and self.value is None:
            raise ValueError(f"[{ERROR_REPORT_INVALID}] fulfilled outcome without a value")
        return self

    def to_domain(self) -> SettledOutcome:
        if self.status == STATUS_REJECTED:
            return Rejected(self.reason or "unknown")
        return Fulfilled(self.value.to_domain())


def _settled(outcome: Optional[SettledBalanceIn]) -> SettledOutcome:
    return outcome.to_domain() if outcome is not None else None


class ProfitTotalsIn(_WeiModel):
    native_gas_used_wei: int = 0
    wnative_profit_wei: int = 0
    aggregated_profit_wei: int = 0

    def to_domain(self) -> ProfitTotals:
        return ProfitTotals(
            native_gas_used_wei=self.native_gas_used_wei,
            wnative_profit_wei=self.wnative_profit_wei,
            aggregated_profit_wei=self.aggregated_profit_wei,
        )


# ============================================================================
# HARVEST
# ============================================================================

class StatusCountsIn(_ReportModel):
    error: int = Field(0, ge=0)
    warning: int = Field(0, ge=0)
    notice: int = Field(0, ge=0)
    info: int = Field(0, ge=0)
    silent_error: int = Field(0, ge=0)

    def to_domain(self) -> StatusCounts:
        return StatusCounts(**self.model_dump())


class StrategyResultIn(_WeiModel):
    vault_id: str = Field(..., min_length=1)
    strategy_address: str
    status: ItemStatus = ItemStatus.INFO
    harvested: bool = False
    skipped: bool = False
    warning: bool = False
    not_harvesting_reason: Optional[str] = None
    error_message: Optional[str] = None
    gas_used_wei: int = 0

    def to_domain(self) -> StrategyResult:
        return StrategyResult(**dict(self))


class ReportSummaryIn(_ReportModel):
    total_strategies: int = Field(..., ge=0)
    skipped: int = Field(0, ge=0)
    harvested: int = Field(0, ge=0)
    statuses: StatusCountsIn = Field(default_factory=StatusCountsIn)
    totals: ProfitTotalsIn = Field(default_factory=ProfitTotalsIn)

    def to_domain(self) -> ReportSummary:
        return ReportSummary(
            total_strategies=self.total_strategies,
            skipped=self.skipped,
            harvested=self.harvested,
            statuses=self.statuses.to_domain(),
            totals=self.totals.to_domain(),
        )


class HarvestReportIn(_ReportModel):
    kind: Literal["harvest"] = REPORT_KIND_HARVEST
    chain: str = Field(..., min_length=1)
    summary: ReportSummaryIn
    collector_balance_before: Optional[SettledBalanceIn] = None
    collector_balance_after: Optional[SettledBalanceIn] = None
    details: List[StrategyResultIn] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    def to_domain(self) -> HarvestReport:
        return HarvestReport(
            chain=self.chain,
            summary=self.summary.to_domain(),
            collector_balance_before=_settled(self.collector_balance_before),
            collector_balance_after=_settled(self.collector_balance_after),
            details=tuple(item.to_domain() for item in self.details),
            started_at=self.started_at,
            finished_at=self.finished_at,
        )


# ============================================================================
# UNWRAP
# ============================================================================

class UnwrapSummaryIn(_ReportModel):
    success: bool
    unwrapped: bool = False
    totals: ProfitTotalsIn = Field(default_factory=ProfitTotalsIn)

    def to_domain(self) -> UnwrapSummary:
        return UnwrapSummary(
            success=self.success,
            unwrapped=self.unwrapped,
            totals=self.totals.to_domain(),
        )


class UnwrapDetailsIn(_WeiModel):
    should_unwrap: bool
    reason: Optional[str] = None
    unwrapped_wei: int = 0
    transaction_hash: Optional[str] = None
    error_message: Optional[str] = None

    def to_domain(self) -> UnwrapDetails:
        return UnwrapDetails(**dict(self))


class UnwrapReportIn(_ReportModel):
    kind: Literal["unwrap"] = REPORT_KIND_UNWRAP
    chain: str = Field(..., min_length=1)
    summary: UnwrapSummaryIn
    collector_balance_before: Optional[SettledBalanceIn] = None
    collector_balance_after: Optional[SettledBalanceIn] = None
    details: Optional[UnwrapDetailsIn] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    def to_domain(self) -> UnwrapReport:
        return UnwrapReport(
            chain=self.chain,
            summary=self.summary.to_domain(),
            collector_balance_before=_settled(self.collector_balance_before),
            collector_balance_after=_settled(self.collector_balance_after),
            details=self.details.to_domain() if self.details is not None else None,
            started_at=self.started_at,
            finished_at=self.finished_at,
        )


# ============================================================================
# ENTRY POINT
# ============================================================================

_MODELS_BY_KIND = {
    REPORT_KIND_HARVEST: HarvestReportIn,
    REPORT_KIND_UNWRAP: UnwrapReportIn,
}


def parse_report(payload: Union[str, bytes, Dict[str, Any]]) -> Report:
    """
    Build a HarvestReport or UnwrapReport from JSON text, UTF-8 bytes or a dict.

    `kind` selects the variant and defaults to "harvest".

    Raises:
        ReportParseError: On bad encoding, malformed JSON, unknown kind or invalid fields
    """
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ReportParseError(f"Report is not valid UTF-8: {e}")

    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            raise ReportParseError(f"Report is not valid JSON: {e}")

    if not isinstance(payload, dict):
        raise ReportParseError(f"Report must be a JSON object, got {type(payload).__name__}")

    kind = payload.get("kind", REPORT_KIND_HARVEST)
    model = _MODELS_BY_KIND.get(kind)
    if model is None:
        raise ReportParseError(f"Unknown report kind: {kind!r}")

    try:
        parsed = model.model_validate(payload)
    except ValidationError as e:
        raise ReportParseError(f"Invalid {kind} report: {e}")

    try:
        return parsed.to_domain()
    except ValueError as e:
        raise ReportParseError(f"Inconsistent {kind} report: {e}")


__all__ = [
    "ERROR_REPORT_INVALID",
    "ReportParseError",
    "parse_wei",
    "CollectorBalanceIn",
    "SettledBalanceIn",
    "ProfitTotalsIn",
    "StatusCountsIn",
    "StrategyResultIn",
    "ReportSummaryIn",
    "HarvestReportIn",
    "UnwrapSummaryIn",
    "UnwrapDetailsIn",
    "UnwrapReportIn",
    "parse_report",
]
