"""
Message text assembly for report and error notifications.

All amounts go through format_amount at 18 decimals, truncated to
DISPLAY_DIGITS. Balance reads that failed or never ran render as "??".
Output here is NOT redacted; the dispatcher redacts right before sending.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional
import traceback

from harvest_notifier.arithmetic.fixed_point import DISPLAY_DIGITS, NATIVE_SCALE, format_amount
from harvest_notifier.chains import ChainMetadata, get_chain_metadata
from harvest_notifier.config import NotifierConfig
from harvest_notifier.reports.models import (
    HarvestReport,
    ItemStatus,
    Report,
    ReportLevel,
    ReportSummary,
    UnwrapReport,
)
from harvest_notifier.reports.serialization import serialize_value
from harvest_notifier.reports.settled import render
from harvest_notifier.notify.tables import (
    ALIGN_LEFT,
    ALIGN_RIGHT,
    header_and_footer_lines,
    render_table,
)

CODE_FENCE = "```"

# Discord rejects message content above this length
MAX_CONTENT_LENGTH = 2000
TRUNCATION_MARKER = "\n… (truncated, full data in the attached report)"


@dataclass(frozen=True)
class ErrorContext:
    """What the caller was doing when an error surfaced, plus free-form data."""
    doing: str
    data: Any = None


def _amount(raw: int) -> str:
    return format_amount(raw, NATIVE_SCALE, DISPLAY_DIGITS)


# =============================================================================
# Tables
# =============================================================================

def harvest_count_table(summary: ReportSummary) -> str:
    return render_table(
        [
            ["strategies", summary.total_strategies],
            ["skipped", summary.skipped],
            ["errors", summary.statuses.error],
            ["warnings", summary.statuses.warning],
            ["notices", summary.statuses.notice],
            ["silent errors", summary.statuses.silent_error],
            ["harvested", summary.harvested],
        ],
        alignments=[ALIGN_RIGHT, ALIGN_LEFT],
        horizontal_lines=header_and_footer_lines,
    )


def balance_table(report: Report, chain: Optional[ChainMetadata] = None) -> str:
    """Collector balances before / after and the run's profit, per token."""
    chain = chain or get_chain_metadata(report.chain)
    wnative = chain.wnative_symbol
    native = chain.native_symbol
    before = report.collector_balance_before
    after = report.collector_balance_after
    totals = report.summary.totals

    return render_table(
        [
            ["", native, wnative, f"{native} + {wnative}"],
            [
                "before",
                render(before, lambda b: _amount(b.balance_wei)),
                render(before, lambda b: _amount(b.wnative_balance_wei)),
                render(before, lambda b: _amount(b.aggregated_balance_wei)),
            ],
            [
                "after",
                render(after, lambda b: _amount(b.balance_wei)),
                render(after, lambda b: _amount(b.wnative_balance_wei)),
                render(after, lambda b: _amount(b.aggregated_balance_wei)),
            ],
            [
                "profit",
                _amount(totals.native_gas_used_wei),
                _amount(totals.wnative_profit_wei),
                _amount(totals.aggregated_profit_wei),
            ],
        ],
        alignments=[ALIGN_LEFT, ALIGN_RIGHT, ALIGN_RIGHT, ALIGN_RIGHT],
        horizontal_lines=header_and_footer_lines,
    )


# =============================================================================
# Detail lines
# =============================================================================

def _strategy_links(vault_id: str, strategy_address: str, chain: ChainMetadata, config: NotifierConfig) -> str:
    vault_link = f"[{vault_id}](<{config.vault_url(vault_id)}>)"
    explorer_link = chain.address_link(strategy_address)
    if explorer_link:
        strategy_link = f"[{strategy_address}](<{explorer_link}>)"
    else:
        strategy_link = strategy_address
    return f"{vault_link} ({strategy_link})"


def warning_details(report: HarvestReport, config: NotifierConfig, chain: ChainMetadata) -> str:
    lines = []  # type: List[str]
    if report.summary.statuses.warning == 0:
        return ""
    for item in report.details:
        if item.status != ItemStatus.WARNING or not item.warning:
            continue
        links = _strategy_links(item.vault_id, item.strategy_address, chain, config)
        lines.append(f"- {links}: {item.not_harvesting_reason or 'no reason given'}")
    return "\n".join(lines)


def error_details(report: HarvestReport, config: NotifierConfig, chain: ChainMetadata) -> str:
    lines = []  # type: List[str]
    if report.summary.statuses.error == 0:
        return ""
    for item in report.details:
        if item.status != ItemStatus.ERROR:
            continue
        links = _strategy_links(item.vault_id, item.strategy_address, chain, config)
        lines.append(f"- {links}: {item.error_message or 'unknown error'}")
    return "\n".join(lines)


# =============================================================================
# Content builders
# =============================================================================

def _join_sections(sections: List[str]) -> str:
    return "\n".join(s for s in sections if s)


def _report_link(report_url: Optional[str]) -> str:
    return f"[Full report](<{report_url}>)" if report_url else ""


@dataclass(frozen=True)
class MessageContent:
    """
    Message text split into a body and a trailer.

    The trailer (full report link, role pings) is never truncated: when
    the message is too long only the body is cut.
    """
    body: str
    trailer: str = ""

    @property
    def text(self) -> str:
        return _join_sections([self.body, self.trailer])

    def map(self, fn: Callable[[str], str]) -> "MessageContent":
        return MessageContent(body=fn(self.body), trailer=fn(self.trailer))

    def fit(self, limit: int = MAX_CONTENT_LENGTH) -> str:
        text = self.text
        if len(text) <= limit:
            return text
        budget = limit - (len(self.trailer) + 1 if self.trailer else 0)
        return _join_sections([truncate_content(self.body, budget), self.trailer])


def harvest_header(report: HarvestReport, level: ReportLevel) -> str:
    return f"### Harvest {level.label} for {report.chain.upper()}"


def unwrap_header(report: UnwrapReport, level: ReportLevel) -> str:
    return f"### Wnative unwrap {level.label} for {report.chain.upper()}"


def build_harvest_message(
    report: HarvestReport,
    level: ReportLevel,
    config: NotifierConfig,
    role_ping: str = "",
    report_url: Optional[str] = None
) -> MessageContent:
    chain = get_chain_metadata(report.chain)
    tables = f"{CODE_FENCE}\n{harvest_count_table(report.summary)}\n{balance_table(report, chain)}\n{CODE_FENCE}"
    body = _join_sections([
        harvest_header(report, level),
        tables,
        warning_details(report, config, chain),
        error_details(report, config, chain),
    ])
    return MessageContent(body, _join_sections([_report_link(report_url), role_ping]))


def build_harvest_content(
    report: HarvestReport,
    level: ReportLevel,
    config: NotifierConfig,
    role_ping: str = "",
    report_url: Optional[str] = None
) -> str:
    return build_harvest_message(report, level, config, role_ping, report_url).text


def build_unwrap_message(
    report: UnwrapReport,
    level: ReportLevel,
    role_ping: str = "",
    report_url: Optional[str] = None
) -> MessageContent:
    sections = [unwrap_header(report, level)]
    if report.summary.unwrapped:
        sections.append(f"{CODE_FENCE}\n{balance_table(report)}\n{CODE_FENCE}")
    if not report.summary.success and report.details and report.details.error_message:
        sections.append(f"{CODE_FENCE}\n{report.details.error_message}\n{CODE_FENCE}")
    return MessageContent(_join_sections(sections), _join_sections([_report_link(report_url), role_ping]))


def build_unwrap_content(
    report: UnwrapReport,
    level: ReportLevel,
    role_ping: str = "",
    report_url: Optional[str] = None
) -> str:
    return build_unwrap_message(report, level, role_ping, report_url).text


def describe_error(error: Any) -> str:
    if isinstance(error, BaseException):
        return "".join(traceback.format_exception_only(type(error), error)).strip()
    return str(error)


def build_error_message(context: ErrorContext, error: Any, role_ping: str = "") -> MessageContent:
    body = _join_sections([
        f"### {ReportLevel.ERROR.label} while {context.doing}",
        f"{CODE_FENCE}\n{describe_error(error)}\n{CODE_FENCE}",
        f"{CODE_FENCE}json\n{serialize_value(context.data)}\n{CODE_FENCE}",
    ])
    return MessageContent(body, role_ping)


def build_error_content(context: ErrorContext, error: Any, role_ping: str = "") -> str:
    return build_error_message(context, error, role_ping).text


def truncate_content(content: str, limit: int = MAX_CONTENT_LENGTH) -> str:
    """
    Cut content to at most `limit` characters at a line boundary.

    A dangling code fence is closed and TRUNCATION_MARKER appended.
    """
    if len(content) <= limit:
        return content
    closing = "\n" + CODE_FENCE
    budget = max(limit - len(TRUNCATION_MARKER) - len(closing), 0)
    cut = content[:budget]
    # never end on half a line (half a markdown link)
    if len(content) > budget and content[budget:budget + 1] != "\n":
        cut = cut[:max(cut.rfind("\n"), 0)]
    if cut.count(CODE_FENCE) % 2 == 1:
        cut += closing
    return cut + TRUNCATION_MARKER


__all__ = [
    "CODE_FENCE",
    "MAX_CONTENT_LENGTH",
    "TRUNCATION_MARKER",
    "ErrorContext",
    "MessageContent",
    "harvest_count_table",
    "balance_table",
    "warning_details",
    "error_details",
    "harvest_header",
    "unwrap_header",
    "build_harvest_message",
    "build_harvest_content",
    "build_unwrap_message",
    "build_unwrap_content",
    "describe_error",
    "build_error_message",
    "build_error_content",
    "truncate_content",
]
