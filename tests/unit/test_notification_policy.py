"""
Unit Tests for the Notification Policy

Tests the send / skip / severity gate:
- Missing endpoint skips with a warning
- Uneventful runs skip unless explicitly enabled
- Role pings honour the global toggle
"""

import logging
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from harvest_notifier.config import NotifierConfig
from harvest_notifier.notify.policy import (
    SKIP_UNEVENTFUL,
    SKIP_WEBHOOK_MISSING,
    NotificationPolicy,
)
from harvest_notifier.reports.models import (
    HarvestReport,
    ReportLevel,
    ReportSummary,
    StatusCounts,
    UnwrapReport,
    UnwrapSummary,
)


def make_harvest(harvested=0, error=0, warning=0, notice=0, info=0):
    total = harvested + error + info
    return HarvestReport(
        chain="bsc",
        summary=ReportSummary(
            total_strategies=total,
            skipped=info,
            harvested=harvested,
            statuses=StatusCounts(error=error, warning=warning, notice=notice, info=info),
        ),
    )


# =============================================================================
# decide()
# =============================================================================

class TestDecide:

    def test_missing_endpoint_skips_with_warning(self, caplog):
        policy = NotificationPolicy()
        with caplog.at_level(logging.WARNING):
            decision = policy.decide(make_harvest(error=1), endpoint_configured=False)

        assert not decision.should_send
        assert decision.skip_reason == SKIP_WEBHOOK_MISSING
        assert decision.level == ReportLevel.ERROR
        assert "NTF-001-WEBHOOK_MISSING" in caplog.text

    def test_uneventful_skipped_by_default(self, caplog):
        policy = NotificationPolicy(notify_uneventful=False)
        with caplog.at_level(logging.INFO):
            decision = policy.decide(make_harvest(info=4))

        assert not decision.should_send
        assert decision.skip_reason == SKIP_UNEVENTFUL
        assert decision.uneventful
        assert "NOTIFY_SKIP_UNEVENTFUL" in caplog.text

    def test_uneventful_sent_at_info_when_enabled(self):
        decision = NotificationPolicy(notify_uneventful=True).decide(make_harvest(info=4))
        assert decision.should_send
        assert decision.level == ReportLevel.INFO
        assert decision.uneventful

    @pytest.mark.parametrize("kwargs, level", [
        ({"harvested": 1}, ReportLevel.INFO),
        ({"notice": 1, "info": 1}, ReportLevel.INFO),
        ({"warning": 1, "harvested": 1}, ReportLevel.WARNING),
        ({"error": 1, "warning": 2}, ReportLevel.ERROR),
    ])
    def test_eventful_sent_at_summary_level(self, kwargs, level):
        decision = NotificationPolicy().decide(make_harvest(**kwargs))
        assert decision.should_send
        assert decision.level == level
        assert decision.skip_reason is None

    def test_failed_unwrap_is_error(self):
        report = UnwrapReport(chain="bsc", summary=UnwrapSummary(success=False, unwrapped=False))
        decision = NotificationPolicy().decide(report)
        assert decision.should_send
        assert decision.level == ReportLevel.ERROR

    def test_idle_unwrap_skipped(self):
        report = UnwrapReport(chain="bsc", summary=UnwrapSummary(success=True, unwrapped=False))
        decision = NotificationPolicy().decide(report)
        assert not decision.should_send
        assert decision.skip_reason == SKIP_UNEVENTFUL


# =============================================================================
# Role pings
# =============================================================================

class TestRolePing:

    def test_disabled_by_toggle(self):
        policy = NotificationPolicy(ping_role_ids=["111"], role_ping_enabled=False)
        assert policy.role_ping(ReportLevel.ERROR) == ""

    def test_no_roles_configured(self):
        policy = NotificationPolicy(ping_role_ids=[], role_ping_enabled=True)
        assert not policy.should_ping(ReportLevel.ERROR)

    def test_pings_on_warning_and_error(self):
        policy = NotificationPolicy(ping_role_ids=["111", "222"], role_ping_enabled=True)
        assert policy.role_ping(ReportLevel.WARNING) == "<@&111> <@&222>"
        assert policy.role_ping(ReportLevel.ERROR) == "<@&111> <@&222>"
        assert policy.role_ping(ReportLevel.INFO) == ""

    def test_pings_on_info_when_uneventful_enabled(self):
        policy = NotificationPolicy(notify_uneventful=True, ping_role_ids=["111"], role_ping_enabled=True)
        assert policy.role_ping(ReportLevel.INFO) == "<@&111>"

    def test_from_config(self):
        config = NotifierConfig(
            ping_role_ids_on_error=["9"],
            notify_uneventful=True,
            role_ping_enabled=True,
        )
        policy = NotificationPolicy.from_config(config)
        assert policy.notify_uneventful
        assert policy.ping_role_ids == ["9"]
        assert policy.role_ping_enabled
