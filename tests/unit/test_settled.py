"""
Unit Tests for Settled Outcomes

Tests the settled-outcome helpers:
- project() never raises for absent or rejected outcomes
- render() turns unavailable values into the "??" sentinel
- settle() captures exceptions as Rejected
- JSON shape round trip
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from harvest_notifier.reports.settled import (
    UNAVAILABLE,
    UNAVAILABLE_PLACEHOLDER,
    Fulfilled,
    Rejected,
    is_unavailable,
    outcome_from_dict,
    outcome_to_dict,
    project,
    render,
    settle,
)


class TestProject:

    def test_fulfilled_is_mapped(self):
        assert project(Fulfilled(21), lambda v: v * 2) == 42

    def test_rejected_is_unavailable(self):
        assert project(Rejected(RuntimeError("rpc down")), lambda v: v * 2) is UNAVAILABLE

    def test_absent_is_unavailable(self):
        assert project(None, lambda v: v * 2) is UNAVAILABLE

    def test_mapping_not_called_without_value(self):
        calls = []
        project(Rejected("boom"), calls.append)
        project(None, calls.append)
        assert calls == []

    def test_fulfilled_zero_is_not_unavailable(self):
        result = project(Fulfilled(0), lambda v: v)
        assert result == 0
        assert not is_unavailable(result)

    def test_mapping_errors_propagate(self):
        with pytest.raises(KeyError):
            project(Fulfilled({}), lambda v: v["missing"])


class TestUnavailableMarker:

    def test_singleton(self):
        assert type(UNAVAILABLE)() is UNAVAILABLE

    def test_falsy_and_repr(self):
        assert not UNAVAILABLE
        assert repr(UNAVAILABLE) == "UNAVAILABLE"


class TestRender:

    def test_renders_value(self):
        assert render(Fulfilled(5), str) == "5"

    def test_renders_placeholder_for_rejected(self):
        assert render(Rejected("timeout"), str) == UNAVAILABLE_PLACEHOLDER == "??"

    def test_renders_placeholder_for_absent(self):
        assert render(None, str) == "??"

    def test_custom_placeholder(self):
        assert render(None, str, placeholder="n/a") == "n/a"


class TestSettle:

    def test_success(self):
        assert settle(lambda a, b: a + b, 1, b=2) == Fulfilled(3)

    def test_exception_becomes_rejected(self):
        def read_balance():
            raise ConnectionError("rpc unreachable")

        outcome = settle(read_balance)
        assert isinstance(outcome, Rejected)
        assert isinstance(outcome.reason, ConnectionError)

    def test_keyboard_interrupt_propagates(self):
        def interrupted():
            raise KeyboardInterrupt()

        with pytest.raises(KeyboardInterrupt):
            settle(interrupted)


class TestOutcomeJsonShape:

    def test_fulfilled(self):
        assert outcome_to_dict(Fulfilled(7)) == {"status": "fulfilled", "value": 7}

    def test_rejected_exception_reason(self):
        data = outcome_to_dict(Rejected(ValueError("bad block")))
        assert data == {"status": "rejected", "reason": "ValueError: bad block"}

    def test_absent(self):
        assert outcome_to_dict(None) is None
        assert outcome_from_dict(None) is None

    def test_from_dict(self):
        assert outcome_from_dict({"status": "fulfilled", "value": 1}) == Fulfilled(1)
        assert outcome_from_dict({"status": "rejected", "reason": "x"}) == Rejected("x")

    def test_value_codec_is_applied(self):
        data = outcome_to_dict(Fulfilled(10), lambda v: str(v))
        assert data["value"] == "10"
        assert outcome_from_dict(data, int) == Fulfilled(10)

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            outcome_from_dict({"status": "pending"})
