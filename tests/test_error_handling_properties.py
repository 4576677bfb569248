"""
Property-based tests for error handling.

These tests verify that the fail-safe wrapper passes results through
untouched and substitutes the fallback for any failure.
"""

import pytest
from datetime import datetime
from hypothesis import given, settings, strategies as st

from rescue_rewards.error_handling import ErrorHandler, InvalidTransitionError
from rescue_rewards.models import (
    DealCategory,
    DealStatus,
    Priority,
    RescueDeal,
)


results = st.one_of(st.integers(), st.text(), st.lists(st.integers()), st.none())
messages = st.text(min_size=1, max_size=50)


@given(value=results)
@settings(max_examples=100)
def test_successful_operation_result_is_returned(value):
    handler = ErrorHandler()

    def operation(x):
        return x

    assert handler.run_with_fallback(operation, lambda: "fallback", value) == value
    assert handler.failure_count == 0
    assert handler.last_error is None


@given(message=messages)
@settings(max_examples=100)
def test_failure_returns_fallback_and_is_recorded(message):
    handler = ErrorHandler()

    def operation():
        raise RuntimeError(message)

    assert handler.run_with_fallback(operation, lambda: {"zero": 0}) == {"zero": 0}
    assert handler.failure_count == 1
    assert isinstance(handler.last_error, RuntimeError)
    assert str(handler.last_error) == message


def test_failure_is_logged_with_operation_name(caplog):
    handler = ErrorHandler()

    def summarize(deals, factor=1):
        return deals[0] * factor

    with caplog.at_level("DEBUG"):
        result = handler.run_with_fallback(summarize, lambda: 0, [], factor=2)

    assert result == 0
    assert "Operation failed: summarize" in caplog.text
    assert "IndexError" in caplog.text
    assert "<list of 0>" in caplog.text


def make_deal(status: DealStatus) -> RescueDeal:
    now = datetime(2024, 6, 15, 12, 0)
    return RescueDeal(
        id="deal-1",
        category=DealCategory.PRODUCE,
        description="Bananas",
        discount_percent=40,
        quantity="10",
        status=status,
        created_at=now,
        expires_at=now,
        priority=Priority.MEDIUM,
        estimated_co2_saved=25.0,
        estimated_waste_prevented_kg=12.0,
    )


@pytest.mark.parametrize("status", [DealStatus.SOLD, DealStatus.DONATED, DealStatus.EXPIRED])
def test_terminal_deal_rejects_every_transition(status):
    deal = make_deal(status)
    at = datetime(2024, 6, 15, 13, 0)

    with pytest.raises(InvalidTransitionError) as excinfo:
        deal.mark_sold(at, "Alice", 3)
    with pytest.raises(InvalidTransitionError):
        deal.mark_donated(at)
    with pytest.raises(InvalidTransitionError):
        deal.mark_expired(at)

    assert excinfo.value.deal_id == "deal-1"
    assert excinfo.value.current_status == status.value
    assert deal.status == status


def test_invalid_transition_is_a_value_error():
    with pytest.raises(ValueError):
        make_deal(DealStatus.SOLD).mark_donated(datetime(2024, 6, 15))
