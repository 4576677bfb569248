"""
Property-based tests for rolling-window analytics.

These tests verify window boundaries, category distribution and the
fail-safe default result.
"""

import pytest
from datetime import datetime, timedelta
from hypothesis import given, settings, strategies as st

from rescue_rewards.analytics import compute_analytics, shift_months, window_bounds
from rescue_rewards.error_handling import ErrorHandler
from rescue_rewards.models import AnalyticsData, DealCategory, Timeframe
from rescue_rewards.store import DealStore


categories = st.sampled_from(list(DealCategory))

datetimes = st.datetimes(
    min_value=datetime(2020, 1, 1),
    max_value=datetime(2030, 12, 31)
)


def test_week_includes_boundary_and_excludes_older(clock):
    store = DealStore(clock=clock)
    boundary = store.create_deal("Produce", "Apples", 40, "5")

    clock.advance(days=7)
    week = store.get_analytics("week")
    assert week.rescue_deals.created == 1
    assert week.window_start == boundary.created_at

    store.create_deal("Bakery", "Bagels", 40, "5")
    clock.advance(seconds=1)
    week = store.get_analytics(Timeframe.WEEK)

    assert week.rescue_deals.created == 1
    assert [c.name for c in week.top_categories] == ["Bakery"]
    assert store.get_analytics("month").rescue_deals.created == 2


def test_month_on_empty_store_is_all_zero():
    store = DealStore()

    analytics = store.get_analytics("month")

    assert analytics.period == "This Month"
    assert analytics.rescue_deals.created == 0
    assert analytics.rescue_deals.sold == 0
    assert analytics.rescue_deals.donated == 0
    assert analytics.waste_reduction.percentage == 0
    assert analytics.waste_reduction.total_kg == 0
    assert analytics.waste_reduction.co2_saved == 0
    assert analytics.revenue.rescue_deals == 0
    assert analytics.revenue.total_savings == 0
    assert analytics.revenue.avg_discount == 0
    assert analytics.top_categories == []


def test_window_metrics_match_dashboard_formulas(clock):
    store = DealStore(clock=clock)
    old = store.create_deal("Meat", "Old steak", 50, "1")
    store.transition_status(old.id, "sold", "Zed", 100)

    clock.advance(days=40)
    bananas = store.create_deal("Produce", "Bananas", 40, "10")
    bagels = store.create_deal("Bakery", "Bagels", 20, "5")
    store.transition_status(bananas.id, "sold", "Alice", 12)
    store.transition_status(bagels.id, "donated")

    month = store.get_analytics("month")

    assert month.rescue_deals.created == 2
    assert month.rescue_deals.sold == 1
    assert month.rescue_deals.donated == 1
    assert month.revenue.rescue_deals == 12
    assert month.revenue.total_savings == 8
    assert month.revenue.avg_discount == 30
    assert month.waste_reduction.co2_saved == 34.0
    assert month.waste_reduction.total_kg == 16.0

    quarter = store.get_analytics("quarter")
    assert quarter.rescue_deals.created == 3
    assert quarter.revenue.rescue_deals == 112
    # 100 / 0.5 - 100 = 100, plus 8
    assert quarter.revenue.total_savings == 108


def test_category_distribution_is_sorted_by_count():
    store = DealStore()
    for _ in range(3):
        store.create_deal("Produce", "Apples", 40, "1")
    store.create_deal("Meat", "Beef", 40, "1")

    shares = store.get_analytics("year").top_categories

    assert [(s.name, s.deals, s.percentage) for s in shares] == [
        ("Produce", 3, 75),
        ("Meat", 1, 25),
    ]


@given(picked=st.lists(categories, min_size=1, max_size=30))
@settings(max_examples=100)
def test_category_distribution_properties(picked):
    """
    For any set of deals in the window, every present category appears once,
    deal counts add up to the created count, and the list is sorted
    descending by deal count.
    """
    now = datetime(2024, 6, 15, 12, 0)
    store = DealStore(clock=lambda: now)
    for category in picked:
        store.create_deal(category, "item", 30, "1")

    analytics = store.get_analytics("week")
    shares = analytics.top_categories

    assert {s.name for s in shares} == {c.value for c in picked}
    assert sum(s.deals for s in shares) == analytics.rescue_deals.created == len(picked)
    assert [s.deals for s in shares] == sorted((s.deals for s in shares), reverse=True)
    for share in shares:
        assert 0 < share.percentage <= 100


@pytest.mark.parametrize("moment,months,expected", [
    (datetime(2024, 5, 15, 10, 30), -1, datetime(2024, 4, 15, 10, 30)),
    (datetime(2024, 5, 15, 10, 30), -3, datetime(2024, 2, 15, 10, 30)),
    (datetime(2024, 1, 10), -1, datetime(2023, 12, 10)),
    (datetime(2024, 3, 31, 8), -1, datetime(2024, 3, 2, 8)),
    (datetime(2023, 3, 31, 8), -1, datetime(2023, 3, 3, 8)),
    (datetime(2024, 5, 31), -3, datetime(2024, 3, 2)),
    (datetime(2024, 2, 29), -12, datetime(2023, 3, 1)),
])
def test_shift_months_overflows_like_calendar_arithmetic(moment, months, expected):
    assert shift_months(moment, months) == expected


@given(now=datetimes, timeframe=st.sampled_from(list(Timeframe)))
@settings(max_examples=100)
def test_window_ends_now_and_starts_before(now, timeframe):
    start, end = window_bounds(timeframe, now)

    assert end == now
    assert start < end
    if timeframe == Timeframe.WEEK:
        assert end - start == timedelta(days=7)
    else:
        assert start.time() == now.time()


def test_unknown_timeframe_returns_default_result(caplog):
    store = DealStore()
    store.create_deal("Produce", "Apples", 40, "1")

    with caplog.at_level("ERROR"):
        analytics = store.get_analytics("decade")

    assert analytics == AnalyticsData.empty()
    assert "build_analytics" in caplog.text


def test_unexpected_data_returns_default_result():
    handler = ErrorHandler()

    analytics = compute_analytics([object()], "month", datetime(2024, 6, 15), error_handler=handler)

    assert analytics == AnalyticsData.empty()
    assert handler.failure_count == 1


def test_period_labels():
    store = DealStore()
    assert store.get_analytics("week").period == "This Week"
    assert store.get_analytics("quarter").period == "This Quarter"
    assert store.get_analytics("year").period == "This Year"


@given(timeframe=st.sampled_from(list(Timeframe)))
@settings(max_examples=100)
def test_failure_result_keeps_requested_timeframe_label(timeframe):
    """
    When aggregation fails for a valid timeframe, the all-zero result is
    labelled with that timeframe.
    """
    handler = ErrorHandler()

    analytics = compute_analytics([object()], timeframe, datetime(2024, 6, 15), error_handler=handler)

    assert analytics == AnalyticsData.empty(timeframe)
    assert analytics.period == timeframe.label
    assert analytics.timeframe == timeframe
    assert analytics.rescue_deals.created == 0
    assert analytics.top_categories == []
    assert handler.failure_count == 1
