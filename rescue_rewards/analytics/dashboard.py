"""
Dashboard aggregation over the full rescue deal collection.

Every function here is a pure recomputation over the deals it is given; the
public entry points never raise and fall back to all-zero results instead.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from rescue_rewards.config import MetricsConfig, StoreSettings, get_store_settings
from rescue_rewards.error_handling import ErrorHandler
from rescue_rewards.impact import round_half_up
from rescue_rewards.models import (
    DashboardData,
    DealCounts,
    DealStatus,
    RescueDeal,
    RevenueSummary,
    TodayStats,
    WasteReduction,
)

logger = logging.getLogger(__name__)


def _sold_with_price(deals: Sequence[RescueDeal]) -> List[RescueDeal]:
    return [d for d in deals if d.status == DealStatus.SOLD and d.price is not None]


def revenue_total(deals: Sequence[RescueDeal]) -> float:
    """Sum of recorded sale prices."""
    return round_half_up(sum(d.price for d in _sold_with_price(deals)), places=2)


def customer_savings_total(deals: Sequence[RescueDeal], metrics: MetricsConfig) -> float:
    """Sum of (original price - sale price) over sold deals with a price.

    The original price is reconstructed as price / (1 - discount/100). A
    discount of 0 or None is replaced by the configured fallback discount.
    """
    savings = 0.0
    for deal in _sold_with_price(deals):
        discount = deal.discount_percent or metrics.savings_fallback_discount
        if discount >= 100:
            # A full discount leaves no original price to reconstruct
            logger.warning(
                f"Skipping savings for deal {deal.id}: discount {discount}% has no original price"
            )
            continue
        original_price = deal.price / (1 - discount / 100)
        savings += original_price - deal.price
    return round_half_up(savings, places=2)


def average_discount(deals: Sequence[RescueDeal]) -> int:
    """Mean discount over all deals, rounded to an integer, 0 when empty."""
    if not deals:
        return 0
    mean = sum(d.discount_percent or 0 for d in deals) / len(deals)
    return int(round_half_up(mean, places=0))


def waste_reduction_percentage(total_waste_kg: float, metrics: MetricsConfig) -> int:
    """min(baseline + kg/100 * 5, cap), rounded."""
    raw = min(
        metrics.waste_reduction_baseline + (total_waste_kg / 100) * 5,
        metrics.waste_reduction_cap
    )
    return int(round_half_up(raw, places=0))


def summarize_waste(deals: Sequence[RescueDeal], metrics: MetricsConfig) -> WasteReduction:
    total_kg = sum(d.estimated_waste_prevented_kg for d in deals)
    co2_saved = sum(d.estimated_co2_saved for d in deals)
    return WasteReduction(
        percentage=waste_reduction_percentage(total_kg, metrics),
        total_kg=round_half_up(total_kg),
        co2_saved=round_half_up(co2_saved),
    )


def count_by_status(deals: Sequence[RescueDeal]) -> DealCounts:
    counts = DealCounts(total=len(deals))
    for deal in deals:
        if deal.status == DealStatus.SOLD:
            counts.sold += 1
        elif deal.status == DealStatus.DONATED:
            counts.donated += 1
        elif deal.status == DealStatus.PENDING:
            counts.pending += 1
        elif deal.status == DealStatus.EXPIRED:
            counts.expired += 1
    return counts


def eco_points_earned(deals: Sequence[RescueDeal]) -> int:
    """Eco points of sold deals plus donation points of donated deals."""
    return sum(
        d.eco_points if d.status == DealStatus.SOLD else d.donation_eco_points
        for d in deals
        if d.status in (DealStatus.SOLD, DealStatus.DONATED)
    )


def build_dashboard(deals: Sequence[RescueDeal], metrics: MetricsConfig) -> DashboardData:
    return DashboardData(
        rescue_deals=count_by_status(deals),
        waste_reduction=summarize_waste(deals, metrics),
        revenue=RevenueSummary(
            total=revenue_total(deals),
            customer_savings=customer_savings_total(deals, metrics),
            avg_discount=average_discount(deals),
        ),
        eco_points_earned=eco_points_earned(deals),
    )


def start_of_day(now: datetime) -> datetime:
    """Local midnight of the day containing `now`."""
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def build_today_stats(deals: Sequence[RescueDeal], now: datetime, metrics: MetricsConfig) -> TodayStats:
    midnight = start_of_day(now)
    todays = [d for d in deals if d.created_at >= midnight]
    summary = build_dashboard(todays, metrics)
    return TodayStats(
        deals_created=summary.rescue_deals.total,
        rescues_completed=summary.rescue_deals.sold + summary.rescue_deals.donated,
        co2_saved=summary.waste_reduction.co2_saved,
        waste_prevented_kg=summary.waste_reduction.total_kg,
        customer_savings=summary.revenue.customer_savings,
        money_saved=summary.revenue.total,
    )


def compute_dashboard(
    deals: Sequence[RescueDeal],
    settings: Optional[StoreSettings] = None,
    error_handler: Optional[ErrorHandler] = None
) -> DashboardData:
    """Whole-history dashboard, or DashboardData.empty() if aggregation fails."""
    settings = settings or get_store_settings()
    handler = error_handler or ErrorHandler()
    return handler.run_with_fallback(build_dashboard, DashboardData.empty, deals, settings.metrics)


def compute_today_stats(
    deals: Sequence[RescueDeal],
    now: datetime,
    settings: Optional[StoreSettings] = None,
    error_handler: Optional[ErrorHandler] = None
) -> TodayStats:
    """Stats for deals created since local midnight, or TodayStats.empty() on failure."""
    settings = settings or get_store_settings()
    handler = error_handler or ErrorHandler()
    return handler.run_with_fallback(build_today_stats, TodayStats.empty, deals, now, settings.metrics)
