"""
Rolling-window analytics over the rescue deal collection.

Windows are computed relative to the call time, not aligned to calendar
boundaries: a "month" ending on May 15th starts on April 15th.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple, Union

from rescue_rewards.analytics.dashboard import (
    average_discount,
    count_by_status,
    customer_savings_total,
    revenue_total,
    summarize_waste,
)
from rescue_rewards.config import MetricsConfig, StoreSettings, get_store_settings
from rescue_rewards.error_handling import ErrorHandler
from rescue_rewards.impact import round_half_up
from rescue_rewards.models import (
    AnalyticsData,
    AnalyticsDealCounts,
    AnalyticsRevenue,
    CategoryShare,
    RescueDeal,
    Timeframe,
    WasteReduction,
)

logger = logging.getLogger(__name__)

_MONTHS_BACK = {
    Timeframe.MONTH: 1,
    Timeframe.QUARTER: 3,
    Timeframe.YEAR: 12,
}


def shift_months(moment: datetime, months: int) -> datetime:
    """Move `moment` by a number of months, keeping day and time of day.

    A day that does not exist in the target month overflows into the
    following month (March 31st minus one month is March 3rd, or March 2nd
    in a leap year).
    """
    index = moment.year * 12 + (moment.month - 1) + months
    year, month_index = divmod(index, 12)
    first_of_month = moment.replace(year=year, month=month_index + 1, day=1)
    return first_of_month + timedelta(days=moment.day - 1)


def window_bounds(timeframe: Union[Timeframe, str], now: datetime) -> Tuple[datetime, datetime]:
    """Inclusive [start, end] of the window ending at `now`."""
    timeframe = Timeframe(timeframe)
    if timeframe == Timeframe.WEEK:
        return now - timedelta(days=7), now
    return shift_months(now, -_MONTHS_BACK[timeframe]), now


def category_distribution(deals: Sequence[RescueDeal]) -> List[CategoryShare]:
    """Deal count and share per category, largest first."""
    created = len(deals)
    if created == 0:
        return []

    counts: Dict[str, int] = {}
    for deal in deals:
        name = deal.category.value
        counts[name] = counts.get(name, 0) + 1

    shares = [
        CategoryShare(
            name=name,
            deals=count,
            percentage=int(round_half_up(count / created * 100, places=0)),
        )
        for name, count in counts.items()
    ]
    shares.sort(key=lambda share: share.deals, reverse=True)
    return shares


def build_analytics(
    deals: Sequence[RescueDeal],
    timeframe: Union[Timeframe, str],
    now: datetime,
    metrics: MetricsConfig
) -> AnalyticsData:
    timeframe = Timeframe(timeframe)
    start, end = window_bounds(timeframe, now)
    in_window = [d for d in deals if start <= d.created_at <= end]
    counts = count_by_status(in_window)

    logger.debug(
        f"Analytics for {timeframe.value}: {len(in_window)} of {len(deals)} deals "
        f"between {start.isoformat()} and {end.isoformat()}"
    )

    return AnalyticsData(
        period=timeframe.label,
        timeframe=timeframe,
        window_start=start,
        window_end=end,
        rescue_deals=AnalyticsDealCounts(
            created=counts.total,
            sold=counts.sold,
            donated=counts.donated,
        ),
        waste_reduction=summarize_waste(in_window, metrics) if in_window else WasteReduction(),
        revenue=AnalyticsRevenue(
            rescue_deals=revenue_total(in_window),
            total_savings=customer_savings_total(in_window, metrics),
            avg_discount=average_discount(in_window),
        ),
        top_categories=category_distribution(in_window),
    )


def compute_analytics(
    deals: Sequence[RescueDeal],
    timeframe: Union[Timeframe, str],
    now: datetime,
    settings: Optional[StoreSettings] = None,
    error_handler: Optional[ErrorHandler] = None
) -> AnalyticsData:
    """Analytics for the window ending at `now`.

    Returns an all-zero AnalyticsData on any failure. The default result is
    labelled with the requested timeframe when it is valid and with
    "This Month" otherwise.
    """
    settings = settings or get_store_settings()
    handler = error_handler or ErrorHandler()
    try:
        labelled = Timeframe(timeframe)
    except ValueError:
        labelled = Timeframe.MONTH
    return handler.run_with_fallback(
        build_analytics,
        lambda: AnalyticsData.empty(labelled),
        deals, timeframe, now, settings.metrics
    )
