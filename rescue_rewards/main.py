"""
Main entry point and CLI for Rescue Rewards.

Seeds an in-memory deal store from command-line arguments, applies sales and
donations, and prints the resulting dashboard, activity feed and analytics.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional, Tuple

from rescue_rewards.config import get_store_settings
from rescue_rewards.models import (
    Activity,
    AnalyticsData,
    DashboardData,
    DealCategory,
    RescueDeal,
    Timeframe,
    TodayStats,
)
from rescue_rewards.store import DealStore


logger = logging.getLogger(__name__)


def parse_deal_spec(spec: str) -> Tuple[str, int, str, str]:
    """
    Parse a CATEGORY:DISCOUNT:QUANTITY:DESCRIPTION deal argument.

    Args:
        spec: Deal argument, e.g. "Produce:40:10:Ripe bananas"

    Returns:
        Tuple of (category, discount_percent, quantity, description)

    Raises:
        argparse.ArgumentTypeError: If the argument is malformed
    """
    parts = spec.split(":", 3)
    if len(parts) != 4:
        raise argparse.ArgumentTypeError(
            f"Deal must be CATEGORY:DISCOUNT:QUANTITY:DESCRIPTION, got {spec!r}"
        )
    category, discount, quantity, description = parts
    try:
        DealCategory(category)
    except ValueError:
        valid = ", ".join(c.value for c in DealCategory)
        raise argparse.ArgumentTypeError(f"Unknown category {category!r} (expected one of {valid})")
    try:
        discount_percent = int(discount)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Discount must be an integer, got {discount!r}")
    return category, discount_percent, quantity, description


def parse_sale_spec(spec: str) -> Tuple[int, Optional[float], Optional[str]]:
    """Parse an INDEX[:PRICE[:CUSTOMER]] sale argument."""
    parts = spec.split(":", 2)
    try:
        index = int(parts[0])
        price = float(parts[1]) if len(parts) > 1 and parts[1] else None
    except ValueError:
        raise argparse.ArgumentTypeError(f"Sale must be INDEX[:PRICE[:CUSTOMER]], got {spec!r}")
    customer = parts[2] if len(parts) > 2 else None
    return index, price, customer


def format_deal(deal: RescueDeal) -> str:
    """Format a rescue deal for console output."""
    lines = [f"📦 {deal.description or '[No description]'}"]
    lines.append(f"   ID: {deal.id}")
    lines.append(
        f"   {deal.category.value} | {deal.discount_percent}% off | qty {deal.quantity} | "
        f"{deal.priority.value} priority"
    )
    lines.append(
        f"   Status: {deal.status.value} | CO₂ saved: {deal.estimated_co2_saved} kg | "
        f"Waste prevented: {deal.estimated_waste_prevented_kg} kg"
    )
    if deal.price is not None:
        lines.append(f"   Sold to {deal.customer_name or 'Customer'} for ${deal.price:.2f}")
    return "\n".join(lines)


def format_dashboard(dashboard: DashboardData, today: TodayStats) -> str:
    """Format dashboard and today's stats for console output."""
    counts = dashboard.rescue_deals
    waste = dashboard.waste_reduction
    revenue = dashboard.revenue
    return "\n".join([
        "📊 Dashboard",
        f"   Deals: {counts.total} total | {counts.pending} pending | {counts.sold} sold | "
        f"{counts.donated} donated | {counts.expired} expired",
        f"   Waste reduction: {waste.percentage}% | {waste.total_kg} kg | CO₂ {waste.co2_saved} kg",
        f"   Revenue: ${revenue.total:.2f} | Customer savings: ${revenue.customer_savings:.2f} | "
        f"Avg discount: {revenue.avg_discount}%",
        f"   Eco points earned: {dashboard.eco_points_earned}",
        f"   Today: {today.deals_created} created | {today.rescues_completed} rescued | "
        f"CO₂ {today.co2_saved} kg | Savings ${today.customer_savings:.2f}",
    ])


def format_activity(activity: Activity) -> str:
    return (
        f"   [{activity.timestamp.strftime('%H:%M:%S')}] {activity.actor} {activity.action}: "
        f"{activity.details}"
    )


def format_analytics(analytics: AnalyticsData) -> str:
    """Format rolling-window analytics for console output."""
    lines = [
        f"📈 Analytics ({analytics.period})",
        f"   Created: {analytics.rescue_deals.created} | Sold: {analytics.rescue_deals.sold} | "
        f"Donated: {analytics.rescue_deals.donated}",
        f"   Revenue: ${analytics.revenue.rescue_deals:.2f} | "
        f"Savings: ${analytics.revenue.total_savings:.2f} | "
        f"Avg discount: {analytics.revenue.avg_discount}%",
    ]
    for share in analytics.top_categories:
        lines.append(f"   {share.name}: {share.deals} deal(s), {share.percentage}%")
    return "\n".join(lines)


def run_demo(
    deal_specs: List[Tuple[str, int, str, str]],
    sales: List[Tuple[int, Optional[float], Optional[str]]],
    donations: List[int],
    timeframe: str = "month",
    as_json: bool = False
) -> int:
    """
    Populate a fresh store and print its derived views.

    Args:
        deal_specs: Parsed deal arguments, created in order
        sales: (1-based deal index, price, customer) tuples
        donations: 1-based deal indexes to donate
        timeframe: Analytics window
        as_json: Print a JSON document instead of formatted text

    Returns:
        Exit code (0 for success, 1 for error)
    """
    store = DealStore(settings=get_store_settings())
    created: List[RescueDeal] = []

    for category, discount_percent, quantity, description in deal_specs:
        created.append(store.create_deal(category, description, discount_percent, quantity))

    def deal_at(index: int) -> Optional[RescueDeal]:
        if 1 <= index <= len(created):
            return created[index - 1]
        logger.warning(f"No deal at position {index} (created {len(created)})")
        return None

    for index, price, customer in sales:
        deal = deal_at(index)
        if deal:
            store.transition_status(deal.id, "sold", customer_name=customer, price=price)

    for index in donations:
        deal = deal_at(index)
        if deal:
            store.transition_status(deal.id, "donated")

    dashboard = store.get_dashboard_snapshot()
    today = store.get_today_stats()
    feed = store.get_activity_feed()
    analytics = store.get_analytics(timeframe)

    if as_json:
        print(json.dumps({
            "deals": [d.to_dict() for d in store.list_deals()],
            "dashboard": dashboard.to_dict(),
            "today": today.to_dict(),
            "activities": [a.to_dict() for a in feed],
            "analytics": analytics.to_dict(),
        }, indent=2))
        return 0

    print("=" * 60)
    for deal in store.list_deals():
        print(format_deal(deal))
        print()
    print(format_dashboard(dashboard, today))
    print()
    print("📰 Activity")
    for activity in feed:
        print(format_activity(activity))
    print()
    print(format_analytics(analytics))
    print("=" * 60)
    return 0


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="rescue-rewards",
        description="Simulate rescue deals and print dashboard and analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create two deals and sell the first one
  python -m rescue_rewards.main --deal "Produce:40:10:Ripe bananas" \\
      --deal "Meat:20:2kg:Chicken thighs" --sell "1:12:Alice"

  # Donate a deal and show yearly analytics as JSON
  python -m rescue_rewards.main --deal "Bakery:50:6 loaves:Sourdough" \\
      --donate 1 --timeframe year --json
        """
    )

    parser.add_argument(
        "--deal",
        dest="deals",
        action="append",
        type=parse_deal_spec,
        default=[],
        help="Deal as CATEGORY:DISCOUNT:QUANTITY:DESCRIPTION (repeatable)"
    )

    parser.add_argument(
        "--sell",
        dest="sales",
        action="append",
        type=parse_sale_spec,
        default=[],
        help="Sell the Nth created deal, as INDEX[:PRICE[:CUSTOMER]] (repeatable)"
    )

    parser.add_argument(
        "--donate",
        dest="donations",
        action="append",
        type=int,
        default=[],
        help="Donate the Nth created deal (repeatable)"
    )

    parser.add_argument(
        "--timeframe",
        choices=[t.value for t in Timeframe],
        default=Timeframe.MONTH.value,
        help="Analytics window (default: month)"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging output"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else get_store_settings().log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        return run_demo(
            deal_specs=args.deals,
            sales=args.sales,
            donations=args.donations,
            timeframe=args.timeframe,
            as_json=args.json
        )
    except Exception as e:
        logger.exception(f"Unexpected error in main: {str(e)}")
        print(f"❌ Unexpected error: {str(e)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
