"""
Rescue Rewards: perishable-inventory rescue deals, their activity feed and
the dashboard and analytics derived from them.
"""

from rescue_rewards.models import (
    Activity,
    ActivityType,
    AnalyticsData,
    DashboardData,
    DealCategory,
    DealStatus,
    Priority,
    RescueDeal,
    Timeframe,
    TodayStats,
)
from rescue_rewards.store import DealStore

__version__ = "0.1.0"

__all__ = [
    'Activity',
    'ActivityType',
    'AnalyticsData',
    'DashboardData',
    'DealCategory',
    'DealStatus',
    'DealStore',
    'Priority',
    'RescueDeal',
    'Timeframe',
    'TodayStats',
]
