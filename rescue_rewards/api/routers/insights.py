"""
Dashboard, activity feed and analytics routes.
"""

import logging
from fastapi import APIRouter, Depends, Query
from typing import List

from rescue_rewards.api.dependencies import get_deal_store
from rescue_rewards.models import Timeframe
from rescue_rewards.store import DealStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard")
async def get_dashboard(store: DealStore = Depends(get_deal_store)) -> dict:
    """Whole-history dashboard metrics."""
    return store.get_dashboard_snapshot().to_dict()


@router.get("/dashboard/today")
async def get_today_stats(store: DealStore = Depends(get_deal_store)) -> dict:
    """Metrics for deals created since local midnight."""
    return store.get_today_stats().to_dict()


@router.get("/activities")
async def get_activities(store: DealStore = Depends(get_deal_store)) -> List[dict]:
    """Most recent activity, newest first."""
    return [activity.to_dict() for activity in store.get_activity_feed()]


@router.get("/analytics")
async def get_analytics(
    timeframe: Timeframe = Query(Timeframe.MONTH, description="Window: week, month, quarter, year"),
    store: DealStore = Depends(get_deal_store)
) -> dict:
    """Metrics and category distribution over a rolling window."""
    return store.get_analytics(timeframe).to_dict()
