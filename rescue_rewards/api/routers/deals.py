"""
Deal routes for creating and fulfilling rescue deals.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from rescue_rewards.api.dependencies import get_deal_store
from rescue_rewards.api.schemas import DealCreate, DealStatusUpdate
from rescue_rewards.store import DealStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/deals", status_code=201)
async def create_deal(payload: DealCreate, store: DealStore = Depends(get_deal_store)) -> dict:
    """
    Create a pending rescue deal.
    
    Impact estimates and priority are derived from category, discount and
    quantity at creation time.
    """
    deal = store.create_deal(
        category=payload.category,
        description=payload.description,
        discount_percent=payload.discount_percent,
        quantity=payload.quantity,
    )
    return deal.to_dict()


@router.get("/deals")
async def list_deals(store: DealStore = Depends(get_deal_store)) -> List[dict]:
    """List all rescue deals, newest first."""
    return [deal.to_dict() for deal in store.list_deals()]


@router.post("/deals/expire")
async def expire_deals(store: DealStore = Depends(get_deal_store)) -> dict:
    """Expire every pending deal whose validity window has ended."""
    expired = store.expire_overdue()
    return {
        "expired_count": len(expired),
        "deals": [deal.to_dict() for deal in expired]
    }


@router.get("/deals/{deal_id}")
async def get_deal(deal_id: str, store: DealStore = Depends(get_deal_store)) -> dict:
    """Get a single rescue deal by id."""
    deal = store.get_deal(deal_id)
    if deal is None:
        raise HTTPException(status_code=404, detail="Deal not found")
    return deal.to_dict()


@router.post("/deals/{deal_id}/status")
async def update_deal_status(
    deal_id: str,
    payload: DealStatusUpdate,
    store: DealStore = Depends(get_deal_store)
) -> dict:
    """
    Record a sale or donation.
    
    A deal that is no longer pending is returned unchanged with
    `updated` set to false.
    """
    if store.get_deal(deal_id) is None:
        raise HTTPException(status_code=404, detail="Deal not found")
    
    updated = store.transition_status(
        deal_id,
        payload.status,
        customer_name=payload.customer_name,
        price=payload.price,
    )
    deal = updated or store.get_deal(deal_id)
    return {
        "updated": updated is not None,
        "deal": deal.to_dict()
    }
