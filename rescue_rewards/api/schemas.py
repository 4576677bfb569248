"""Request models for the Rescue Rewards API"""

from pydantic import BaseModel, Field
from typing import Literal, Optional

from rescue_rewards.models import DealCategory


class DealCreate(BaseModel):
    """Model for creating a new rescue deal"""
    category: DealCategory
    description: str
    discount_percent: Optional[int] = Field(None, description="Discount applied to the shelf price")
    quantity: str = Field("1", description="Free-form quantity, e.g. '5kg' or '10 items'")


class DealStatusUpdate(BaseModel):
    """Sale or donation of a pending rescue deal"""
    status: Literal["sold", "donated"]
    customer_name: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
