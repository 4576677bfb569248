"""
Data models for Rescue Rewards.

This module defines the core data structures used throughout the application:
rescue deals and their lifecycle, activity feed entries, and the derived
dashboard and analytics views computed from the deal collection.
"""

from dataclasses import dataclass, asdict, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Union

from rescue_rewards.error_handling.exceptions import InvalidTransitionError


class DealCategory(str, Enum):
    """Perishable inventory category of a rescue deal"""
    PRODUCE = "Produce"
    BAKERY = "Bakery"
    DAIRY = "Dairy"
    MEAT = "Meat"


class DealStatus(str, Enum):
    """Lifecycle status of a rescue deal. PENDING is the only non-terminal state."""
    PENDING = "pending"
    SOLD = "sold"
    DONATED = "donated"
    EXPIRED = "expired"


class Priority(str, Enum):
    """Handling priority of a rescue deal"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ActivityType(str, Enum):
    """Kind of lifecycle event recorded in the activity feed"""
    DEAL_CREATED = "deal_created"
    DEAL_SOLD = "deal_sold"
    DEAL_DONATED = "deal_donated"
    DEAL_EXPIRED = "deal_expired"


class Timeframe(str, Enum):
    """Rolling analytics window"""
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @property
    def label(self) -> str:
        return {
            Timeframe.WEEK: "This Week",
            Timeframe.MONTH: "This Month",
            Timeframe.QUARTER: "This Quarter",
            Timeframe.YEAR: "This Year",
        }[self]


def _to_json_ready(value: Any) -> Any:
    """Recursively convert enums and datetimes inside asdict() output."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _to_json_ready(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_json_ready(v) for v in value]
    return value


@dataclass
class RescueDeal:
    """A discounted, perishable-inventory offer with a bounded validity window.

    Attributes:
        id: Unique deal identifier, generated at creation
        category: Inventory category
        description: Free-form description entered by staff
        discount_percent: Discount applied to the shelf price
        quantity: Free-form quantity text, e.g. "5kg" or "10 items"
        status: Lifecycle status
        created_at: Creation timestamp
        expires_at: End of the validity window
        priority: Handling priority derived at creation
        estimated_co2_saved: CO2 saved in kg, derived at creation
        estimated_waste_prevented_kg: Waste prevented in kg, derived at creation
        eco_points: Points awarded to a buyer, derived at creation
        donation_eco_points: Points awarded for a donation, derived at creation
        sold_at: Set once on transition to sold
        donated_at: Set once on transition to donated
        expired_at: Set once on transition to expired
        customer_name: Buyer name recorded on sale
        price: Sale price recorded on sale
    """
    id: str
    category: DealCategory
    description: str
    discount_percent: Optional[int]
    quantity: str
    status: DealStatus
    created_at: datetime
    expires_at: datetime
    priority: Priority
    estimated_co2_saved: float
    estimated_waste_prevented_kg: float
    eco_points: int = 0
    donation_eco_points: int = 0
    sold_at: Optional[datetime] = None
    donated_at: Optional[datetime] = None
    expired_at: Optional[datetime] = None
    customer_name: Optional[str] = None
    price: Optional[float] = None

    @property
    def is_pending(self) -> bool:
        return self.status == DealStatus.PENDING

    def _ensure_pending(self, requested: DealStatus) -> None:
        if not self.is_pending:
            raise InvalidTransitionError(self.id, self.status.value, requested.value)

    def mark_sold(
        self,
        at: datetime,
        customer_name: Optional[str] = None,
        price: Optional[float] = None
    ) -> None:
        """Record a sale.

        Raises:
            InvalidTransitionError: If the deal is not pending
        """
        self._ensure_pending(DealStatus.SOLD)
        self.status = DealStatus.SOLD
        self.sold_at = at
        self.customer_name = customer_name
        self.price = price

    def mark_donated(self, at: datetime) -> None:
        """Record a donation.

        Raises:
            InvalidTransitionError: If the deal is not pending
        """
        self._ensure_pending(DealStatus.DONATED)
        self.status = DealStatus.DONATED
        self.donated_at = at

    def mark_expired(self, at: datetime) -> None:
        """Record expiry of the validity window.

        Raises:
            InvalidTransitionError: If the deal is not pending
        """
        self._ensure_pending(DealStatus.EXPIRED)
        self.status = DealStatus.EXPIRED
        self.expired_at = at

    def to_dict(self) -> dict:
        """Convert deal to dictionary for JSON serialization.

        Returns:
            Dictionary representation with enums as values and datetimes in ISO format
        """
        return _to_json_ready(asdict(self))


@dataclass
class MoneyImpact:
    """Impact of a sale"""
    co2_saved: float
    money_saved: float


@dataclass
class ItemCountImpact:
    """Impact of a donation"""
    co2_saved: float
    item_count: float


@dataclass
class CategoryImpact:
    """Impact attached to deal creation and expiry"""
    co2_saved: float
    deal_category: str


ActivityImpact = Union[MoneyImpact, ItemCountImpact, CategoryImpact]


@dataclass
class Activity:
    """A single entry in the activity feed.

    Attributes:
        id: Unique activity identifier
        type: Lifecycle event kind
        actor: Who performed the action, e.g. a customer name or "Store Team"
        action: Short human readable action
        details: Free text, usually the deal description
        impact: Environmental and monetary impact of the event
        timestamp: When the entry was appended
        category: Deal category the event refers to
        status: Feed status, always "new" when appended
    """
    id: str
    type: ActivityType
    actor: str
    action: str
    details: str
    impact: ActivityImpact
    timestamp: datetime
    category: str
    status: str = "new"

    def to_dict(self) -> dict:
        return _to_json_ready(asdict(self))


@dataclass
class DealCounts:
    total: int = 0
    sold: int = 0
    donated: int = 0
    pending: int = 0
    expired: int = 0


@dataclass
class WasteReduction:
    percentage: int = 0
    total_kg: float = 0.0
    co2_saved: float = 0.0


@dataclass
class RevenueSummary:
    total: float = 0.0
    customer_savings: float = 0.0
    avg_discount: int = 0


@dataclass
class DashboardData:
    """Whole-history summary of the deal collection"""
    rescue_deals: DealCounts = field(default_factory=DealCounts)
    waste_reduction: WasteReduction = field(default_factory=WasteReduction)
    revenue: RevenueSummary = field(default_factory=RevenueSummary)
    eco_points_earned: int = 0

    @classmethod
    def empty(cls) -> 'DashboardData':
        return cls()

    def to_dict(self) -> dict:
        return _to_json_ready(asdict(self))


@dataclass
class TodayStats:
    """Summary of deals created since local midnight"""
    deals_created: int = 0
    rescues_completed: int = 0
    co2_saved: float = 0.0
    waste_prevented_kg: float = 0.0
    customer_savings: float = 0.0
    money_saved: float = 0.0

    @classmethod
    def empty(cls) -> 'TodayStats':
        return cls()

    def to_dict(self) -> dict:
        return _to_json_ready(asdict(self))


@dataclass
class AnalyticsDealCounts:
    created: int = 0
    sold: int = 0
    donated: int = 0


@dataclass
class AnalyticsRevenue:
    rescue_deals: float = 0.0
    total_savings: float = 0.0
    avg_discount: int = 0


@dataclass
class CategoryShare:
    """Share of a category among the deals created in a window"""
    name: str
    deals: int
    percentage: int


@dataclass
class AnalyticsData:
    """Metrics restricted to a rolling time window"""
    period: str = Timeframe.MONTH.label
    timeframe: Timeframe = Timeframe.MONTH
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None
    rescue_deals: AnalyticsDealCounts = field(default_factory=AnalyticsDealCounts)
    waste_reduction: WasteReduction = field(default_factory=WasteReduction)
    revenue: AnalyticsRevenue = field(default_factory=AnalyticsRevenue)
    top_categories: List[CategoryShare] = field(default_factory=list)

    @classmethod
    def empty(cls, timeframe: Timeframe = Timeframe.MONTH) -> 'AnalyticsData':
        """All-zero result labelled with `timeframe`."""
        return cls(period=timeframe.label, timeframe=timeframe)

    def to_dict(self) -> dict:
        return _to_json_ready(asdict(self))
