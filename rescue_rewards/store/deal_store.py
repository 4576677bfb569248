"""
Deal store: sole owner and mutator of the rescue deal collection.

Every successful create or status transition commits the change, appends
exactly one activity entry and eagerly recomputes the dashboard snapshot
before any reader can observe the collection again.
"""

import copy
import logging
import threading
import uuid
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Union

from rescue_rewards.activity import ActivityLog
from rescue_rewards.analytics import compute_analytics, compute_dashboard, compute_today_stats
from rescue_rewards.config import StoreSettings, get_store_settings
from rescue_rewards.error_handling import ErrorHandler, InvalidTransitionError
from rescue_rewards.impact import (
    calculate_donation_eco_points,
    calculate_eco_points,
    derive_priority,
    estimate_co2_saved,
    estimate_waste_prevented,
    parse_quantity,
)
from rescue_rewards.models import (
    Activity,
    ActivityType,
    AnalyticsData,
    CategoryImpact,
    DashboardData,
    DealCategory,
    DealStatus,
    ItemCountImpact,
    MoneyImpact,
    RescueDeal,
    Timeframe,
    TodayStats,
)

logger = logging.getLogger(__name__)

STORE_ACTOR = "Store Team"
SYSTEM_ACTOR = "System"
DEFAULT_CUSTOMER = "Customer"

DashboardListener = Callable[[DashboardData], None]


class DealStore:
    """In-memory rescue deal collection with derived views.

    Deals are kept newest-first and never deleted; terminal deals stay in
    the collection for analytics history. Mutations and snapshot reads are
    serialised through a re-entrant lock so concurrent request handlers
    cannot interleave.

    Attributes:
        settings: Store settings
        activity_log: Bounded feed of lifecycle events
    """

    def __init__(
        self,
        settings: Optional[StoreSettings] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """Initialize an empty store.

        Args:
            settings: Store settings, defaults to get_store_settings()
            clock: Callable returning the current time, defaults to datetime.now
        """
        self.settings = settings or get_store_settings()
        self._clock = clock or datetime.now
        self._lock = threading.RLock()
        self._deals: List[RescueDeal] = []
        self._listeners: List[DashboardListener] = []
        self._error_handler = ErrorHandler()
        self.activity_log = ActivityLog(
            limit=self.settings.activity.feed_limit,
            clock=self._clock
        )
        self._dashboard = compute_dashboard(self._deals, self.settings, self._error_handler)

    def now(self) -> datetime:
        return self._clock()

    # Commands

    def create_deal(
        self,
        category: Union[DealCategory, str],
        description: str,
        discount_percent: Optional[int],
        quantity: str
    ) -> RescueDeal:
        """Create a pending rescue deal at the head of the collection.

        Derived fields are computed here, once, from category, discount and
        quantity. Malformed quantity text degrades to a quantity of 1.

        Args:
            category: Deal category or its string value
            description: Free-form description
            discount_percent: Discount percentage, None when not given
            quantity: Free-form quantity text

        Returns:
            Copy of the created deal

        Raises:
            ValueError: If category is not a known DealCategory
        """
        category = DealCategory(category)

        with self._lock:
            now = self._clock()
            deal = RescueDeal(
                id=str(uuid.uuid4()),
                category=category,
                description=description,
                discount_percent=discount_percent,
                quantity=quantity,
                status=DealStatus.PENDING,
                created_at=now,
                expires_at=now + timedelta(hours=self.settings.deals.ttl_hours),
                priority=derive_priority(category, discount_percent),
                estimated_co2_saved=estimate_co2_saved(category, quantity),
                estimated_waste_prevented_kg=estimate_waste_prevented(category, quantity),
                eco_points=calculate_eco_points(category, discount_percent),
                donation_eco_points=calculate_donation_eco_points(category, discount_percent),
            )
            self._deals.insert(0, deal)
            self.activity_log.append(
                type=ActivityType.DEAL_CREATED,
                actor=STORE_ACTOR,
                action="created a rescue deal",
                details=description,
                impact=CategoryImpact(
                    co2_saved=deal.estimated_co2_saved,
                    deal_category=category.value
                ),
                category=category.value,
            )
            logger.info(
                f"Created {category.value} deal {deal.id} "
                f"({discount_percent}% off, {deal.priority.value} priority)"
            )
            dashboard = self._commit()
            created = copy.copy(deal)

        self._notify(dashboard)
        return created

    def transition_status(
        self,
        deal_id: str,
        status: Union[DealStatus, str],
        customer_name: Optional[str] = None,
        price: Optional[float] = None
    ) -> Optional[RescueDeal]:
        """Move a pending deal to sold or donated.

        Unknown ids, deals that are no longer pending and unsupported target
        statuses are ignored with a logged warning; nothing is raised and no
        activity is recorded.

        Args:
            deal_id: Id of the deal to transition
            status: DealStatus.SOLD or DealStatus.DONATED (or their values)
            customer_name: Buyer name, recorded on sale
            price: Sale price, recorded on sale

        Returns:
            Copy of the updated deal, or None if the transition was ignored
        """
        try:
            target = DealStatus(status)
        except ValueError:
            logger.warning(f"Ignoring transition of deal {deal_id}: unknown status {status!r}")
            return None

        if target not in (DealStatus.SOLD, DealStatus.DONATED):
            logger.warning(
                f"Ignoring transition of deal {deal_id} to {target.value}: "
                f"only sold and donated can be requested"
            )
            return None

        with self._lock:
            deal = self._find(deal_id)
            if deal is None:
                logger.warning(f"Ignoring transition to {target.value}: deal {deal_id} not found")
                return None

            now = self._clock()
            try:
                if target == DealStatus.SOLD:
                    deal.mark_sold(now, customer_name=customer_name, price=price)
                else:
                    deal.mark_donated(now)
            except InvalidTransitionError as e:
                logger.warning(f"Ignoring transition: {e}")
                return None

            self._record_transition(deal)
            dashboard = self._commit()
            updated = copy.copy(deal)

        self._notify(dashboard)
        return updated

    def expire_overdue(self) -> List[RescueDeal]:
        """Expire every pending deal whose validity window has ended.

        Nothing runs this automatically; it is meant to be driven by a
        scheduler or an operator action.

        Returns:
            Copies of the deals that were expired, newest-first
        """
        with self._lock:
            now = self._clock()
            expired = []
            for deal in self._deals:
                if deal.is_pending and deal.expires_at <= now:
                    deal.mark_expired(now)
                    self._record_transition(deal)
                    expired.append(copy.copy(deal))

            if not expired:
                return []

            logger.info(f"Expired {len(expired)} overdue rescue deal(s)")
            dashboard = self._commit()

        self._notify(dashboard)
        return expired

    # Queries

    def get_deal(self, deal_id: str) -> Optional[RescueDeal]:
        with self._lock:
            deal = self._find(deal_id)
            return copy.copy(deal) if deal else None

    def list_deals(self) -> List[RescueDeal]:
        """All deals, newest-first."""
        with self._lock:
            return [copy.copy(d) for d in self._deals]

    def get_dashboard_snapshot(self) -> DashboardData:
        """Dashboard as of the latest committed mutation."""
        with self._lock:
            return copy.deepcopy(self._dashboard)

    def get_today_stats(self) -> TodayStats:
        with self._lock:
            return compute_today_stats(
                self._deals, self._clock(), self.settings, self._error_handler
            )

    def get_activity_feed(self) -> List[Activity]:
        """Most recent activity entries, newest-first."""
        with self._lock:
            return self.activity_log.entries()

    def get_analytics(self, timeframe: Union[Timeframe, str]) -> AnalyticsData:
        with self._lock:
            return compute_analytics(
                self._deals, timeframe, self._clock(), self.settings, self._error_handler
            )

    # Subscribers

    def subscribe(self, listener: DashboardListener) -> Callable[[], None]:
        """Register a listener called with the dashboard after every mutation.

        Returns:
            Callable that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # Internals

    def _find(self, deal_id: str) -> Optional[RescueDeal]:
        for deal in self._deals:
            if deal.id == str(deal_id):
                return deal
        return None

    def _record_transition(self, deal: RescueDeal) -> None:
        if deal.status == DealStatus.SOLD:
            self.activity_log.append(
                type=ActivityType.DEAL_SOLD,
                actor=deal.customer_name or DEFAULT_CUSTOMER,
                action="purchased a rescue deal",
                details=deal.description,
                impact=MoneyImpact(
                    co2_saved=deal.estimated_co2_saved,
                    money_saved=deal.price if deal.price is not None else 0
                ),
                category=deal.category.value,
            )
            logger.info(f"Deal {deal.id} sold to {deal.customer_name or DEFAULT_CUSTOMER}")
        elif deal.status == DealStatus.DONATED:
            self.activity_log.append(
                type=ActivityType.DEAL_DONATED,
                actor=STORE_ACTOR,
                action="donated a rescue deal",
                details=deal.description,
                impact=ItemCountImpact(
                    co2_saved=deal.estimated_co2_saved,
                    item_count=parse_quantity(deal.quantity)
                ),
                category=deal.category.value,
            )
            logger.info(f"Deal {deal.id} donated")
        elif deal.status == DealStatus.EXPIRED:
            self.activity_log.append(
                type=ActivityType.DEAL_EXPIRED,
                actor=SYSTEM_ACTOR,
                action="expired a rescue deal",
                details=deal.description,
                impact=CategoryImpact(co2_saved=0.0, deal_category=deal.category.value),
                category=deal.category.value,
            )
            logger.info(f"Deal {deal.id} expired")

    def _commit(self) -> DashboardData:
        """Recompute derived views after a mutation. Caller holds the lock."""
        self._dashboard = compute_dashboard(self._deals, self.settings, self._error_handler)
        return copy.deepcopy(self._dashboard)

    def _notify(self, dashboard: DashboardData) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(dashboard)
            except Exception as e:
                logger.error(f"Dashboard listener {listener!r} failed: {e}")
