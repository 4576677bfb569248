"""
Bounded activity feed for rescue deal lifecycle events.

Entries are kept newest-first; appending beyond the limit discards the
oldest entries.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from rescue_rewards.models import Activity, ActivityImpact, ActivityType

logger = logging.getLogger(__name__)

DEFAULT_FEED_LIMIT = 10


class ActivityLog:
    """Append-only, size-bounded sequence of Activity entries.
    
    Attributes:
        limit: Maximum number of entries retained
    """
    
    def __init__(
        self,
        limit: int = DEFAULT_FEED_LIMIT,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """Initialize an empty activity log.
        
        Args:
            limit: Maximum number of entries retained (default: 10)
            clock: Callable returning the current time, defaults to datetime.now
        """
        if limit < 1:
            raise ValueError(f"Activity feed limit must be positive, got {limit}")
        self.limit = limit
        self._clock = clock or datetime.now
        self._entries: List[Activity] = []
    
    def append(
        self,
        type: ActivityType,
        actor: str,
        action: str,
        details: str,
        impact: ActivityImpact,
        category: str
    ) -> Activity:
        """Record a new entry at the head of the feed.
        
        Assigns the entry id and timestamp, prepends it, then truncates the
        feed to `limit` entries.
        
        Returns:
            The appended Activity
        """
        activity = Activity(
            id=uuid.uuid4().hex,
            type=type,
            actor=actor,
            action=action,
            details=details,
            impact=impact,
            timestamp=self._clock(),
            category=category,
        )
        self._entries = [activity] + self._entries[:self.limit - 1]
        logger.debug(f"Activity {activity.type.value} appended for {actor}: {details}")
        return activity
    
    def entries(self) -> List[Activity]:
        """Current feed, newest-first."""
        return list(self._entries)
    
    def __len__(self) -> int:
        return len(self._entries)
