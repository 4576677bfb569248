"""Activity feed for rescue deal lifecycle events."""

from .activity_log import ActivityLog, DEFAULT_FEED_LIMIT

__all__ = ['ActivityLog', 'DEFAULT_FEED_LIMIT']
