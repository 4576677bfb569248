"""Derived views over the rescue deal collection."""

from .dashboard import compute_dashboard, compute_today_stats, start_of_day
from .rolling_window import compute_analytics, shift_months, window_bounds

__all__ = [
    'compute_dashboard',
    'compute_today_stats',
    'start_of_day',
    'compute_analytics',
    'shift_months',
    'window_bounds',
]
