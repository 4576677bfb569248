"""
Shared dependencies for API routes.
"""

from typing import Optional

from rescue_rewards.store import DealStore

_store: Optional[DealStore] = None


def get_deal_store() -> DealStore:
    """Process-wide deal store. Tests override this dependency."""
    global _store
    if _store is None:
        _store = DealStore()
    return _store


def reset_deal_store() -> None:
    """Drop the process-wide store so the next request starts empty."""
    global _store
    _store = None
