"""Rescue deal store."""

from .deal_store import DealStore

__all__ = ['DealStore']
