"""
Error handling module for rescue rewards.

Provides the fail-safe aggregation wrapper and domain exceptions.
"""

from .error_handler import ErrorHandler
from .exceptions import InvalidTransitionError, RescueRewardsError

__all__ = ['ErrorHandler', 'InvalidTransitionError', 'RescueRewardsError']
