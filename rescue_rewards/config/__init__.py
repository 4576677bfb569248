"""Configuration module for the Rescue Rewards store."""

from .store_config import (
    STORE_CONFIG,
    StoreSettings,
    ActivityConfig,
    DealConfig,
    MetricsConfig,
    get_store_settings,
)

__all__ = [
    'STORE_CONFIG',
    'StoreSettings',
    'ActivityConfig',
    'DealConfig',
    'MetricsConfig',
    'get_store_settings',
]
