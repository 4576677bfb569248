"""Store configuration settings for Rescue Rewards."""

from dataclasses import dataclass
import os

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()


@dataclass
class ActivityConfig:
    """Activity feed configuration."""
    feed_limit: int = 10


@dataclass
class DealConfig:
    """Rescue deal lifecycle configuration."""
    ttl_hours: int = 24


@dataclass
class MetricsConfig:
    """Dashboard and analytics presentation rules."""
    savings_fallback_discount: int = 30
    waste_reduction_baseline: int = 85
    waste_reduction_cap: int = 95


@dataclass
class StoreSettings:
    """Main store configuration settings."""
    log_level: str = "INFO"
    activity: ActivityConfig = None
    deals: DealConfig = None
    metrics: MetricsConfig = None

    def __post_init__(self):
        """Initialize nested configs if not provided."""
        if self.activity is None:
            self.activity = ActivityConfig()
        if self.deals is None:
            self.deals = DealConfig()
        if self.metrics is None:
            self.metrics = MetricsConfig()


# Default store configuration
STORE_CONFIG = {
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    "activity": {
        "feed_limit": int(os.getenv("ACTIVITY_FEED_LIMIT", "10")),
    },
    "deals": {
        "ttl_hours": int(os.getenv("DEAL_TTL_HOURS", "24")),
    },
    "metrics": {
        "savings_fallback_discount": int(os.getenv("SAVINGS_FALLBACK_DISCOUNT", "30")),
        "waste_reduction_baseline": int(os.getenv("WASTE_REDUCTION_BASELINE", "85")),
        "waste_reduction_cap": int(os.getenv("WASTE_REDUCTION_CAP", "95")),
    },
}


def get_store_settings() -> StoreSettings:
    """Get store settings from configuration."""
    return StoreSettings(
        log_level=STORE_CONFIG["log_level"],
        activity=ActivityConfig(**STORE_CONFIG["activity"]),
        deals=DealConfig(**STORE_CONFIG["deals"]),
        metrics=MetricsConfig(**STORE_CONFIG["metrics"]),
    )
