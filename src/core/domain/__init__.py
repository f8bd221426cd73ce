"""
Domain models and value objects.

Contains fundamental domain entities like FeeConfig, LoyaltyCustomer, LoyaltyTransaction.
"""

from src.core.domain.fee_config import (
    DEFAULT_API_COMMISSION_RATE,
    DEFAULT_APP_FEE_RATE,
    DEFAULT_WITHDRAWAL_FLAT_FEE,
    FeeConfig,
    FeeConfigUpdate,
)
from src.core.domain.loyalty import (
    TIER_THRESHOLDS,
    LoyaltyCustomer,
    LoyaltyTier,
    LoyaltyTransaction,
    TransactionType,
    classify_tier,
)

__all__ = [
    # Fee configuration
    "DEFAULT_APP_FEE_RATE",
    "DEFAULT_WITHDRAWAL_FLAT_FEE",
    "DEFAULT_API_COMMISSION_RATE",
    "FeeConfig",
    "FeeConfigUpdate",
    # Loyalty
    "TIER_THRESHOLDS",
    "LoyaltyTier",
    "TransactionType",
    "LoyaltyCustomer",
    "LoyaltyTransaction",
    "classify_tier",
]
