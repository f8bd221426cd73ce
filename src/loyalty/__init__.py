"""Loyalty — программа лояльности продавцов.

Уровень клиента выводится из суммы покупок, баллы начисляются с
усечением вниз.
"""

from .engine import (
    DEFAULT_POINT_VALUE,
    DEFAULT_POINTS_RATIO,
    LoyaltyConfig,
    LoyaltyEngine,
    PurchaseRecord,
    SellerMismatchError,
    next_tier,
    points_earned,
    points_value,
    record_purchase,
)
from src.core.domain.loyalty import classify_tier

__all__ = [
    "DEFAULT_POINTS_RATIO",
    "DEFAULT_POINT_VALUE",
    "LoyaltyConfig",
    "LoyaltyEngine",
    "PurchaseRecord",
    "SellerMismatchError",
    "classify_tier",
    "next_tier",
    "points_earned",
    "points_value",
    "record_purchase",
]
