"""
Core math modules

Денежные примитивы: валидация входов, округление до единицы валюты.
"""

from src.core.math.monetary import (
    ROUND_HALF_THRESHOLD,
    InvalidInputError,
    Number,
    floor_units,
    is_valid_number,
    round_half_up,
    validate_amount,
    validate_rate,
    validate_ratio,
)

__all__ = [
    "ROUND_HALF_THRESHOLD",
    "InvalidInputError",
    "Number",
    # Validation
    "is_valid_number",
    "validate_amount",
    "validate_rate",
    "validate_ratio",
    # Rounding
    "round_half_up",
    "floor_units",
]
