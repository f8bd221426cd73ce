"""
Contract Validation Module

Модуль для валидации JSON контрактов входящих событий и обновлений.
"""

from .validators import (
    ContractValidator,
    FeeConfigUpdateValidator,
    PurchaseEventValidator,
    SchemaLoader,
    WithdrawalRequestValidator,
    validate_fee_config_update,
    validate_purchase_event,
    validate_withdrawal_request,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "FeeConfigUpdateValidator",
    "PurchaseEventValidator",
    "WithdrawalRequestValidator",
    # Functions
    "validate_fee_config_update",
    "validate_purchase_event",
    "validate_withdrawal_request",
]
