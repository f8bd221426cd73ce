"""Fees — расчёт комиссий платформы.

- FeeConfiguration: владелец текущей конфигурации (atomic snapshot swap)
- FeeCalculator: сумма к оплате клиентом и сумма к выплате при выводе
"""

from .calculator import (
    FeeBreakdown,
    FeeCalculator,
    OperationType,
    client_charge,
    withdrawal_net,
)
from .configuration import FeeConfiguration

__all__ = [
    "FeeConfiguration",
    "FeeCalculator",
    "FeeBreakdown",
    "OperationType",
    "client_charge",
    "withdrawal_net",
]
