"""FeeCalculator — расчёт сумм к оплате и к выплате.

Формулы (снапшот FeeConfig читается один раз на вызов):

    charge = round(amount × (1 + app_fee_rate + api_commission_rate))
    net    = round(amount − withdrawal_flat_fee − amount × api_commission_rate)

round — до целой единицы валюты, ties → +∞ (см. round_half_up).
Порядок float-операций совпадает с формулами: результаты на граничных
суммах должны совпадать со сверкой платёжной системы побитно.

Отрицательный net (маленькая сумма вывода) возвращается как есть, без
обрезки до нуля.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from src.core.contracts import validate_withdrawal_request
from src.core.domain.fee_config import FeeConfig
from src.core.math.monetary import (
    InvalidInputError,
    Number,
    round_half_up,
    validate_amount,
)
from src.fees.configuration import FeeConfiguration


class OperationType(str, Enum):
    """Тип операции для расчёта комиссии.

    CLIENT — покупка клиентом; остальные — вывод средств получателем.
    """
    CLIENT = "client"
    COURIER = "courier"
    VENDOR = "vendor"
    AFFILIATE = "affiliate"
    CLIENT_WITHDRAWAL = "client_withdrawal"

    @property
    def is_withdrawal(self) -> bool:
        return self is not OperationType.CLIENT


@dataclass(frozen=True)
class FeeBreakdown:
    """Детализация расчёта для сверки и отображения."""

    operation_type: OperationType
    gross_amount: Number

    # Компоненты (до округления)
    app_fee: float
    api_commission: float
    flat_fee: float

    # Итог: ровно то, что возвращает compute() для этой операции
    settled_amount: int

    config: FeeConfig

    @property
    def total_fees(self) -> float:
        return self.app_fee + self.api_commission + self.flat_fee


def _finite_result(amount: Number, result: float) -> float:
    # Конечная сумма у границы double может дать inf после наценки
    if not math.isfinite(result):
        raise InvalidInputError("amount", amount, "overflows fee computation")
    return result


def client_charge(amount: Number, config: FeeConfig) -> int:
    """Сумма к оплате клиентом для базовой цены amount.

    Гарантия: charge ≥ amount при неотрицательных ставках.

    Raises:
        InvalidInputError: amount отрицательный, NaN/Inf или не число
            или итоговая сумма выходит за пределы float
    """
    validate_amount(amount)
    return round_half_up(
        _finite_result(
            amount, amount * (1 + config.app_fee_rate + config.api_commission_rate)
        )
    )


def withdrawal_net(amount: Number, config: FeeConfig) -> int:
    """Сумма к выплате при выводе amount.

    Гарантия: net ≤ amount. Может быть отрицательной.

    Raises:
        InvalidInputError: amount отрицательный, NaN/Inf или не число
    """
    validate_amount(amount)
    return round_half_up(
        _finite_result(
            amount,
            amount - config.withdrawal_flat_fee - amount * config.api_commission_rate,
        )
    )


class FeeCalculator:
    """Калькулятор комиссий поверх явно переданной FeeConfiguration."""

    def __init__(self, configuration: Optional[FeeConfiguration] = None):
        self.configuration = configuration or FeeConfiguration()

    def compute_client_charge(self, amount: Number) -> int:
        return client_charge(amount, self.configuration.get())

    def compute_withdrawal_net(self, amount: Number) -> int:
        return withdrawal_net(amount, self.configuration.get())

    def compute(self, amount: Number, operation_type: OperationType) -> int:
        """Расчёт по типу операции: покупка клиента или вывод."""
        operation_type = OperationType(operation_type)
        config = self.configuration.get()
        if operation_type.is_withdrawal:
            return withdrawal_net(amount, config)
        return client_charge(amount, config)

    def settle_withdrawal_request(self, request: Mapping[str, Any]) -> int:
        """Сумма к выплате по payload'у контракта withdrawal_request.

        Raises:
            jsonschema.ValidationError: payload не соответствует контракту
        """
        validate_withdrawal_request(request)
        return self.compute(request["amount"], OperationType(request["operation_type"]))

    def breakdown(self, amount: Number, operation_type: OperationType) -> FeeBreakdown:
        """Детализация комиссий; settled_amount совпадает с compute()."""
        operation_type = OperationType(operation_type)
        config = self.configuration.get()

        if operation_type.is_withdrawal:
            settled = withdrawal_net(amount, config)
            app_fee = 0.0
            flat_fee = config.withdrawal_flat_fee
        else:
            settled = client_charge(amount, config)
            app_fee = amount * config.app_fee_rate
            flat_fee = 0.0

        return FeeBreakdown(
            operation_type=operation_type,
            gross_amount=amount,
            app_fee=app_fee,
            api_commission=amount * config.api_commission_rate,
            flat_fee=flat_fee,
            settled_amount=settled,
            config=config,
        )
