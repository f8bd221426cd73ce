"""LoyaltyEngine — начисление баллов и пересчёт уровня клиента.

Операции:
- classify_tier(total_spent): уровень по сумме покупок
- points_earned(amount, ratio): floor(amount × ratio), усечение, чтобы
  баллы никогда не начислялись сверх потраченного
- points_value(points, point_value): денежная стоимость баллов
- record_purchase(...): total_spent += amount, points += points_earned,
  tier пересчитывается (computed property клиента)

Предусловие для вызывающего кода: record_purchase для одного клиента не
безопасен при параллельных вызовах. Хранилище должно сериализовать
обновления клиента (single writer per record) и обеспечивать
уникальность (customer_id, order_id): ядро не дедуплицирует заказы.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Final, Mapping, Optional

from src.core.contracts import validate_purchase_event
from src.core.domain.loyalty import (
    TIER_THRESHOLDS,
    LoyaltyCustomer,
    LoyaltyTier,
    LoyaltyTransaction,
    TransactionType,
    classify_tier,
)
from src.core.math.monetary import (
    InvalidInputError,
    Number,
    floor_units,
    validate_amount,
    validate_ratio,
)

logger = logging.getLogger(__name__)

# =============================================================================
# ЗНАЧЕНИЯ ПО УМОЛЧАНИЮ
# =============================================================================

# Доля суммы покупки, конвертируемая в баллы (1 балл за 100 GNF)
DEFAULT_POINTS_RATIO: Final[float] = 0.01

# Стоимость одного балла (GNF)
DEFAULT_POINT_VALUE: Final[int] = 100


# =============================================================================
# EXCEPTIONS
# =============================================================================


class SellerMismatchError(InvalidInputError):
    """Покупка записывается клиенту другого продавца.

    Лояльность ведётся отдельно по каждому продавцу.
    """

    def __init__(self, customer: LoyaltyCustomer, seller_id: str):
        self.customer_id = customer.customer_id
        self.expected_seller_id = customer.seller_id
        super().__init__(
            "seller_id",
            seller_id,
            f"does not match loyalty customer {customer.customer_id} "
            f"of seller {customer.seller_id}",
        )


# =============================================================================
# RESULTS & CONFIG
# =============================================================================


@dataclass(frozen=True)
class PurchaseRecord:
    """Результат record_purchase: обновлённый клиент + запись о начислении."""

    customer: LoyaltyCustomer
    transaction: LoyaltyTransaction
    previous_tier: LoyaltyTier

    @property
    def tier_changed(self) -> bool:
        return self.previous_tier != self.customer.tier


@dataclass(frozen=True)
class LoyaltyConfig:
    """Параметры программы лояльности продавца."""
    points_ratio: float = DEFAULT_POINTS_RATIO
    point_value: int = DEFAULT_POINT_VALUE


# =============================================================================
# PURE FUNCTIONS
# =============================================================================


def points_earned(purchase_amount: Number, points_ratio: float = DEFAULT_POINTS_RATIO) -> int:
    """
    Баллы за покупку: floor(purchase_amount × points_ratio).

    Examples:
        >>> points_earned(1999, 0.01)
        19
        >>> points_earned(30_000)
        300

    Raises:
        InvalidInputError: отрицательная/невалидная сумма, ratio вне [0, 1]
    """
    validate_amount(purchase_amount, "purchase_amount")
    validate_ratio(points_ratio, "points_ratio")
    return floor_units(purchase_amount * points_ratio)


def points_value(points: Number, point_value: Number = DEFAULT_POINT_VALUE) -> Number:
    """
    Денежная стоимость баллов: points × point_value.

    Examples:
        >>> points_value(600)
        60000
    """
    validate_amount(points, "points")
    validate_amount(point_value, "point_value")
    return points * point_value


def next_tier(total_spent: Number) -> Optional[tuple[LoyaltyTier, float]]:
    """
    Следующий уровень и сумма, которой до него не хватает.

    Returns:
        (tier, remaining_spend) или None для platinum
    """
    validate_amount(total_spent, "total_spent")
    upcoming: Optional[tuple[LoyaltyTier, float]] = None
    for lower_bound, tier in TIER_THRESHOLDS:
        if total_spent >= lower_bound:
            return upcoming
        upcoming = (tier, lower_bound - total_spent)
    return upcoming


def record_purchase(
    customer: LoyaltyCustomer,
    seller_id: str,
    purchase_amount: Number,
    order_id: str,
    points_ratio: float = DEFAULT_POINTS_RATIO,
) -> PurchaseRecord:
    """
    Запись покупки клиента.

    Клиент не изменяется: возвращается новый экземпляр с увеличенными
    total_spent и points. Повторный вызов с тем же order_id начислит
    баллы повторно.

    Args:
        customer: текущее состояние клиента
        seller_id: продавец, у которого совершена покупка
        purchase_amount: сумма покупки (GNF)
        order_id: идентификатор заказа (переносится в LoyaltyTransaction)
        points_ratio: доля суммы, конвертируемая в баллы

    Returns:
        PurchaseRecord(customer, transaction)

    Raises:
        SellerMismatchError: seller_id не совпадает с customer.seller_id
        InvalidInputError: невалидная сумма или ratio, либо total_spent
            перестаёт быть конечным числом
    """
    if seller_id != customer.seller_id:
        raise SellerMismatchError(customer, seller_id)

    earned = points_earned(purchase_amount, points_ratio)
    total_spent = customer.total_spent + purchase_amount
    if not math.isfinite(total_spent):
        raise InvalidInputError(
            "purchase_amount", purchase_amount, "overflows customer total_spent"
        )

    # model_copy не запускает валидацию: собираем клиента заново
    updated = LoyaltyCustomer.model_validate(
        {
            **customer.model_dump(exclude={"tier"}),
            "total_spent": total_spent,
            "points": customer.points + earned,
        }
    )
    transaction = LoyaltyTransaction(
        customer_id=customer.customer_id,
        seller_id=seller_id,
        order_id=order_id,
        transaction_type=TransactionType.EARNED,
        points_change=earned,
        purchase_amount=purchase_amount,
        description=f"Points earned: {earned}",
    )

    if updated.tier != customer.tier:
        logger.info(
            "LOYALTY_TIER_CHANGED customer=%s seller=%s %s->%s",
            customer.customer_id,
            seller_id,
            customer.tier.value,
            updated.tier.value,
        )
    logger.debug(
        "LOYALTY_PURCHASE_RECORDED customer=%s seller=%s order=%s amount=%s points=%s",
        customer.customer_id,
        seller_id,
        order_id,
        purchase_amount,
        earned,
    )
    return PurchaseRecord(
        customer=updated, transaction=transaction, previous_tier=customer.tier
    )


# =============================================================================
# ENGINE
# =============================================================================


class LoyaltyEngine:
    """Программа лояльности с параметрами продавца по умолчанию.

    Stateless: клиенты хранятся вызывающим кодом.
    """

    def __init__(self, config: Optional[LoyaltyConfig] = None):
        self.config = config or LoyaltyConfig()
        validate_ratio(self.config.points_ratio, "points_ratio")
        validate_amount(self.config.point_value, "point_value")

    @staticmethod
    def classify_tier(total_spent: Number) -> LoyaltyTier:
        validate_amount(total_spent, "total_spent")
        return classify_tier(total_spent)

    def points_earned(self, purchase_amount: Number, points_ratio: Optional[float] = None) -> int:
        ratio = self.config.points_ratio if points_ratio is None else points_ratio
        return points_earned(purchase_amount, ratio)

    def points_value(self, points: Number, point_value: Optional[Number] = None) -> Number:
        value = self.config.point_value if point_value is None else point_value
        return points_value(points, value)

    def enroll(self, customer_id: str, seller_id: str, **profile: Any) -> LoyaltyCustomer:
        """Новый клиент продавца (при первой покупке)."""
        return LoyaltyCustomer.new(customer_id, seller_id, **profile)

    def record_purchase(
        self,
        customer: Optional[LoyaltyCustomer],
        seller_id: str,
        purchase_amount: Number,
        order_id: str,
        points_ratio: Optional[float] = None,
        customer_id: Optional[str] = None,
    ) -> PurchaseRecord:
        """record_purchase с ratio продавца по умолчанию.

        customer=None означает первую покупку: клиент создаётся с
        customer_id и затем получает начисление.
        """
        if customer is None:
            if not customer_id:
                raise InvalidInputError(
                    "customer_id", customer_id, "is required for a first purchase"
                )
            customer = self.enroll(customer_id, seller_id)

        ratio = self.config.points_ratio if points_ratio is None else points_ratio
        return record_purchase(customer, seller_id, purchase_amount, order_id, ratio)

    def record_purchase_event(
        self, event: Mapping[str, Any], customer: Optional[LoyaltyCustomer] = None
    ) -> PurchaseRecord:
        """Запись покупки по payload'у контракта purchase_event.

        Raises:
            jsonschema.ValidationError: payload не соответствует контракту
            SellerMismatchError: customer принадлежит другому продавцу
        """
        validate_purchase_event(event)
        if customer is not None and customer.customer_id != event["customer_id"]:
            raise InvalidInputError(
                "customer_id",
                event["customer_id"],
                f"does not match loyalty customer {customer.customer_id}",
            )
        return self.record_purchase(
            customer,
            seller_id=event["seller_id"],
            purchase_amount=event["purchase_amount"],
            order_id=event["order_id"],
            points_ratio=event.get("points_ratio"),
            customer_id=event["customer_id"],
        )
