"""
Loyalty — Модели программы лояльности

Уровень (tier) клиента — чистая функция от total_spent:

    total_spent ≥ 500 000 → platinum
    total_spent ≥ 200 000 → gold
    total_spent ≥  50 000 → silver
    иначе                 → bronze

Граница принадлежит старшему уровню (ровно 50 000 — silver).

Лояльность ведётся отдельно для каждого продавца: клиент идентифицируется
парой (customer_id, seller_id).

tier никогда не хранится: это computed property, пересчитываемое из
total_spent при каждом чтении.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Final, Optional

from pydantic import BaseModel, Field, computed_field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class LoyaltyTier(str, Enum):
    """Уровень лояльности клиента"""

    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class TransactionType(str, Enum):
    """Тип движения баллов"""

    EARNED = "earned"


# =============================================================================
# ПОРОГИ УРОВНЕЙ
# =============================================================================

# (нижняя граница включительно, уровень), по убыванию границы
TIER_THRESHOLDS: Final[tuple[tuple[float, LoyaltyTier], ...]] = (
    (500_000, LoyaltyTier.PLATINUM),
    (200_000, LoyaltyTier.GOLD),
    (50_000, LoyaltyTier.SILVER),
    (0, LoyaltyTier.BRONZE),
)


def classify_tier(total_spent: float) -> LoyaltyTier:
    """
    Уровень с наибольшей нижней границей ≤ total_spent.

    Вход не валидируется здесь: модели и движок проверяют суммы сами.
    Отрицательные значения попадают в bronze.

    Examples:
        >>> classify_tier(49_999)
        <LoyaltyTier.BRONZE: 'bronze'>
        >>> classify_tier(50_000)
        <LoyaltyTier.SILVER: 'silver'>
    """
    for lower_bound, tier in TIER_THRESHOLDS:
        if total_spent >= lower_bound:
            return tier
    return LoyaltyTier.BRONZE


# =============================================================================
# LOYALTY CUSTOMER
# =============================================================================


class LoyaltyCustomer(BaseModel):
    """
    Клиент программы лояльности конкретного продавца.

    Immutable модель (frozen=True). Покупка создаёт новый экземпляр с
    увеличенными total_spent и points; tier вычисляется из total_spent.

    При загрузке из хранилища поле tier допускается во входных данных,
    но только если оно совпадает с классификацией total_spent.
    """

    # Идентификация
    customer_id: str = Field(..., min_length=1, description="Идентификатор клиента")
    seller_id: str = Field(..., min_length=1, description="Идентификатор продавца")

    # Описательные поля (хранятся вызывающим кодом)
    name: Optional[str] = Field(None, description="Имя клиента")
    email: Optional[str] = Field(None, description="Email клиента")
    phone: Optional[str] = Field(None, description="Телефон клиента")
    joined_at: Optional[datetime] = Field(None, description="Дата вступления (UTC)")

    # Состояние
    total_spent: float = Field(
        0.0, ge=0, allow_inf_nan=False, description="Сумма покупок у продавца (GNF)"
    )
    points: int = Field(0, ge=0, description="Накопленные баллы")

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="before")
    @classmethod
    def check_stored_tier(cls, data: Any) -> Any:
        """
        Сохранённый tier не может расходиться с total_spent.

        Поле удаляется из входа: модель всегда пересчитывает его сама.
        """
        if not isinstance(data, dict) or "tier" not in data:
            return data

        data = dict(data)
        stored_tier = data.pop("tier")
        total_spent = data.get("total_spent", 0.0)
        if isinstance(total_spent, (int, float)):
            expected = classify_tier(total_spent)
            if LoyaltyTier(stored_tier) != expected:
                raise ValueError(
                    f"stored tier {stored_tier!r} inconsistent with "
                    f"total_spent {total_spent} (expected {expected.value!r})"
                )
        return data

    @computed_field  # type: ignore[prop-decorator]
    @property
    def tier(self) -> LoyaltyTier:
        """Уровень, вычисленный из total_spent."""
        return classify_tier(self.total_spent)

    @classmethod
    def new(
        cls,
        customer_id: str,
        seller_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        joined_at: Optional[datetime] = None,
    ) -> "LoyaltyCustomer":
        """Новый клиент с нулевыми total_spent и points."""
        return cls(
            customer_id=customer_id,
            seller_id=seller_id,
            name=name,
            email=email,
            phone=phone,
            joined_at=joined_at or datetime.now(timezone.utc),
        )


# =============================================================================
# LOYALTY TRANSACTION
# =============================================================================


class LoyaltyTransaction(BaseModel):
    """
    Запись о начислении баллов за покупку.

    Возвращается вызывающему коду вместе с обновлённым клиентом;
    хранилище отвечает за уникальность (customer_id, order_id).
    """

    customer_id: str = Field(..., min_length=1)
    seller_id: str = Field(..., min_length=1)
    order_id: str = Field(..., min_length=1, description="Идентификатор заказа")
    transaction_type: TransactionType = Field(TransactionType.EARNED)
    points_change: int = Field(..., ge=0, description="Начисленные баллы")
    purchase_amount: float = Field(..., ge=0, allow_inf_nan=False)
    description: str = Field("", description="Описание для истории клиента")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}
