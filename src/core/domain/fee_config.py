"""
FeeConfig — Снапшот параметров комиссий платформы

Immutable Pydantic модель текущей конфигурации комиссий:
- app_fee_rate: наценка платформы на покупки клиента (доля)
- withdrawal_flat_fee: фиксированная комиссия за вывод (GNF)
- api_commission_rate: комиссия API на покупки и выводы (доля)

FeeConfigUpdate — частичное обновление: пропущенные поля сохраняют
предыдущее значение.
"""

from typing import Any, Dict, Final, Optional

from pydantic import BaseModel, Field

# =============================================================================
# ЗНАЧЕНИЯ ПО УМОЛЧАНИЮ
# =============================================================================

DEFAULT_APP_FEE_RATE: Final[float] = 0.01
DEFAULT_WITHDRAWAL_FLAT_FEE: Final[float] = 1000.0
DEFAULT_API_COMMISSION_RATE: Final[float] = 0.02


# =============================================================================
# FEE CONFIG MODEL
# =============================================================================


class FeeConfig(BaseModel):
    """
    Снапшот конфигурации комиссий.

    Immutable модель (frozen=True): изменение снапшота вызывающим кодом
    невозможно, новая конфигурация всегда создаётся новым экземпляром.
    """

    app_fee_rate: float = Field(
        DEFAULT_APP_FEE_RATE,
        ge=0,
        lt=1,
        allow_inf_nan=False,
        description="Наценка платформы на покупки клиента (доля)",
    )
    withdrawal_flat_fee: float = Field(
        DEFAULT_WITHDRAWAL_FLAT_FEE,
        ge=0,
        allow_inf_nan=False,
        description="Фиксированная комиссия за вывод (GNF)",
    )
    api_commission_rate: float = Field(
        DEFAULT_API_COMMISSION_RATE,
        ge=0,
        lt=1,
        allow_inf_nan=False,
        description="Комиссия API на покупки и выводы (доля)",
    )

    model_config = {"frozen": True, "extra": "forbid"}


class FeeConfigUpdate(BaseModel):
    """
    Частичное обновление FeeConfig.

    Диапазоны значений здесь не проверяются: это делает владелец
    конфигурации, чтобы сообщить ошибку как InvalidInputError.
    """

    app_fee_rate: Optional[float] = None
    withdrawal_flat_fee: Optional[float] = None
    api_commission_rate: Optional[float] = None

    model_config = {"frozen": True, "extra": "forbid"}

    def supplied_fields(self) -> Dict[str, Any]:
        """Только явно переданные поля (None означает 'не менять')."""
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }
