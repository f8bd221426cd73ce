"""FeeConfiguration — владелец текущей конфигурации комиссий.

Конфигурация процесса-wide, читается намного чаще, чем изменяется:
- get() возвращает immutable снапшот FeeConfig
- update(partial) сливает переданные поля с текущими и публикует новый снапшот
- reset() возвращает значения по умолчанию

Конкурентность (atomic swap of immutable snapshot):
- читатель берёт одну ссылку на frozen снапшот и никогда не видит
  конфигурацию, собранную наполовину из старых и новых полей
- писатели сериализуются на threading.Lock, merge + swap выполняются
  как одна операция (last-writer-wins по полю)
"""

import logging
import threading
from typing import Any, Mapping, Optional, Union

from src.core.contracts import validate_fee_config_update
from src.core.domain.fee_config import FeeConfig, FeeConfigUpdate
from src.core.math.monetary import validate_amount, validate_rate

logger = logging.getLogger(__name__)

PartialFeeConfig = Union[FeeConfigUpdate, Mapping[str, Any], None]


class FeeConfiguration:
    """Потокобезопасный владелец снапшота FeeConfig.

    Экземпляр передаётся калькуляторам явно (вместо глобального синглтона).
    """

    def __init__(self, initial: Optional[FeeConfig] = None):
        """
        Args:
            initial: начальный снапшот (default: значения по умолчанию)
        """
        self._snapshot: FeeConfig = initial if initial is not None else FeeConfig()
        self._write_lock = threading.Lock()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FeeConfiguration":
        """Начальная конфигурация из settings payload.

        Payload проверяется тем же контрактом, что и обновления;
        отсутствующие поля берутся из значений по умолчанию.
        """
        configuration = cls()
        configuration.update(data)
        return configuration

    def get(self) -> FeeConfig:
        """Текущий снапшот (frozen, изменить его нельзя)."""
        return self._snapshot

    def update(self, partial: PartialFeeConfig = None, **fields: Any) -> FeeConfig:
        """Слияние переданных полей с текущей конфигурацией.

        Args:
            partial: FeeConfigUpdate или mapping с подмножеством полей
            **fields: поля в виде keyword-аргументов (перекрывают partial)

        Returns:
            Новый текущий снапшот

        Raises:
            jsonschema.ValidationError: mapping не соответствует контракту
                fee_config_update (неизвестные поля, не числа)
            InvalidInputError: значение вне допустимого диапазона;
                текущий снапшот при этом не меняется
        """
        changes = self._collect_changes(partial, fields)
        self._validate_changes(changes)

        with self._write_lock:
            previous = self._snapshot
            if not changes:
                return previous

            merged = previous.model_dump()
            merged.update(changes)
            snapshot = FeeConfig(**merged)
            self._snapshot = snapshot

        logger.info(
            "FEE_CONFIG_UPDATED fields=%s app_fee_rate=%s withdrawal_flat_fee=%s "
            "api_commission_rate=%s",
            sorted(changes),
            snapshot.app_fee_rate,
            snapshot.withdrawal_flat_fee,
            snapshot.api_commission_rate,
        )
        return snapshot

    def reset(self) -> FeeConfig:
        """Возврат к значениям по умолчанию."""
        with self._write_lock:
            snapshot = FeeConfig()
            self._snapshot = snapshot
        logger.info("FEE_CONFIG_RESET")
        return snapshot

    @staticmethod
    def _collect_changes(
        partial: PartialFeeConfig, fields: Mapping[str, Any]
    ) -> dict[str, Any]:
        if partial is None:
            payload: dict[str, Any] = {}
        elif isinstance(partial, FeeConfigUpdate):
            payload = partial.supplied_fields()
        else:
            payload = dict(partial)

        payload.update(fields)
        validate_fee_config_update(payload)
        return payload

    @staticmethod
    def _validate_changes(changes: Mapping[str, Any]) -> None:
        try:
            if "app_fee_rate" in changes:
                validate_rate(changes["app_fee_rate"], "app_fee_rate")
            if "api_commission_rate" in changes:
                validate_rate(changes["api_commission_rate"], "api_commission_rate")
            if "withdrawal_flat_fee" in changes:
                validate_amount(changes["withdrawal_flat_fee"], "withdrawal_flat_fee")
        except ValueError:
            logger.warning("FEE_CONFIG_UPDATE_REJECTED changes=%s", dict(changes))
            raise
