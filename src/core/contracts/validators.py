"""
JSON Schema Contract Validators

Модуль для валидации входящих payload'ов согласно формальным JSON Schema
контрактам. Использует библиотеку jsonschema для проверки структуры данных
до того, как они попадут в доменные модели.

Схемы:
- fee_config_update.json (частичное обновление конфигурации комиссий)
- purchase_event.json (покупка клиента программы лояльности)
- withdrawal_request.json (запрос на вывод средств)
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Автоматически находит схемы в contracts/schema/ относительно корня проекта.
    """

    def __init__(self):
        # Определяем корень проекта (4 уровня вверх от этого файла)
        self._schema_dir = Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'purchase_event')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)


class FeeConfigUpdateValidator(ContractValidator):
    """Валидатор для fee_config_update контракта."""

    def __init__(self):
        super().__init__("fee_config_update")


class PurchaseEventValidator(ContractValidator):
    """Валидатор для purchase_event контракта."""

    def __init__(self):
        super().__init__("purchase_event")


class WithdrawalRequestValidator(ContractValidator):
    """Валидатор для withdrawal_request контракта."""

    def __init__(self):
        super().__init__("withdrawal_request")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_fee_config_update(data: Dict[str, Any]) -> None:
    """
    Валидация payload'а частичного обновления конфигурации комиссий.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    FeeConfigUpdateValidator().validate(data)


def validate_purchase_event(data: Dict[str, Any]) -> None:
    """
    Валидация события покупки.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    PurchaseEventValidator().validate(data)


def validate_withdrawal_request(data: Dict[str, Any]) -> None:
    """
    Валидация запроса на вывод средств.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    WithdrawalRequestValidator().validate(data)
