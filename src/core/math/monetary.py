"""
Monetary Primitives — Safe Money Math

Модуль обеспечивает корректность всех денежных операций в базовой валюте
платформы (GNF, целые единицы, без дробных sub-units):
- Валидация сумм, ставок и коэффициентов (NaN/Inf, знак, диапазон)
- Округление до целой единицы валюты (ties → +∞)
- Усечение (floor) для начисления баллов

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Невалидный вход никогда не превращается в денежный результат
   (InvalidInputError вместо бессмысленного числа)
2. Округление детерминировано: x.5 → вверх, -x.5 → вверх (к +∞)
3. Порядок float-операций задаётся вызывающим кодом и не переставляется,
   чтобы результаты совпадали со сверкой побитно
"""

import math
from numbers import Real
from typing import Final, Union

Number = Union[int, float]

# =============================================================================
# ПАРАМЕТРЫ ВАЛЮТЫ
# =============================================================================

# Порог дробной части, начиная с которого округляем вверх
ROUND_HALF_THRESHOLD: Final[float] = 0.5


# =============================================================================
# EXCEPTIONS
# =============================================================================


class InvalidInputError(ValueError):
    """
    Невалидный денежный вход: отрицательная сумма, NaN/Inf, не число,
    ставка вне допустимого диапазона.

    Ошибка recoverable: сообщается вызывающему синхронно, процесс
    продолжает работу.
    """

    def __init__(self, name: str, value: object, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"{name} {reason}, got {value!r}")


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def is_valid_number(value: object) -> bool:
    """
    Проверка, что value — конечное действительное число.

    bool исключается явно: True/False не являются денежными суммами.

    Examples:
        >>> is_valid_number(1000)
        True
        >>> is_valid_number(float("nan"))
        False
        >>> is_valid_number(True)
        False
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value)


def validate_amount(value: object, name: str = "amount") -> Number:
    """
    Проверка денежной суммы: конечное неотрицательное число.

    Args:
        value: Сумма в базовой валюте
        name: Имя поля для сообщения об ошибке

    Returns:
        value без изменений (int остаётся int)

    Raises:
        InvalidInputError: Если value не число, NaN/Inf или отрицательное
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(name, value, "must be a number")
    if not math.isfinite(value):
        raise InvalidInputError(name, value, "must be finite")
    if value < 0:
        raise InvalidInputError(name, value, "must be non-negative")
    return value


def validate_rate(value: object, name: str = "rate") -> float:
    """
    Проверка ставки: конечное число в полуинтервале [0, 1).

    Raises:
        InvalidInputError: Если ставка вне [0, 1) или не число
    """
    validate_amount(value, name)
    if value >= 1:
        raise InvalidInputError(name, value, "must be lower than 1")
    return value


def validate_ratio(value: object, name: str = "ratio") -> float:
    """
    Проверка коэффициента конверсии: конечное число в [0, 1].

    В отличие от validate_rate, ratio = 1 допустим (1 балл за 1 GNF).
    """
    validate_amount(value, name)
    if value > 1:
        raise InvalidInputError(name, value, "must not exceed 1")
    return value


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def round_half_up(value: float) -> int:
    """
    Округление до ближайшей целой единицы валюты, ties → +∞.

    Ties округляются к +∞ и для отрицательных значений: -2.5 → -2.
    Разность value - floor(value) вычисляется точно для всех double,
    поэтому порог 0.5 сравнивается без погрешности.

    Examples:
        >>> round_half_up(1030.0)
        1030
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-2.5)
        -2
        >>> round_half_up(2.4999)
        2
    """
    if not is_valid_number(value):
        raise InvalidInputError("value", value, "must be a finite number")

    floor_value = math.floor(value)
    if value - floor_value >= ROUND_HALF_THRESHOLD:
        return floor_value + 1
    return floor_value


def floor_units(value: float) -> int:
    """
    Усечение до целой единицы (floor).

    Используется там, где переначисление недопустимо (баллы лояльности).

    Examples:
        >>> floor_units(19.99)
        19
        >>> floor_units(300.0)
        300
    """
    if not is_valid_number(value):
        raise InvalidInputError("value", value, "must be a finite number")
    return math.floor(value)
