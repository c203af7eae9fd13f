"""
Fixed Point — целочисленная арифметика uint256

Все суммы токенов и цены представлены как целые числа в base units токена
(как на EVM). Float в расчётах сумм запрещён: любое округление должно быть
явным и идти в консервативную сторону.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все значения лежат в [0, UINT256_MAX]
2. Деление всегда floor (round down)
3. Деление на ноль никогда не происходит (ValueError до вычисления)
"""

from typing import Final


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

UINT256_MAX: Final[int] = 2**256 - 1

# Максимальное число decimals, которое принимаем от token metadata
MAX_TOKEN_DECIMALS: Final[int] = 77


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def is_uint256(value: object) -> bool:
    """True если value — int (не bool) в диапазоне uint256."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= UINT256_MAX


def validate_uint256(value: int, name: str = "value") -> int:
    """
    Проверка, что значение является uint256.

    Args:
        value: Проверяемое значение
        name: Имя параметра для сообщения об ошибке

    Returns:
        value без изменений

    Raises:
        ValueError: Если value не int или вне [0, 2**256 - 1]
    """
    if not is_uint256(value):
        raise ValueError(f"{name} must be uint256, got {value!r}")
    return value


# =============================================================================
# ЕДИНИЦЫ ТОКЕНА
# =============================================================================


def one_unit(decimals: int) -> int:
    """
    Одна целая единица токена в base units: 10 ** decimals.

    Raises:
        ValueError: Если decimals вне [0, MAX_TOKEN_DECIMALS]
    """
    if not isinstance(decimals, int) or not 0 <= decimals <= MAX_TOKEN_DECIMALS:
        raise ValueError(f"decimals must be in [0, {MAX_TOKEN_DECIMALS}], got {decimals!r}")
    return 10**decimals


# =============================================================================
# УМНОЖЕНИЕ / ДЕЛЕНИЕ
# =============================================================================


def mul_div_down(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator) без промежуточного переполнения.

    Python int не переполняется, но результат обязан оставаться uint256:
    это та же граница, что и у on-chain вычисления.

    Args:
        a: Множитель (uint256)
        b: Множитель (uint256)
        denominator: Делитель (uint256, > 0)

    Returns:
        Результат, округлённый вниз

    Raises:
        ValueError: Если denominator == 0 или результат не помещается в uint256

    Examples:
        >>> mul_div_down(50_000, 8, 10)
        40000
        >>> mul_div_down(7, 1, 2)
        3
    """
    validate_uint256(a, "a")
    validate_uint256(b, "b")
    validate_uint256(denominator, "denominator")
    if denominator == 0:
        raise ValueError("denominator must be positive")

    result = (a * b) // denominator
    if result > UINT256_MAX:
        raise ValueError(f"mul_div_down overflow: {a} * {b} / {denominator}")
    return result
