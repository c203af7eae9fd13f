"""
Address — нормализация EVM адресов

Все идентификаторы (borrower, tokens, adapters) хранятся в checksum форме,
поэтому сравнение адресов — обычное сравнение строк.
"""

from eth_utils import is_address, to_checksum_address


def normalize_address(value: str) -> str:
    """
    Приведение адреса к EIP-55 checksum форме.

    Args:
        value: Адрес (hex с 0x, lowercase или checksum)

    Returns:
        Checksum адрес

    Raises:
        ValueError: Если value не является валидным 20-байтным адресом
    """
    if not isinstance(value, str) or not is_address(value):
        raise ValueError(f"invalid address: {value!r}")
    return to_checksum_address(value)


def same_address(a: str, b: str) -> bool:
    """Сравнение двух адресов независимо от регистра."""
    return normalize_address(a) == normalize_address(b)
