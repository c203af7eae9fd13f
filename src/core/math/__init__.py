"""
Core math modules

Целочисленная uint256 арифметика с явным округлением вниз.
"""

from src.core.math.fixed_point import (
    MAX_TOKEN_DECIMALS,
    UINT256_MAX,
    is_uint256,
    mul_div_down,
    one_unit,
    validate_uint256,
)

__all__ = [
    "UINT256_MAX",
    "MAX_TOKEN_DECIMALS",
    "is_uint256",
    "validate_uint256",
    "one_unit",
    "mul_div_down",
]
