"""
Тесты для модуля Fixed Point

Проверяет:
1. Границы uint256
2. one_unit и диапазон decimals
3. mul_div_down: округление вниз, деление на ноль, переполнение
"""

import pytest

from src.core.math.fixed_point import (
    MAX_TOKEN_DECIMALS,
    UINT256_MAX,
    is_uint256,
    mul_div_down,
    one_unit,
    validate_uint256,
)


# =============================================================================
# UINT256
# =============================================================================


class TestUint256:
    def test_bounds(self):
        assert is_uint256(0)
        assert is_uint256(UINT256_MAX)
        assert not is_uint256(UINT256_MAX + 1)
        assert not is_uint256(-1)

    def test_rejects_non_int(self):
        """bool и float не являются uint256."""
        assert not is_uint256(True)
        assert not is_uint256(1.0)
        assert not is_uint256("1")

    def test_validate_returns_value(self):
        assert validate_uint256(42, "amount") == 42

    def test_validate_names_parameter(self):
        with pytest.raises(ValueError, match="amount_in"):
            validate_uint256(-5, "amount_in")


# =============================================================================
# ONE UNIT
# =============================================================================


class TestOneUnit:
    @pytest.mark.parametrize("decimals,expected", [(0, 1), (6, 10**6), (18, 10**18)])
    def test_powers_of_ten(self, decimals, expected):
        assert one_unit(decimals) == expected

    def test_max_decimals_fits_uint256(self):
        assert one_unit(MAX_TOKEN_DECIMALS) <= UINT256_MAX

    @pytest.mark.parametrize("decimals", [-1, MAX_TOKEN_DECIMALS + 1])
    def test_out_of_range(self, decimals):
        with pytest.raises(ValueError):
            one_unit(decimals)


# =============================================================================
# MUL DIV
# =============================================================================


class TestMulDivDown:
    def test_exact(self):
        """50,000 X * 0.8 = 40,000 Y."""
        assert mul_div_down(50_000 * 10**18, 8 * 10**17, 10**18) == 40_000 * 10**18

    def test_rounds_down(self):
        assert mul_div_down(7, 1, 2) == 3
        assert mul_div_down(10**18 - 1, 8 * 10**17, 10**18) == 8 * 10**17 - 1

    def test_large_intermediate_product(self):
        """a * b > uint256, но результат помещается."""
        assert mul_div_down(UINT256_MAX, UINT256_MAX, UINT256_MAX) == UINT256_MAX

    def test_zero_denominator(self):
        with pytest.raises(ValueError, match="denominator"):
            mul_div_down(1, 1, 0)

    def test_result_overflow(self):
        with pytest.raises(ValueError, match="overflow"):
            mul_div_down(UINT256_MAX, 2, 1)

    def test_negative_operand(self):
        with pytest.raises(ValueError):
            mul_div_down(-1, 1, 1)
