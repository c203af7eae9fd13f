"""
Static Price Oracle — in-memory oracle и token metadata

Цены задаются в USD с PRICE_DECIMALS знаками (как у Chainlink feeds).
Конверсия целочисленная, округление вниз.
"""

from typing import Dict, Final

from src.core.domain.address import normalize_address
from src.core.math.fixed_point import mul_div_down, one_unit


PRICE_DECIMALS: Final[int] = 8


class StaticPriceOracle:
    """PriceOracle + TokenMetadata с ручным управлением ценами."""

    def __init__(self):
        self._prices: Dict[str, int] = {}
        self._decimals: Dict[str, int] = {}

    def add_token(self, token: str, decimals: int, price_usd: int) -> None:
        """
        Args:
            token: адрес токена
            decimals: decimals токена
            price_usd: цена одной целой единицы в USD * 10**PRICE_DECIMALS
        """
        token = normalize_address(token)
        one_unit(decimals)
        self._decimals[token] = decimals
        self.set_price(token, price_usd)

    def set_price(self, token: str, price_usd: int) -> None:
        if price_usd <= 0:
            raise ValueError(f"price must be positive, got {price_usd}")
        self._prices[normalize_address(token)] = price_usd

    def decimals(self, token: str) -> int:
        token = normalize_address(token)
        if token not in self._decimals:
            raise ValueError(f"unknown token: {token}")
        return self._decimals[token]

    def price_usd(self, token: str) -> int:
        token = normalize_address(token)
        if token not in self._prices:
            raise ValueError(f"no price feed for {token}")
        return self._prices[token]

    def convert(self, amount: int, token_from: str, token_to: str) -> int:
        """amount * price_from * 10**dec_to / (price_to * 10**dec_from)."""
        return mul_div_down(
            amount,
            self.price_usd(token_from) * one_unit(self.decimals(token_to)),
            self.price_usd(token_to) * one_unit(self.decimals(token_from)),
        )
