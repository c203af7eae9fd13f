"""Simulation — in-memory реализации внешних систем.

- StaticPriceOracle: PriceOracle + TokenMetadata
- InMemoryCreditAccountSystem: CreditAccountSystem с atomic batch
- Симуляторы адаптеров (V2/V3 router, universal withdraw)
"""

from .adapters import AdapterSimulator, SimulatedSwapRouter, SimulatedUniversalAdapter
from .credit_accounts import InMemoryCreditAccountSystem
from .price_oracle import PRICE_DECIMALS, StaticPriceOracle

__all__ = [
    "AdapterSimulator",
    "SimulatedSwapRouter",
    "SimulatedUniversalAdapter",
    "InMemoryCreditAccountSystem",
    "StaticPriceOracle",
    "PRICE_DECIMALS",
]
