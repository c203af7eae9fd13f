"""
Adapter Whitelist — разрешённые target контракты

Три swap адаптера (Uniswap V2, Sushiswap, Uniswap V3) и один universal
адаптер. Любой другой target отклоняется как INVALID_CALL_TARGET.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from src.core.calls.call_shapes import AdapterKind
from src.core.domain.address import normalize_address


@dataclass(frozen=True)
class AdapterWhitelist:
    """Адреса адаптеров, подключённых к credit manager."""

    uniswap_v2: str
    sushiswap: str
    uniswap_v3: str
    universal: str

    def __post_init__(self):
        for name in ("uniswap_v2", "sushiswap", "uniswap_v3", "universal"):
            object.__setattr__(self, name, normalize_address(getattr(self, name)))
        if len(self.targets()) != 4:
            raise ValueError("adapter addresses must be distinct")

    def targets(self) -> Dict[str, AdapterKind]:
        """target address → adapter kind."""
        return {
            self.uniswap_v2: AdapterKind.V2_ROUTER,
            self.sushiswap: AdapterKind.V2_ROUTER,
            self.uniswap_v3: AdapterKind.V3_ROUTER,
            self.universal: AdapterKind.UNIVERSAL,
        }

    def kind_of(self, target: str) -> Optional[AdapterKind]:
        """Категория target или None, если target не в whitelist."""
        return self.targets().get(normalize_address(target))
