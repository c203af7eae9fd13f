"""
Operation — Модели операций batch и balance assertions

Operation предлагается executor (не подписана): target + opaque call data.
BalanceAssertion используется для построения invariant операции.
"""

from pydantic import BaseModel, Field, field_validator

from src.core.domain.address import normalize_address
from src.core.math.fixed_point import UINT256_MAX


# Длина selector (4 байта keccak от сигнатуры функции)
SELECTOR_SIZE = 4


class Operation(BaseModel):
    """Одна операция batch: вызов call_data на адаптере target."""

    target: str = Field(..., description="Адрес контракта (адаптера или facade)")
    call_data: bytes = Field(..., description="ABI-encoded вызов: selector + аргументы")

    model_config = {"frozen": True}

    @field_validator("target")
    @classmethod
    def validate_target(cls, v: str) -> str:
        return normalize_address(v)

    @field_validator("call_data", mode="before")
    @classmethod
    def parse_call_data(cls, v):
        """Принимает bytes или 0x-prefixed hex строку."""
        if isinstance(v, str):
            hex_body = v[2:] if v.startswith(("0x", "0X")) else v
            return bytes.fromhex(hex_body)
        return v

    @property
    def selector(self) -> bytes:
        """Первые 4 байта call data (может быть короче, если payload обрезан)."""
        return self.call_data[:SELECTOR_SIZE]

    @property
    def arguments(self) -> bytes:
        return self.call_data[SELECTOR_SIZE:]


class BalanceAssertion(BaseModel):
    """
    Требование к балансу token после batch.

    minimum_balance — минимальный прирост относительно баланса в момент
    исполнения assertion операции; 0 означает "никакого net spend".
    """

    token: str = Field(..., description="Проверяемый токен")
    minimum_balance: int = Field(..., ge=0, le=UINT256_MAX, description="Минимальный прирост (base units)")

    model_config = {"frozen": True}

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        return normalize_address(v)
