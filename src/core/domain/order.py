"""
Order — Модель подписанного limit/stop ордера

Immutable Pydantic модель, представляющая намерение borrower продать
ограниченное количество token_in за token_out из credit account.

Модель проверяет только форму данных (адреса, диапазон uint256).
Семантические инварианты (token_in != token_out, amount_in > 0) проверяет
GATE 1, чтобы такие ордера отклонялись как INVALID_ORDER, а не как
ошибка парсинга.
"""

from pydantic import BaseModel, Field, field_validator

from src.core.domain.address import normalize_address
from src.core.math.fixed_point import UINT256_MAX


# =============================================================================
# ORDER
# =============================================================================


class Order(BaseModel):
    """
    Подписанный ордер borrower.

    Уникальность ордера как авторизации задаётся не самим ордером, а nonce,
    который потребляется при проверке подписи.
    """

    borrower: str = Field(..., description="Владелец credit account и подписант")
    token_in: str = Field(..., description="Продаваемый токен")
    token_out: str = Field(..., description="Покупаемый токен")
    amount_in: int = Field(..., ge=0, le=UINT256_MAX, description="Максимум к продаже (base units)")
    min_price: int = Field(
        ...,
        ge=0,
        le=UINT256_MAX,
        description="Минимальная цена: token_out base units за одну целую единицу token_in",
    )
    trigger_price: int = Field(
        0, ge=0, le=UINT256_MAX, description="Потолок oracle цены для исполнения (0 = выключен)"
    )

    model_config = {"frozen": True}

    @field_validator("borrower", "token_in", "token_out")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Адреса хранятся в checksum форме."""
        return normalize_address(v)

    @property
    def has_trigger(self) -> bool:
        return self.trigger_price > 0


# =============================================================================
# SIGNATURE
# =============================================================================


class Signature(BaseModel):
    """
    ECDSA подпись (v, r, s) над typed hash (Order, nonce).

    v принимается как в форме 27/28, так и 0/1.
    """

    v: int = Field(..., ge=0, le=255, description="Recovery id")
    r: int = Field(..., ge=0, lt=2**256, description="r компонент")
    s: int = Field(..., ge=0, lt=2**256, description="s компонент")

    model_config = {"frozen": True}

    @field_validator("v")
    @classmethod
    def validate_v(cls, v: int) -> int:
        if v not in (0, 1, 27, 28):
            raise ValueError(f"v must be one of 0, 1, 27, 28, got {v}")
        return v

    @property
    def vrs(self) -> tuple[int, int, int]:
        """(v, r, s) с v, приведённым к 27/28."""
        v = self.v if self.v >= 27 else self.v + 27
        return v, self.r, self.s

    def to_bytes(self) -> bytes:
        """65 байт: r || s || v."""
        v, r, s = self.vrs
        return r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([v])

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Signature":
        """
        Разбор 65-байтной подписи r || s || v.

        Raises:
            ValueError: Если длина != 65
        """
        if len(raw) != 65:
            raise ValueError(f"signature must be 65 bytes, got {len(raw)}")
        return cls(
            r=int.from_bytes(raw[:32], "big"),
            s=int.from_bytes(raw[32:64], "big"),
            v=raw[64],
        )

    @classmethod
    def from_hex(cls, value: str) -> "Signature":
        """Разбор 0x-prefixed hex подписи."""
        hex_body = value[2:] if value.startswith(("0x", "0X")) else value
        try:
            raw = bytes.fromhex(hex_body)
        except ValueError as e:
            raise ValueError(f"signature is not valid hex: {e}") from e
        return cls.from_bytes(raw)
