"""
Typed Data — EIP-712 хэширование ордеров

Структурированное сообщение:
    Order(address borrower,address tokenIn,address tokenOut,uint256 amountIn,
          uint256 minPrice,uint256 triggerPrice,uint256 nonce)

digest = keccak256(0x19 0x01 || domainSeparator || structHash)

Domain separator привязывает подпись к конкретному deployment (name, version,
chainId, verifyingContract) и исключает replay между инстансами.
Любая пара signer/verifier обязана совпадать побайтно по порядку полей
и кодированию, поэтому layout совместим с eth_signTypedData_v4
(eth_account.messages.encode_typed_data).
"""

from dataclasses import dataclass
from typing import Any, Dict, Final

from eth_abi import encode
from eth_account import Account
from eth_account.messages import SignableMessage
from eth_utils import keccak

from src.core.domain.address import normalize_address
from src.core.domain.order import Order, Signature


# =============================================================================
# SCHEMA
# =============================================================================

ORDER_TYPE: Final[str] = (
    "Order(address borrower,address tokenIn,address tokenOut,uint256 amountIn,"
    "uint256 minPrice,uint256 triggerPrice,uint256 nonce)"
)
ORDER_TYPEHASH: Final[bytes] = keccak(text=ORDER_TYPE)

DOMAIN_TYPE: Final[str] = (
    "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
DOMAIN_TYPEHASH: Final[bytes] = keccak(text=DOMAIN_TYPE)

# Версия EIP-191 для structured data
EIP712_VERSION_BYTE: Final[bytes] = b"\x01"

# Поля в том же порядке, что и в ORDER_TYPE (для eth_signTypedData)
ORDER_FIELDS: Final[list[dict[str, str]]] = [
    {"name": "borrower", "type": "address"},
    {"name": "tokenIn", "type": "address"},
    {"name": "tokenOut", "type": "address"},
    {"name": "amountIn", "type": "uint256"},
    {"name": "minPrice", "type": "uint256"},
    {"name": "triggerPrice", "type": "uint256"},
    {"name": "nonce", "type": "uint256"},
]

DOMAIN_FIELDS: Final[list[dict[str, str]]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]


# =============================================================================
# DOMAIN
# =============================================================================


@dataclass(frozen=True)
class SigningDomain:
    """Параметры EIP-712 domain конкретного deployment."""

    chain_id: int
    verifying_contract: str
    name: str = "LimitOrderBot"
    version: str = "1"

    def __post_init__(self):
        object.__setattr__(self, "verifying_contract", normalize_address(self.verifying_contract))
        if self.chain_id < 0:
            raise ValueError(f"chain_id must be non-negative, got {self.chain_id}")

    def separator(self) -> bytes:
        """Domain separator (32 байта)."""
        return keccak(
            encode(
                ["bytes32", "bytes32", "bytes32", "uint256", "address"],
                [
                    DOMAIN_TYPEHASH,
                    keccak(text=self.name),
                    keccak(text=self.version),
                    self.chain_id,
                    self.verifying_contract,
                ],
            )
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chain_id,
            "verifyingContract": self.verifying_contract,
        }


# =============================================================================
# HASHING
# =============================================================================


def order_struct_hash(order: Order, nonce: int) -> bytes:
    """keccak256(abi.encode(ORDER_TYPEHASH, ...fields, nonce))."""
    return keccak(
        encode(
            ["bytes32", "address", "address", "address", "uint256", "uint256", "uint256", "uint256"],
            [
                ORDER_TYPEHASH,
                order.borrower,
                order.token_in,
                order.token_out,
                order.amount_in,
                order.min_price,
                order.trigger_price,
                nonce,
            ],
        )
    )


def order_signable_message(order: Order, nonce: int, domain: SigningDomain) -> SignableMessage:
    """
    EIP-191 v1 сообщение для (order, nonce).

    Подписывается стандартным tooling: Account.sign_message(message, key).
    """
    return SignableMessage(
        version=EIP712_VERSION_BYTE,
        header=domain.separator(),
        body=order_struct_hash(order, nonce),
    )


def order_digest(order: Order, nonce: int, domain: SigningDomain) -> bytes:
    """Итоговый хэш, над которым делается ECDSA подпись."""
    message = order_signable_message(order, nonce, domain)
    return keccak(b"\x19" + message.version + message.header + message.body)


def order_typed_data(order: Order, nonce: int, domain: SigningDomain) -> Dict[str, Any]:
    """Полное typed data сообщение (формат eth_signTypedData_v4)."""
    return {
        "types": {"EIP712Domain": DOMAIN_FIELDS, "Order": ORDER_FIELDS},
        "primaryType": "Order",
        "domain": domain.as_dict(),
        "message": {
            "borrower": order.borrower,
            "tokenIn": order.token_in,
            "tokenOut": order.token_out,
            "amountIn": order.amount_in,
            "minPrice": order.min_price,
            "triggerPrice": order.trigger_price,
            "nonce": nonce,
        },
    }


# =============================================================================
# RECOVERY
# =============================================================================


def recover_signer(order: Order, nonce: int, signature: Signature, domain: SigningDomain) -> str:
    """
    Восстановление адреса подписанта.

    Raises:
        ValueError / eth_keys ошибки: если подпись невалидна криптографически
    """
    message = order_signable_message(order, nonce, domain)
    return normalize_address(Account.recover_message(message, vrs=signature.vrs))


def sign_order(order: Order, nonce: int, domain: SigningDomain, private_key) -> Signature:
    """Подпись ордера приватным ключом (off-chain signer tooling)."""
    signed = Account.sign_message(order_signable_message(order, nonce, domain), private_key)
    return Signature(v=signed.v, r=signed.r, s=signed.s)
