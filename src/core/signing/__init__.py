"""Signing — nonces и EIP-712 хэширование ордеров."""

from .nonces import InMemoryNonceStore, NonceRegistry, NonceStore
from .typed_data import (
    DOMAIN_TYPEHASH,
    ORDER_TYPE,
    ORDER_TYPEHASH,
    SigningDomain,
    order_digest,
    order_signable_message,
    order_struct_hash,
    order_typed_data,
    recover_signer,
    sign_order,
)

__all__ = [
    "NonceStore",
    "InMemoryNonceStore",
    "NonceRegistry",
    "ORDER_TYPE",
    "ORDER_TYPEHASH",
    "DOMAIN_TYPEHASH",
    "SigningDomain",
    "order_struct_hash",
    "order_signable_message",
    "order_digest",
    "order_typed_data",
    "recover_signer",
    "sign_order",
]
