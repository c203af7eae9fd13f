"""
Domain models and value objects.

Contains the signed Order, its Signature, batch Operations,
balance assertions and the tagged execution errors.
"""

from src.core.domain.address import normalize_address, same_address
from src.core.domain.errors import (
    AccountNotFound,
    BalanceAssertionFailed,
    CollaboratorError,
    InsufficientBalance,
    InvalidAmountSold,
    InvalidCallMethod,
    InvalidCallTarget,
    InvalidOrder,
    InvalidSignature,
    MalformedCallData,
    NothingToSell,
    NotTriggered,
    OrderExecutionError,
    UnknownAdapterCall,
)
from src.core.domain.operation import SELECTOR_SIZE, BalanceAssertion, Operation
from src.core.domain.order import Order, Signature

__all__ = [
    # Addresses
    "normalize_address",
    "same_address",
    # Order model
    "Order",
    "Signature",
    # Batch
    "Operation",
    "BalanceAssertion",
    "SELECTOR_SIZE",
    # Errors
    "OrderExecutionError",
    "InvalidSignature",
    "InvalidOrder",
    "NotTriggered",
    "NothingToSell",
    "InvalidCallTarget",
    "InvalidCallMethod",
    "MalformedCallData",
    "InvalidAmountSold",
    "CollaboratorError",
    "AccountNotFound",
    "BalanceAssertionFailed",
    "UnknownAdapterCall",
    "InsufficientBalance",
]
