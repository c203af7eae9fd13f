"""
Facade calls — кодирование balance assertions

revertIfReceivedLessThan((address,uint256)[]) исполняется самим facade
account system: в момент вызова он фиксирует текущие балансы, после batch
проверяет balance_after >= balance_captured + minimum для каждого токена.
"""

from typing import Final, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector

from src.core.domain.operation import SELECTOR_SIZE, BalanceAssertion


REVERT_IF_RECEIVED_LESS_THAN: Final[str] = "revertIfReceivedLessThan((address,uint256)[])"
REVERT_IF_RECEIVED_LESS_THAN_SELECTOR: Final[bytes] = function_signature_to_4byte_selector(
    REVERT_IF_RECEIVED_LESS_THAN
)

_ASSERTIONS_TYPE: Final[str] = "(address,uint256)[]"


def encode_balance_assertions(assertions: Sequence[BalanceAssertion]) -> bytes:
    """Call data для facade: selector + abi.encode(Balance[])."""
    return REVERT_IF_RECEIVED_LESS_THAN_SELECTOR + encode(
        [_ASSERTIONS_TYPE],
        [[(a.token, a.minimum_balance) for a in assertions]],
    )


def is_balance_assertion_call(call_data: bytes) -> bool:
    return bytes(call_data[:SELECTOR_SIZE]) == REVERT_IF_RECEIVED_LESS_THAN_SELECTOR


def decode_balance_assertions(call_data: bytes) -> list[BalanceAssertion]:
    """
    Обратная операция к encode_balance_assertions.

    Raises:
        ValueError: Если selector не тот или payload некорректен
    """
    if not is_balance_assertion_call(call_data):
        raise ValueError(f"not a {REVERT_IF_RECEIVED_LESS_THAN} call")
    try:
        (entries,) = decode([_ASSERTIONS_TYPE], bytes(call_data[SELECTOR_SIZE:]))
    except DecodingError as e:
        raise ValueError(f"malformed balance assertions: {e}") from e
    return [BalanceAssertion(token=token, minimum_balance=amount) for token, amount in entries]
