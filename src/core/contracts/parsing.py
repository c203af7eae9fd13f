"""
Contract Parsing — JSON контракты → domain модели

Данные сначала проходят JSON Schema валидацию, затем собираются
в immutable Pydantic модели. uint256 в JSON передаются строками
(decimal) или integer, поэтому конверсия делается явно.
"""

from dataclasses import dataclass
from typing import Any, Dict

from src.core.contracts.validators import (
    validate_execution_request,
    validate_order,
    validate_signature,
)
from src.core.domain.operation import Operation
from src.core.domain.order import Order, Signature


@dataclass(frozen=True)
class ExecutionRequest:
    """Разобранный submission executor."""

    calls: tuple[Operation, ...]
    order: Order
    signature: Signature


def _to_int(value: Any) -> int:
    """uint256 из JSON: int, decimal строка или 0x hex."""
    if isinstance(value, int):
        return value
    if value.startswith(("0x", "0X")):
        return int(value, 16)
    return int(value, 10)


def order_from_dict(data: Dict[str, Any]) -> Order:
    """
    Raises:
        jsonschema.ValidationError: данные не соответствуют order.json
    """
    validate_order(data)
    return Order(
        borrower=data["borrower"],
        token_in=data["tokenIn"],
        token_out=data["tokenOut"],
        amount_in=_to_int(data["amountIn"]),
        min_price=_to_int(data["minPrice"]),
        trigger_price=_to_int(data.get("triggerPrice", 0)),
    )


def order_to_dict(order: Order) -> Dict[str, Any]:
    """Order → JSON (uint256 как decimal строки)."""
    return {
        "borrower": order.borrower,
        "tokenIn": order.token_in,
        "tokenOut": order.token_out,
        "amountIn": str(order.amount_in),
        "minPrice": str(order.min_price),
        "triggerPrice": str(order.trigger_price),
    }


def signature_from_json(data: Any) -> Signature:
    validate_signature(data)
    if isinstance(data, str):
        return Signature.from_hex(data)
    return Signature(v=data["v"], r=_to_int(data["r"]), s=_to_int(data["s"]))


def execution_request_from_dict(data: Dict[str, Any]) -> ExecutionRequest:
    """
    Разбор submission executor.

    Raises:
        jsonschema.ValidationError: данные не соответствуют execution_request.json
    """
    validate_execution_request(data)
    return ExecutionRequest(
        calls=tuple(
            Operation(target=call["target"], call_data=call["callData"]) for call in data["calls"]
        ),
        order=order_from_dict(data["order"]),
        signature=signature_from_json(data["signature"]),
    )
