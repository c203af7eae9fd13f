"""Calls — таблица распознаваемых вызовов адаптеров и whitelist target."""

from .call_shapes import (
    CALL_SHAPE_SPECS,
    SHAPE_TABLE,
    AdapterKind,
    CallShape,
    CallShapeSpec,
    DecodedCall,
    decode_call,
    encode_v3_path,
    parse_v3_path,
    shape_spec,
)
from .facade import (
    REVERT_IF_RECEIVED_LESS_THAN,
    REVERT_IF_RECEIVED_LESS_THAN_SELECTOR,
    decode_balance_assertions,
    encode_balance_assertions,
    is_balance_assertion_call,
)
from .whitelist import AdapterWhitelist

__all__ = [
    "AdapterKind",
    "CallShape",
    "CallShapeSpec",
    "DecodedCall",
    "CALL_SHAPE_SPECS",
    "SHAPE_TABLE",
    "decode_call",
    "shape_spec",
    "parse_v3_path",
    "encode_v3_path",
    "AdapterWhitelist",
    "REVERT_IF_RECEIVED_LESS_THAN",
    "REVERT_IF_RECEIVED_LESS_THAN_SELECTOR",
    "encode_balance_assertions",
    "decode_balance_assertions",
    "is_balance_assertion_call",
]
