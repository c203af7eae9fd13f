"""
Call Shapes — закрытая таблица распознаваемых вызовов адаптеров

Каждая операция batch классифицируется парой (adapter kind, selector).
Таблица статическая: неизвестный selector — всегда отказ, никакой
runtime-рефлексии по ABI.

Поддерживаемые формы:
- V2 router: swapExactTokensForTokens, swapAllTokensForTokens
- V3 router: exactInputSingle, exactAllInputSingle, exactInput, exactAllInput
- Universal adapter: withdraw (bounty executor из surplus)

Декодирование строгое: обрезанный или некорректный payload
распознанной формы — hard failure (MalformedCallData), не best-effort.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Final, Optional, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector

from src.core.domain.address import normalize_address
from src.core.domain.errors import InvalidCallMethod, MalformedCallData
from src.core.domain.operation import SELECTOR_SIZE


# =============================================================================
# CONSTANTS
# =============================================================================

ADDRESS_SIZE: Final[int] = 20

# Размер fee в packed V3 path (uint24)
V3_FEE_SIZE: Final[int] = 3

# Один hop в packed V3 path: fee + следующий токен
V3_HOP_SIZE: Final[int] = V3_FEE_SIZE + ADDRESS_SIZE


# =============================================================================
# ENUMS
# =============================================================================


class AdapterKind(str, Enum):
    """Категория target контракта."""

    V2_ROUTER = "V2_ROUTER"
    V3_ROUTER = "V3_ROUTER"
    UNIVERSAL = "UNIVERSAL"


class CallShape(str, Enum):
    """Распознанная форма вызова."""

    SWAP_EXACT_TOKENS_FOR_TOKENS = "swapExactTokensForTokens"
    SWAP_ALL_TOKENS_FOR_TOKENS = "swapAllTokensForTokens"
    EXACT_INPUT_SINGLE = "exactInputSingle"
    EXACT_ALL_INPUT_SINGLE = "exactAllInputSingle"
    EXACT_INPUT = "exactInput"
    EXACT_ALL_INPUT = "exactAllInput"
    WITHDRAW = "withdraw"


# =============================================================================
# DECODED CALL
# =============================================================================


@dataclass(frozen=True)
class DecodedCall:
    """Структурированное содержимое распознанного вызова.

    route — токены по маршруту; для withdraw это один выводимый токен.
    amount_in is None означает "весь баланс" (exact all input).
    """

    adapter: AdapterKind
    shape: CallShape
    route: tuple[str, ...]
    amount_in: Optional[int]

    # Минимальный выход: абсолютный (exact input) или rate в RAY (exact all input)
    amount_out_min: Optional[int] = None
    rate_min_ray: Optional[int] = None

    recipient: Optional[str] = None
    fees: tuple[int, ...] = field(default_factory=tuple)

    @property
    def spent_token(self) -> str:
        """Токен, баланс которого операция уменьшает (первый по маршруту)."""
        return self.route[0]

    @property
    def output_token(self) -> str:
        return self.route[-1]

    @property
    def is_swap(self) -> bool:
        return self.shape != CallShape.WITHDRAW

    @property
    def spends_whole_balance(self) -> bool:
        return self.amount_in is None


# =============================================================================
# V3 PACKED PATH
# =============================================================================


def parse_v3_path(path: bytes) -> tuple[tuple[str, ...], tuple[int, ...]]:
    """
    Разбор packed V3 path: token (20) | fee (3) | token (20) | ...

    Bounds-checked: длина должна быть ровно 20 + k * 23, k >= 1.

    Returns:
        (tokens, fees)

    Raises:
        ValueError: Если длина path некорректна
    """
    if len(path) < ADDRESS_SIZE + V3_HOP_SIZE or (len(path) - ADDRESS_SIZE) % V3_HOP_SIZE != 0:
        raise ValueError(f"invalid V3 path length: {len(path)}")

    tokens = [normalize_address("0x" + path[:ADDRESS_SIZE].hex())]
    fees = []
    offset = ADDRESS_SIZE
    while offset < len(path):
        fees.append(int.from_bytes(path[offset:offset + V3_FEE_SIZE], "big"))
        offset += V3_FEE_SIZE
        tokens.append(normalize_address("0x" + path[offset:offset + ADDRESS_SIZE].hex()))
        offset += ADDRESS_SIZE

    return tuple(tokens), tuple(fees)


def encode_v3_path(tokens: Sequence[str], fees: Sequence[int]) -> bytes:
    """Обратная операция к parse_v3_path."""
    if len(tokens) != len(fees) + 1 or len(fees) == 0:
        raise ValueError("V3 path needs len(tokens) == len(fees) + 1 >= 2")
    out = bytes.fromhex(normalize_address(tokens[0])[2:])
    for fee, token in zip(fees, tokens[1:]):
        out += fee.to_bytes(V3_FEE_SIZE, "big") + bytes.fromhex(normalize_address(token)[2:])
    return out


def _v2_route(path: Sequence[str]) -> tuple[str, ...]:
    if len(path) < 2:
        raise ValueError(f"V2 path needs at least 2 tokens, got {len(path)}")
    return tuple(normalize_address(token) for token in path)


# =============================================================================
# DECODERS
# =============================================================================


def _decode_swap_exact_tokens_for_tokens(args: tuple) -> DecodedCall:
    amount_in, amount_out_min, path, to, _deadline = args
    return DecodedCall(
        adapter=AdapterKind.V2_ROUTER,
        shape=CallShape.SWAP_EXACT_TOKENS_FOR_TOKENS,
        route=_v2_route(path),
        amount_in=amount_in,
        amount_out_min=amount_out_min,
        recipient=normalize_address(to),
    )


def _decode_swap_all_tokens_for_tokens(args: tuple) -> DecodedCall:
    rate_min_ray, path, _deadline = args
    return DecodedCall(
        adapter=AdapterKind.V2_ROUTER,
        shape=CallShape.SWAP_ALL_TOKENS_FOR_TOKENS,
        route=_v2_route(path),
        amount_in=None,
        rate_min_ray=rate_min_ray,
    )


def _decode_exact_input_single(args: tuple) -> DecodedCall:
    token_in, token_out, fee, recipient, _deadline, amount_in, amount_out_min, _sqrt_limit = args[0]
    return DecodedCall(
        adapter=AdapterKind.V3_ROUTER,
        shape=CallShape.EXACT_INPUT_SINGLE,
        route=(normalize_address(token_in), normalize_address(token_out)),
        amount_in=amount_in,
        amount_out_min=amount_out_min,
        recipient=normalize_address(recipient),
        fees=(fee,),
    )


def _decode_exact_all_input_single(args: tuple) -> DecodedCall:
    token_in, token_out, fee, _deadline, rate_min_ray, _sqrt_limit = args[0]
    return DecodedCall(
        adapter=AdapterKind.V3_ROUTER,
        shape=CallShape.EXACT_ALL_INPUT_SINGLE,
        route=(normalize_address(token_in), normalize_address(token_out)),
        amount_in=None,
        rate_min_ray=rate_min_ray,
        fees=(fee,),
    )


def _decode_exact_input(args: tuple) -> DecodedCall:
    path, recipient, _deadline, amount_in, amount_out_min = args[0]
    tokens, fees = parse_v3_path(path)
    return DecodedCall(
        adapter=AdapterKind.V3_ROUTER,
        shape=CallShape.EXACT_INPUT,
        route=tokens,
        amount_in=amount_in,
        amount_out_min=amount_out_min,
        recipient=normalize_address(recipient),
        fees=fees,
    )


def _decode_exact_all_input(args: tuple) -> DecodedCall:
    path, _deadline, rate_min_ray = args[0]
    tokens, fees = parse_v3_path(path)
    return DecodedCall(
        adapter=AdapterKind.V3_ROUTER,
        shape=CallShape.EXACT_ALL_INPUT,
        route=tokens,
        amount_in=None,
        rate_min_ray=rate_min_ray,
        fees=fees,
    )


def _decode_withdraw(args: tuple) -> DecodedCall:
    token, to, amount = args
    return DecodedCall(
        adapter=AdapterKind.UNIVERSAL,
        shape=CallShape.WITHDRAW,
        route=(normalize_address(token),),
        amount_in=amount,
        recipient=normalize_address(to),
    )


# =============================================================================
# SHAPE TABLE
# =============================================================================


@dataclass(frozen=True)
class CallShapeSpec:
    """Одна строка таблицы: сигнатура функции и её strict decoder."""

    adapter: AdapterKind
    shape: CallShape
    signature: str
    abi_types: tuple[str, ...]
    decoder: Callable[[tuple], DecodedCall]

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.signature)

    def encode(self, *args) -> bytes:
        """Кодирование вызова: selector + abi.encode(args)."""
        return self.selector + encode(list(self.abi_types), list(args))


_V2_PATH_ARGS = ("uint256", "uint256", "address[]", "address", "uint256")
_EXACT_INPUT_SINGLE_PARAMS = "(address,address,uint24,address,uint256,uint256,uint256,uint160)"
_EXACT_ALL_INPUT_SINGLE_PARAMS = "(address,address,uint24,uint256,uint256,uint160)"
_EXACT_INPUT_PARAMS = "(bytes,address,uint256,uint256,uint256)"
_EXACT_ALL_INPUT_PARAMS = "(bytes,uint256,uint256)"

CALL_SHAPE_SPECS: Final[tuple[CallShapeSpec, ...]] = (
    CallShapeSpec(
        adapter=AdapterKind.V2_ROUTER,
        shape=CallShape.SWAP_EXACT_TOKENS_FOR_TOKENS,
        signature="swapExactTokensForTokens(uint256,uint256,address[],address,uint256)",
        abi_types=_V2_PATH_ARGS,
        decoder=_decode_swap_exact_tokens_for_tokens,
    ),
    CallShapeSpec(
        adapter=AdapterKind.V2_ROUTER,
        shape=CallShape.SWAP_ALL_TOKENS_FOR_TOKENS,
        signature="swapAllTokensForTokens(uint256,address[],uint256)",
        abi_types=("uint256", "address[]", "uint256"),
        decoder=_decode_swap_all_tokens_for_tokens,
    ),
    CallShapeSpec(
        adapter=AdapterKind.V3_ROUTER,
        shape=CallShape.EXACT_INPUT_SINGLE,
        signature=f"exactInputSingle({_EXACT_INPUT_SINGLE_PARAMS})",
        abi_types=(_EXACT_INPUT_SINGLE_PARAMS,),
        decoder=_decode_exact_input_single,
    ),
    CallShapeSpec(
        adapter=AdapterKind.V3_ROUTER,
        shape=CallShape.EXACT_ALL_INPUT_SINGLE,
        signature=f"exactAllInputSingle({_EXACT_ALL_INPUT_SINGLE_PARAMS})",
        abi_types=(_EXACT_ALL_INPUT_SINGLE_PARAMS,),
        decoder=_decode_exact_all_input_single,
    ),
    CallShapeSpec(
        adapter=AdapterKind.V3_ROUTER,
        shape=CallShape.EXACT_INPUT,
        signature=f"exactInput({_EXACT_INPUT_PARAMS})",
        abi_types=(_EXACT_INPUT_PARAMS,),
        decoder=_decode_exact_input,
    ),
    CallShapeSpec(
        adapter=AdapterKind.V3_ROUTER,
        shape=CallShape.EXACT_ALL_INPUT,
        signature=f"exactAllInput({_EXACT_ALL_INPUT_PARAMS})",
        abi_types=(_EXACT_ALL_INPUT_PARAMS,),
        decoder=_decode_exact_all_input,
    ),
    CallShapeSpec(
        adapter=AdapterKind.UNIVERSAL,
        shape=CallShape.WITHDRAW,
        signature="withdraw(address,address,uint256)",
        abi_types=("address", "address", "uint256"),
        decoder=_decode_withdraw,
    ),
)

# (adapter kind, selector) → shape
SHAPE_TABLE: Final[Dict[AdapterKind, Dict[bytes, CallShapeSpec]]] = {kind: {} for kind in AdapterKind}
for _spec in CALL_SHAPE_SPECS:
    SHAPE_TABLE[_spec.adapter][_spec.selector] = _spec


def shape_spec(adapter: AdapterKind, shape: CallShape) -> CallShapeSpec:
    """Поиск spec по (adapter, shape) — для кодирования вызовов."""
    for spec in CALL_SHAPE_SPECS:
        if spec.adapter == adapter and spec.shape == shape:
            return spec
    raise KeyError(f"{shape.value} is not a {adapter.value} call")


# =============================================================================
# DECODE
# =============================================================================


def decode_call(adapter: AdapterKind, call_data: bytes, index: int = -1) -> DecodedCall:
    """
    Классификация и строгое декодирование вызова.

    Args:
        adapter: категория target (уже прошедшего whitelist)
        call_data: selector + ABI аргументы
        index: позиция операции в batch (для сообщений об ошибках)

    Returns:
        DecodedCall

    Raises:
        InvalidCallMethod: selector не распознан для adapter
        MalformedCallData: selector распознан, payload некорректен
    """
    selector = bytes(call_data[:SELECTOR_SIZE])
    spec = SHAPE_TABLE[adapter].get(selector) if len(selector) == SELECTOR_SIZE else None
    if spec is None:
        raise InvalidCallMethod(
            f"call #{index}: selector 0x{selector.hex()} is not supported by {adapter.value}",
            index=index,
        )

    try:
        args = decode(list(spec.abi_types), bytes(call_data[SELECTOR_SIZE:]))
        return spec.decoder(args)
    except (DecodingError, ValueError, OverflowError) as e:
        raise MalformedCallData(
            f"call #{index}: malformed {spec.shape.value} payload: {e}",
            index=index,
        ) from e
