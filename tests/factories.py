"""Константы тестового мира и builders операций batch.

Мир тестов:
- X, Y, Z — 18 decimals, цена 1 USD каждый (oracle 1 X = 1 Y)
- Swap роутеры берут 0.3% комиссии
- minPrice по умолчанию = 0.8 * oracle
"""

from src.core.calls.call_shapes import AdapterKind, CallShape, encode_v3_path, shape_spec
from src.core.domain.address import normalize_address
from src.core.domain.operation import Operation


# =============================================================================
# CONSTANTS
# =============================================================================

ONE = 10**18
USD = 10**8
DEADLINE = 2**32

BORROWER_KEY = "0x" + "11" * 32
STRANGER_KEY = "0x" + "22" * 32

TOKEN_X = normalize_address("0x" + "a1" * 20)
TOKEN_Y = normalize_address("0x" + "b2" * 20)
TOKEN_Z = normalize_address("0x" + "c3" * 20)
TOKEN_UNLISTED = normalize_address("0x" + "d4" * 20)

FACADE = normalize_address("0x" + "f0" * 20)
UNISWAP_V2 = normalize_address("0x" + "01" * 20)
SUSHISWAP = normalize_address("0x" + "02" * 20)
UNISWAP_V3 = normalize_address("0x" + "03" * 20)
UNIVERSAL = normalize_address("0x" + "04" * 20)
EXECUTOR_WALLET = normalize_address("0x" + "e5" * 20)
VERIFYING_CONTRACT = normalize_address("0x" + "0b" * 20)

CHAIN_ID = 1


# =============================================================================
# CALL BUILDERS
# =============================================================================


def v2_swap(amount_in, path, to, amount_out_min=0, target=UNISWAP_V2):
    spec = shape_spec(AdapterKind.V2_ROUTER, CallShape.SWAP_EXACT_TOKENS_FOR_TOKENS)
    return Operation(
        target=target,
        call_data=spec.encode(amount_in, amount_out_min, list(path), to, DEADLINE),
    )


def v2_swap_all(path, rate_min_ray=0, target=UNISWAP_V2):
    spec = shape_spec(AdapterKind.V2_ROUTER, CallShape.SWAP_ALL_TOKENS_FOR_TOKENS)
    return Operation(target=target, call_data=spec.encode(rate_min_ray, list(path), DEADLINE))


def v3_exact_input_single(token_in, token_out, amount_in, recipient, fee=3000):
    spec = shape_spec(AdapterKind.V3_ROUTER, CallShape.EXACT_INPUT_SINGLE)
    params = (token_in, token_out, fee, recipient, DEADLINE, amount_in, 0, 0)
    return Operation(target=UNISWAP_V3, call_data=spec.encode(params))


def v3_exact_all_input(tokens, fees):
    spec = shape_spec(AdapterKind.V3_ROUTER, CallShape.EXACT_ALL_INPUT)
    params = (encode_v3_path(tokens, fees), DEADLINE, 0)
    return Operation(target=UNISWAP_V3, call_data=spec.encode(params))


def withdraw(token, to, amount):
    spec = shape_spec(AdapterKind.UNIVERSAL, CallShape.WITHDRAW)
    return Operation(target=UNIVERSAL, call_data=spec.encode(token, to, amount))
