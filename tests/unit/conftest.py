"""Общие fixtures: подписант, oracle, credit account system, executor."""

import pytest
from eth_account import Account

from src.core.calls.call_shapes import AdapterKind
from src.core.calls.whitelist import AdapterWhitelist
from src.core.domain.address import normalize_address
from src.core.domain.order import Order
from src.core.signing.nonces import NonceRegistry
from src.core.signing.typed_data import SigningDomain, sign_order
from src.execution.config import ExecutorConfig
from src.execution.orchestrator import LimitOrderExecutor
from src.simulation import (
    InMemoryCreditAccountSystem,
    SimulatedSwapRouter,
    SimulatedUniversalAdapter,
    StaticPriceOracle,
)
from tests.factories import (
    BORROWER_KEY,
    CHAIN_ID,
    FACADE,
    ONE,
    STRANGER_KEY,
    SUSHISWAP,
    TOKEN_X,
    TOKEN_Y,
    TOKEN_Z,
    UNISWAP_V2,
    UNISWAP_V3,
    UNIVERSAL,
    USD,
    VERIFYING_CONTRACT,
)


@pytest.fixture
def borrower_account():
    return Account.from_key(BORROWER_KEY)


@pytest.fixture
def borrower(borrower_account):
    return normalize_address(borrower_account.address)


@pytest.fixture
def stranger_account():
    return Account.from_key(STRANGER_KEY)


@pytest.fixture
def domain():
    return SigningDomain(chain_id=CHAIN_ID, verifying_contract=VERIFYING_CONTRACT)


@pytest.fixture
def whitelist():
    return AdapterWhitelist(
        uniswap_v2=UNISWAP_V2,
        sushiswap=SUSHISWAP,
        uniswap_v3=UNISWAP_V3,
        universal=UNIVERSAL,
    )


@pytest.fixture
def oracle():
    oracle = StaticPriceOracle()
    oracle.add_token(TOKEN_X, decimals=18, price_usd=1 * USD)
    oracle.add_token(TOKEN_Y, decimals=18, price_usd=1 * USD)
    oracle.add_token(TOKEN_Z, decimals=18, price_usd=1 * USD)
    return oracle


@pytest.fixture
def accounts(oracle):
    system = InMemoryCreditAccountSystem(facade=FACADE)
    system.register_adapter(UNISWAP_V2, SimulatedSwapRouter(AdapterKind.V2_ROUTER, oracle))
    system.register_adapter(SUSHISWAP, SimulatedSwapRouter(AdapterKind.V2_ROUTER, oracle))
    system.register_adapter(UNISWAP_V3, SimulatedSwapRouter(AdapterKind.V3_ROUTER, oracle))
    system.register_adapter(UNIVERSAL, SimulatedUniversalAdapter())
    return system


@pytest.fixture
def credit_account(accounts, borrower):
    return accounts.open_account(borrower)


@pytest.fixture
def nonces():
    return NonceRegistry()


@pytest.fixture
def config(domain, whitelist):
    return ExecutorConfig(domain=domain, whitelist=whitelist)


@pytest.fixture
def executor(config, accounts, oracle, nonces):
    return LimitOrderExecutor(config, accounts, oracle, oracle, nonces=nonces)


@pytest.fixture
def make_order(borrower):
    """Фабрика ордеров X → Y с minPrice = 0.8 * oracle."""

    def _make(amount_in=50_000 * ONE, **overrides):
        fields = {
            "borrower": borrower,
            "token_in": TOKEN_X,
            "token_out": TOKEN_Y,
            "amount_in": amount_in,
            "min_price": 8 * ONE // 10,
            "trigger_price": 0,
        }
        fields.update(overrides)
        return Order(**fields)

    return _make


@pytest.fixture
def sign(domain, borrower_account):
    """Подпись ордера ключом borrower (по умолчанию против nonce 0)."""

    def _sign(order, nonce=0, key=None, signing_domain=None):
        return sign_order(order, nonce, signing_domain or domain, key or borrower_account.key)

    return _sign
