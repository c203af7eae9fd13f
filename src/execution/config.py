"""Executor Config — конфигурация deployment

Конфигурация задаётся frozen dataclass (как конфиги gates) и может быть
загружена из JSON, прошедшего валидацию executor_config.json.
"""

from dataclasses import dataclass
from typing import Any, Dict

from src.core.calls.whitelist import AdapterWhitelist
from src.core.contracts.validators import validate_executor_config
from src.core.signing.typed_data import SigningDomain
from src.gatekeeper.gates.gate_00_signature import NoncePolicy


@dataclass(frozen=True)
class ExecutorConfig:
    """Конфигурация LimitOrderExecutor."""

    domain: SigningDomain
    whitelist: AdapterWhitelist
    nonce_policy: NoncePolicy = NoncePolicy.CONSUME_ON_ATTEMPT

    # Остаток token_in, который никогда не продаётся
    dust_floor: int = 1

    def __post_init__(self):
        if self.dust_floor < 1:
            raise ValueError(f"dust_floor must be >= 1, got {self.dust_floor}")


def load_executor_config(data: Dict[str, Any]) -> ExecutorConfig:
    """
    Сборка ExecutorConfig из JSON.

    Raises:
        jsonschema.ValidationError: данные не соответствуют executor_config.json
    """
    validate_executor_config(data)

    domain_kwargs = {}
    if "name" in data:
        domain_kwargs["name"] = data["name"]
    if "version" in data:
        domain_kwargs["version"] = data["version"]

    adapters = data["adapters"]
    return ExecutorConfig(
        domain=SigningDomain(
            chain_id=data["chain_id"],
            verifying_contract=data["verifying_contract"],
            **domain_kwargs,
        ),
        whitelist=AdapterWhitelist(
            uniswap_v2=adapters["uniswap_v2"],
            sushiswap=adapters["sushiswap"],
            uniswap_v3=adapters["uniswap_v3"],
            universal=adapters["universal"],
        ),
        nonce_policy=NoncePolicy(data.get("nonce_policy", NoncePolicy.CONSUME_ON_ATTEMPT.value)),
        dust_floor=data.get("dust_floor", 1),
    )
