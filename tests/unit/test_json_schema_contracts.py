"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema контрактов:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей, типов, pattern/enum
- Межфайловые $ref (execution_request → order, signature)
- Разбор в Pydantic модели и загрузка конфигурации executor
"""

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    ExecutionRequestValidator,
    OrderContractValidator,
    SchemaLoader,
    SignatureContractValidator,
    execution_request_from_dict,
    order_from_dict,
    order_to_dict,
    signature_from_json,
    validate_executor_config,
    validate_order,
)
from src.execution.config import load_executor_config
from src.gatekeeper.gates.gate_00_signature import NoncePolicy
from tests.factories import (
    ONE,
    SUSHISWAP,
    TOKEN_X,
    TOKEN_Y,
    UNISWAP_V2,
    UNISWAP_V3,
    UNIVERSAL,
    VERIFYING_CONTRACT,
    v2_swap,
)


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_order(borrower):
    """Валидный order для тестирования."""
    return {
        "borrower": borrower,
        "tokenIn": TOKEN_X,
        "tokenOut": TOKEN_Y,
        "amountIn": str(50_000 * ONE),
        "minPrice": str(8 * ONE // 10),
        "triggerPrice": "0",
    }


@pytest.fixture
def valid_config():
    return {
        "chain_id": 1,
        "verifying_contract": VERIFYING_CONTRACT,
        "adapters": {
            "uniswap_v2": UNISWAP_V2,
            "sushiswap": SUSHISWAP,
            "uniswap_v3": UNISWAP_V3,
            "universal": UNIVERSAL,
        },
    }


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    @pytest.mark.parametrize("name", ["order", "signature", "execution_request", "executor_config"])
    def test_schemas_load(self, name):
        schema = SchemaLoader().load_schema(name)

        assert schema["$schema"].endswith("2020-12/schema")
        assert schema["$id"].endswith(f"/{name}.json")

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("position")


# =============================================================================
# ORDER
# =============================================================================


class TestOrderContract:
    def test_valid(self, valid_order):
        validate_order(valid_order)

    def test_integer_amounts_accepted(self, valid_order):
        valid_order["amountIn"] = 5
        assert OrderContractValidator().is_valid(valid_order)

    def test_trigger_optional(self, valid_order):
        del valid_order["triggerPrice"]
        assert order_from_dict(valid_order).trigger_price == 0

    @pytest.mark.parametrize("field", ["borrower", "tokenIn", "tokenOut", "amountIn", "minPrice"])
    def test_required(self, valid_order, field):
        del valid_order[field]
        with pytest.raises(ValidationError):
            validate_order(valid_order)

    @pytest.mark.parametrize("value", ["-1", "1.5", "01", "0x10", -1, 1.5])
    def test_bad_uint256(self, valid_order, value):
        valid_order["amountIn"] = value
        assert not OrderContractValidator().is_valid(valid_order)

    def test_bad_address(self, valid_order):
        valid_order["tokenIn"] = "0x1234"
        with pytest.raises(ValidationError):
            validate_order(valid_order)

    def test_unknown_field(self, valid_order):
        valid_order["nonce"] = "0"
        with pytest.raises(ValidationError):
            validate_order(valid_order)

    def test_to_pydantic(self, valid_order, borrower):
        order = order_from_dict(valid_order)

        assert order.borrower == borrower
        assert order.amount_in == 50_000 * ONE
        assert order_to_dict(order) == valid_order


# =============================================================================
# SIGNATURE
# =============================================================================


class TestSignatureContract:
    def test_hex_form(self, make_order, sign):
        signature = sign(make_order())
        data = "0x" + signature.to_bytes().hex()

        assert signature_from_json(data) == signature

    def test_component_form(self):
        data = {"v": 27, "r": "0x" + "00" * 31 + "05", "s": 6}

        signature = signature_from_json(data)

        assert (signature.v, signature.r, signature.s) == (27, 5, 6)

    @pytest.mark.parametrize(
        "data",
        [
            "0x" + "00" * 64,
            {"v": 29, "r": 1, "s": 1},
            {"v": 27, "r": 1},
            12345,
        ],
    )
    def test_invalid(self, data):
        assert not SignatureContractValidator().is_valid(data)


# =============================================================================
# EXECUTION REQUEST
# =============================================================================


class TestExecutionRequestContract:
    def test_cross_file_refs(self, valid_order, make_order, sign):
        call = v2_swap(ONE, [TOKEN_X, TOKEN_Y], UNISWAP_V2)
        payload = {
            "calls": [{"target": call.target, "callData": "0x" + call.call_data.hex()}],
            "order": valid_order,
            "signature": "0x" + sign(make_order()).to_bytes().hex(),
        }

        request = execution_request_from_dict(payload)

        assert request.calls == (call,)
        assert request.order.amount_in == 50_000 * ONE

    def test_invalid_nested_order(self, valid_order):
        del valid_order["minPrice"]
        payload = {"calls": [], "order": valid_order, "signature": "0x" + "11" * 65}

        assert not ExecutionRequestValidator().is_valid(payload)

    def test_odd_length_call_data(self, valid_order):
        payload = {
            "calls": [{"target": UNISWAP_V2, "callData": "0x123"}],
            "order": valid_order,
            "signature": "0x" + "11" * 65,
        }

        with pytest.raises(ValidationError):
            execution_request_from_dict(payload)


# =============================================================================
# EXECUTOR CONFIG
# =============================================================================


class TestExecutorConfigContract:
    def test_defaults(self, valid_config):
        config = load_executor_config(valid_config)

        assert config.domain.name == "LimitOrderBot"
        assert config.domain.version == "1"
        assert config.nonce_policy == NoncePolicy.CONSUME_ON_ATTEMPT
        assert config.dust_floor == 1
        assert config.whitelist.uniswap_v3 == UNISWAP_V3

    def test_overrides(self, valid_config):
        valid_config.update(
            {"name": "Custom", "version": "2", "nonce_policy": "CONSUME_ON_SUCCESS", "dust_floor": 10}
        )

        config = load_executor_config(valid_config)

        assert config.domain.name == "Custom"
        assert config.nonce_policy == NoncePolicy.CONSUME_ON_SUCCESS
        assert config.dust_floor == 10

    def test_missing_adapter(self, valid_config):
        del valid_config["adapters"]["universal"]
        with pytest.raises(ValidationError):
            validate_executor_config(valid_config)

    def test_bad_policy(self, valid_config):
        valid_config["nonce_policy"] = "NEVER"
        with pytest.raises(ValidationError):
            load_executor_config(valid_config)

    def test_zero_dust_floor(self, valid_config):
        valid_config["dust_floor"] = 0
        with pytest.raises(ValidationError):
            load_executor_config(valid_config)
