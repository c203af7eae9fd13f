"""
Contract Validation Module

Модуль для валидации и разбора JSON контрактов (ордер, подпись,
submission executor, конфигурация deployment).
"""

from .parsing import (
    ExecutionRequest,
    execution_request_from_dict,
    order_from_dict,
    order_to_dict,
    signature_from_json,
)
from .validators import (
    ContractValidator,
    ExecutionRequestValidator,
    ExecutorConfigValidator,
    OrderContractValidator,
    SchemaLoader,
    SignatureContractValidator,
    validate_execution_request,
    validate_executor_config,
    validate_order,
    validate_signature,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "OrderContractValidator",
    "SignatureContractValidator",
    "ExecutionRequestValidator",
    "ExecutorConfigValidator",
    # Functions
    "validate_order",
    "validate_signature",
    "validate_execution_request",
    "validate_executor_config",
    # Parsing
    "ExecutionRequest",
    "order_from_dict",
    "order_to_dict",
    "signature_from_json",
    "execution_request_from_dict",
]
