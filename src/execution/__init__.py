"""Execution — оркестрация исполнения подписанных ордеров.

- State machine: START → ... → DONE / REJECTED
- LimitOrderExecutor: gates 0-3, submit, post-check, OrderExecuted
"""

from .config import ExecutorConfig, load_executor_config
from .orchestrator import ExecutionReport, LimitOrderExecutor, OrderExecuted
from .state_machine import (
    ExecutionState,
    ExecutionStateMachine,
    ExecutionTransition,
    IllegalStateTransition,
)

__all__ = [
    "ExecutorConfig",
    "load_executor_config",
    "LimitOrderExecutor",
    "ExecutionReport",
    "OrderExecuted",
    "ExecutionState",
    "ExecutionStateMachine",
    "ExecutionTransition",
    "IllegalStateTransition",
]
