"""Execution Orchestrator — исполнение подписанного ордера executor'ом

Композиция gates:
    GATE 0 (подпись/nonce) → GATE 1 (ордер) → GATE 2 (аудит calls) →
    GATE 3 (invariant) → submit batch → post-check → OrderExecuted

Batch, отправляемый в account system: [invariant операция, *calls executor].
Submit и post-check выполняются внутри atomic() account system: если
post-check не прошёл, batch откатывается целиком.

Любая ошибка терминальна: state machine переходит в REJECTED, ошибка
логируется с её tag и пробрасывается вызывающему без изменений.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence

from src.core.contracts.parsing import execution_request_from_dict
from src.core.domain.errors import InvalidAmountSold, InvalidSignature
from src.core.domain.operation import Operation
from src.core.domain.order import Order, Signature
from src.core.ports import CreditAccountSystem, PriceOracle, TokenMetadata
from src.core.signing.nonces import NonceRegistry
from src.core.signing.typed_data import ORDER_TYPEHASH
from src.execution.config import ExecutorConfig
from src.execution.state_machine import ExecutionState, ExecutionStateMachine, ExecutionTransition
from src.gatekeeper.gates import (
    Gate00Signature,
    Gate01Config,
    Gate01OrderValidation,
    Gate02CallAudit,
    Gate03BalanceInvariant,
)


logger = logging.getLogger(__name__)


# =============================================================================
# EVENTS / REPORT
# =============================================================================


@dataclass(frozen=True)
class OrderExecuted:
    """Событие успешного исполнения (для off-chain потребителей)."""

    borrower: str
    token_in: str
    token_out: str
    amount_sold: int


@dataclass(frozen=True)
class ExecutionReport:
    """Полный отчёт об успешном исполнении."""

    event: OrderExecuted
    nonce: int
    credit_account: str
    balance_before: int
    balance_after: int
    min_amount_out: int
    side_tokens: tuple[str, ...]
    batch: tuple[Operation, ...]
    transitions: tuple[ExecutionTransition, ...]


OrderExecutedListener = Callable[[OrderExecuted], None]


# =============================================================================
# EXECUTOR
# =============================================================================


class LimitOrderExecutor:
    """Исполнитель подписанных limit/stop ордеров.

    Единственное разделяемое мутабельное состояние — nonce registry.
    Два конкурентных исполнения одного и того же подписанного ордера
    разрешаются в пользу ровно одного: второй считает digest против
    следующего nonce и получает INVALID_SIGNATURE.
    """

    def __init__(
        self,
        config: ExecutorConfig,
        accounts: CreditAccountSystem,
        oracle: PriceOracle,
        tokens: TokenMetadata,
        nonces: NonceRegistry | None = None,
    ):
        """
        Args:
            config: конфигурация deployment
            accounts: внешняя account system
            oracle: price oracle (для trigger)
            tokens: token metadata (decimals)
            nonces: nonce registry (default: новый in-memory)
        """
        self.config = config
        self.accounts = accounts
        self.nonces = nonces or NonceRegistry()

        self.gate00 = Gate00Signature(self.nonces, config.domain, config.nonce_policy)
        self.gate01 = Gate01OrderValidation(
            accounts, oracle, tokens, Gate01Config(dust_floor=config.dust_floor)
        )
        self.gate02 = Gate02CallAudit(config.whitelist)
        self.gate03 = Gate03BalanceInvariant(accounts.facade)

        self._listeners: List[OrderExecutedListener] = []

    # -------------------------------------------------------------------------
    # Read-only queries
    # -------------------------------------------------------------------------

    @property
    def order_typehash(self) -> bytes:
        return ORDER_TYPEHASH

    @property
    def domain_separator(self) -> bytes:
        return self.config.domain.separator()

    def nonce_of(self, identity: str) -> int:
        return self.nonces.current(identity)

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def subscribe(self, listener: OrderExecutedListener) -> None:
        """Подписка на OrderExecuted (вызывается после commit batch, ошибки listener логируются)."""
        self._listeners.append(listener)

    def bump_nonce(self, caller: str) -> int:
        """Инвалидация всех ранее подписанных ордеров caller.

        Returns:
            Новый nonce caller
        """
        return self.nonces.bump(caller)

    def execute_request(self, payload: Dict[str, Any]) -> ExecutionReport:
        """Исполнение JSON submission (execution_request.json)."""
        request = execution_request_from_dict(payload)
        return self.execute_order(request.calls, request.order, request.signature)

    def execute_order(
        self,
        calls: Sequence[Operation],
        order: Order,
        signature: Signature,
    ) -> ExecutionReport:
        """Исполнение ордера batch'ем executor.

        Raises:
            OrderExecutionError: любая ошибка gates, post-check или account system
        """
        machine = ExecutionStateMachine()
        try:
            report = self._execute(machine, tuple(calls), order, signature)
        except Exception as e:
            tag = getattr(e, "tag", type(e).__name__)
            failed_at = machine.state
            if not machine.is_terminal:
                machine.reject(tag, str(e))
            logger.warning(
                "order rejected: borrower=%s state=%s tag=%s: %s",
                order.borrower,
                failed_at.value,
                tag,
                e,
            )
            raise

        # Ордер уже исполнен: ошибка listener не превращается в отказ
        for listener in self._listeners:
            try:
                listener(report.event)
            except Exception:
                logger.exception(
                    "OrderExecuted listener failed: borrower=%s listener=%r",
                    order.borrower,
                    listener,
                )
        return report

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _execute(
        self,
        machine: ExecutionStateMachine,
        calls: tuple[Operation, ...],
        order: Order,
        signature: Signature,
    ) -> ExecutionReport:
        # 1. Подпись
        signature_result = self.gate00.evaluate(order, signature)
        machine.advance(ExecutionState.SIGNATURE_VERIFIED, signature_result.details)

        # 2. Ордер
        validation = self.gate01.evaluate(order)
        machine.advance(ExecutionState.ORDER_VALIDATED, validation.details)

        # 3. Аудит calls
        audit = self.gate02.evaluate(calls, order.token_in)
        machine.advance(ExecutionState.CALLS_AUDITED, audit.details)

        # 4. Invariant в начало batch
        invariant = self.gate03.evaluate(
            audit.side_tokens, order.token_out, validation.min_amount_out
        )
        batch = (invariant.operation,) + calls
        machine.advance(ExecutionState.INVARIANT_INJECTED, invariant.details)

        # 5-6. Submit + post-check в одной атомарной границе
        with self.accounts.atomic():
            self.accounts.execute_batch(validation.credit_account, batch)
            machine.advance(ExecutionState.SUBMITTED, f"{len(batch)} operations")

            balance_after = self.accounts.balance_of(validation.credit_account, order.token_in)
            if balance_after + validation.amount_to_sell != validation.balance_before:
                raise InvalidAmountSold(
                    expected=validation.amount_to_sell,
                    actual=validation.balance_before - balance_after,
                )

            if not signature_result.nonce_consumed and not self.nonces.consume_if_current(
                order.borrower, signature_result.nonce
            ):
                raise InvalidSignature(
                    f"nonce {signature_result.nonce} of {order.borrower} was consumed concurrently"
                )
            machine.advance(ExecutionState.POST_CHECKED, f"balance after {balance_after}")

        event = OrderExecuted(
            borrower=order.borrower,
            token_in=order.token_in,
            token_out=order.token_out,
            amount_sold=validation.amount_to_sell,
        )
        machine.advance(ExecutionState.DONE)

        logger.info(
            "OrderExecuted: borrower=%s token_in=%s token_out=%s amount_sold=%d",
            event.borrower,
            event.token_in,
            event.token_out,
            event.amount_sold,
        )
        return ExecutionReport(
            event=event,
            nonce=signature_result.nonce,
            credit_account=validation.credit_account,
            balance_before=validation.balance_before,
            balance_after=balance_after,
            min_amount_out=validation.min_amount_out,
            side_tokens=audit.side_tokens,
            batch=batch,
            transitions=machine.history,
        )
