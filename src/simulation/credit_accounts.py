"""
In-Memory Credit Account System — reference реализация account system

Реализует CreditAccountSystem для тестов и dry-run batch:
- credit account на borrower, балансы токенов в base units
- execute_batch: операции по порядку; target == facade исполняет
  balance assertions, остальные target — зарегистрированные симуляторы
- atomic(): two-phase apply → verify → commit; при исключении внутри
  блока все балансы восстанавливаются из snapshot
- atomic() блоки сериализованы (RLock): откат одного исполнения не может
  стереть commit другого

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Batch применяется целиком или не применяется вообще
2. Assertions проверяются после последней операции batch
3. Баланс никогда не становится отрицательным
"""

import copy
import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Sequence

from eth_utils import keccak, to_checksum_address

from src.core.calls.facade import decode_balance_assertions, is_balance_assertion_call
from src.core.domain.address import normalize_address
from src.core.domain.errors import (
    AccountNotFound,
    BalanceAssertionFailed,
    InsufficientBalance,
    UnknownAdapterCall,
)
from src.core.domain.operation import BalanceAssertion, Operation
from src.simulation.adapters import AdapterSimulator


logger = logging.getLogger(__name__)


Balances = Dict[str, Dict[str, int]]


class InMemoryCreditAccountSystem:
    """Account system с atomic batch и balance assertions."""

    def __init__(self, facade: str):
        """
        Args:
            facade: адрес facade (target invariant операций)
        """
        self._facade = normalize_address(facade)
        self._accounts: Dict[str, str] = {}
        self._balances: Balances = {}
        self._external: Balances = {}
        self._adapters: Dict[str, AdapterSimulator] = {}
        # Reentrant: execute_batch открывает atomic() внутри atomic() orchestrator
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    @property
    def facade(self) -> str:
        return self._facade

    def register_adapter(self, target: str, simulator: AdapterSimulator) -> None:
        self._adapters[normalize_address(target)] = simulator

    def open_account(self, borrower: str) -> str:
        """Открытие credit account (детерминированный адрес от borrower)."""
        borrower = normalize_address(borrower)
        account = to_checksum_address(keccak(text=f"credit-account:{borrower}")[-20:])
        with self._lock:
            if borrower in self._accounts:
                raise ValueError(f"{borrower} already has a credit account")
            self._accounts[borrower] = account
            self._balances[account] = {}
        return account

    def fund(self, credit_account: str, token: str, amount: int) -> None:
        self.credit(credit_account, token, amount)

    # -------------------------------------------------------------------------
    # CreditAccountSystem
    # -------------------------------------------------------------------------

    def get_credit_account(self, borrower: str) -> str:
        borrower = normalize_address(borrower)
        if borrower not in self._accounts:
            raise AccountNotFound(f"{borrower} has no credit account")
        return self._accounts[borrower]

    def balance_of(self, credit_account: str, token: str) -> int:
        return self._balances[normalize_address(credit_account)].get(normalize_address(token), 0)

    def external_balance_of(self, holder: str, token: str) -> int:
        return self._external.get(normalize_address(holder), {}).get(normalize_address(token), 0)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            snapshot = self._snapshot()
            try:
                yield
            except BaseException:
                self._restore(snapshot)
                raise

    def execute_batch(self, credit_account: str, operations: Sequence[Operation]) -> None:
        """Исполнение batch целиком или откат.

        Raises:
            UnknownAdapterCall: target не facade и не зарегистрированный адаптер
            BalanceAssertionFailed: assertion нарушен после batch
            InsufficientBalance: операция тратит больше баланса
        """
        credit_account = normalize_address(credit_account)
        with self.atomic():
            checks: List[tuple[BalanceAssertion, int]] = []

            for index, operation in enumerate(operations):
                if operation.target == self._facade:
                    if not is_balance_assertion_call(operation.call_data):
                        raise UnknownAdapterCall(f"call #{index}: unsupported facade method")
                    for assertion in decode_balance_assertions(operation.call_data):
                        checks.append((assertion, self.balance_of(credit_account, assertion.token)))
                    continue

                simulator = self._adapters.get(operation.target)
                if simulator is None:
                    raise UnknownAdapterCall(f"call #{index}: no adapter at {operation.target}")
                simulator.execute(self, credit_account, operation.call_data, index)

            for assertion, captured in checks:
                required = captured + assertion.minimum_balance
                actual = self.balance_of(credit_account, assertion.token)
                if actual < required:
                    raise BalanceAssertionFailed(token=assertion.token, expected=required, actual=actual)

            logger.debug("batch executed: account=%s operations=%d", credit_account, len(operations))

    # -------------------------------------------------------------------------
    # Balance mutations (используются симуляторами адаптеров)
    # -------------------------------------------------------------------------

    def debit(self, credit_account: str, token: str, amount: int) -> None:
        token = normalize_address(token)
        with self._lock:
            account_balances = self._balances[normalize_address(credit_account)]
            available = account_balances.get(token, 0)
            if amount > available:
                raise InsufficientBalance(token=token, required=amount, available=available)
            account_balances[token] = available - amount

    def credit(self, credit_account: str, token: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"amount must be non-negative, got {amount}")
        token = normalize_address(token)
        with self._lock:
            account_balances = self._balances[normalize_address(credit_account)]
            account_balances[token] = account_balances.get(token, 0) + amount

    def credit_external(self, holder: str, token: str, amount: int) -> None:
        token = normalize_address(token)
        with self._lock:
            holder_balances = self._external.setdefault(normalize_address(holder), {})
            holder_balances[token] = holder_balances.get(token, 0) + amount

    def _snapshot(self) -> tuple[Balances, Balances]:
        return copy.deepcopy(self._balances), copy.deepcopy(self._external)

    def _restore(self, snapshot: tuple[Balances, Balances]) -> None:
        self._balances, self._external = snapshot
