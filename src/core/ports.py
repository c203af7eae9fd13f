"""
Ports — интерфейсы внешних систем

Движок не владеет состоянием аккаунтов, ценами и адаптерами: он только
читает их через эти протоколы. Реализации in-memory — в src/simulation.
"""

from contextlib import AbstractContextManager
from typing import Protocol, Sequence

from src.core.domain.operation import Operation


class CreditAccountSystem(Protocol):
    """
    Внешняя account system (ledger кредитных аккаунтов).

    Гарантии, на которые опирается движок:
    - execute_batch исполняет все операции атомарно (всё или ничего)
    - balance assertions, закодированные операцией на facade, проверяются
      после batch и откатывают его при нарушении
    - atomic() откатывает все изменения, сделанные внутри блока, если
      блок завершился исключением
    """

    @property
    def facade(self) -> str:
        """Адрес facade, который исполняет balance assertions."""
        ...

    def get_credit_account(self, borrower: str) -> str:
        """Credit account borrower. Raises AccountNotFound."""
        ...

    def balance_of(self, credit_account: str, token: str) -> int:
        ...

    def execute_batch(self, credit_account: str, operations: Sequence[Operation]) -> None:
        ...

    def atomic(self) -> AbstractContextManager:
        ...


class PriceOracle(Protocol):
    """Oracle для конверсии сумм между токенами."""

    def convert(self, amount: int, token_from: str, token_to: str) -> int:
        """amount token_from, выраженный в base units token_to."""
        ...


class TokenMetadata(Protocol):
    def decimals(self, token: str) -> int:
        ...
