"""GATE 3: Построение balance invariant операции

Из side assets (GATE 2) и min_amount_out (GATE 1) строит одну операцию
на facade account system:
- каждый side asset: minimum_balance = 0 (никакого net spend)
- token_out: minimum_balance = min_amount_out

Операция вставляется в начало batch, чтобы точка фиксации балансов
была "до batch". Это единственный механизм, который не даёт executor
слить токены, не авторизованные ордером, и единственный механизм,
обеспечивающий минимальную цену подписанта.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from src.core.calls.facade import encode_balance_assertions
from src.core.domain.operation import BalanceAssertion, Operation


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Gate03Result:
    """Результат GATE 3."""

    assertions: tuple[BalanceAssertion, ...]
    operation: Operation
    details: str


class Gate03BalanceInvariant:
    """GATE 3: invariant операция для facade."""

    def __init__(self, facade: str):
        """
        Args:
            facade: адрес facade account system (target invariant операции)
        """
        self.facade = facade

    def evaluate(
        self,
        side_tokens: Sequence[str],
        token_out: str,
        min_amount_out: int,
    ) -> Gate03Result:
        """Оценка GATE 3: invariant операция для начала batch.

        Args:
            side_tokens: side assets из GATE 2 (без token_in)
            token_out: покупаемый токен ордера
            min_amount_out: минимальный прирост token_out из GATE 1

        Returns:
            Gate03Result с операцией revertIfReceivedLessThan на facade
        """
        # 1. Side assets: никакого net spend
        assertions = [BalanceAssertion(token=token, minimum_balance=0) for token in side_tokens]

        # 2. token_out последним: минимальная цена подписанта
        assertions.append(BalanceAssertion(token=token_out, minimum_balance=min_amount_out))

        # 3. Одна операция на facade
        operation = Operation(target=self.facade, call_data=encode_balance_assertions(assertions))

        logger.debug("gate03: %d balance assertions", len(assertions))
        return Gate03Result(
            assertions=tuple(assertions),
            operation=operation,
            details=(
                f"Invariant: {len(side_tokens)} side tokens >= 0, "
                f"{token_out} >= {min_amount_out}"
            ),
        )
