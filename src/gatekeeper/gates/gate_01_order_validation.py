"""GATE 1: Валидация ордера и расчёт объёма продажи

Проверяет ордер, прошедший GATE 0:
- Credit account borrower существует (ошибка account system пропагируется)
- Self-consistency: token_in != token_out, amount_in > 0
- Trigger: oracle цена одной единицы token_in в token_out <= trigger_price
- Баланс token_in > 1 (1 unit резервируется и никогда не продаётся)

Вычисляет:
- amount_to_sell = min(amount_in, balance - 1)
- min_amount_out = floor(amount_to_sell * min_price / ONE(token_in))

Ордер на сумму больше баланса не падает, а продаёт всё, что можно продать.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.core.domain.errors import InvalidOrder, NothingToSell, NotTriggered
from src.core.domain.order import Order
from src.core.math.fixed_point import mul_div_down, one_unit
from src.core.ports import CreditAccountSystem, PriceOracle, TokenMetadata


logger = logging.getLogger(__name__)


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class Gate01Result:
    """Результат GATE 1."""

    credit_account: str
    balance_before: int
    amount_to_sell: int
    min_amount_out: int

    # Диагностика
    oracle_price: Optional[int]  # None если trigger выключен
    capped: bool  # True если amount_in > balance - 1

    details: str


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class Gate01Config:
    """Конфигурация GATE 1."""

    # Остаток token_in, который никогда не продаётся
    dust_floor: int = 1


# =============================================================================
# GATE 1
# =============================================================================


class Gate01OrderValidation:
    """GATE 1: валидация ордера.

    Порядок проверок:
    1. Credit account (AccountNotFound от account system)
    2. Self-consistency ордера
    3. Trigger price (если включён)
    4. Баланс token_in
    """

    def __init__(
        self,
        accounts: CreditAccountSystem,
        oracle: PriceOracle,
        tokens: TokenMetadata,
        config: Gate01Config | None = None,
    ):
        self.accounts = accounts
        self.oracle = oracle
        self.tokens = tokens
        self.config = config or Gate01Config()

    def evaluate(self, order: Order) -> Gate01Result:
        """Оценка GATE 1.

        Raises:
            AccountNotFound: у borrower нет credit account
            InvalidOrder: token_in == token_out или amount_in == 0
            NotTriggered: oracle цена выше trigger_price
            NothingToSell: баланс token_in <= dust_floor
        """
        # 1. Credit account
        credit_account = self.accounts.get_credit_account(order.borrower)

        # 2. Self-consistency
        if order.token_in == order.token_out:
            raise InvalidOrder(f"token_in == token_out ({order.token_in})")
        if order.amount_in == 0:
            raise InvalidOrder("amount_in is zero")

        unit_in = one_unit(self.tokens.decimals(order.token_in))

        # 3. Trigger
        oracle_price = None
        if order.has_trigger:
            oracle_price = self.oracle.convert(unit_in, order.token_in, order.token_out)
            if oracle_price > order.trigger_price:
                raise NotTriggered(price=oracle_price, trigger_price=order.trigger_price)

        # 4. Баланс
        balance_before = self.accounts.balance_of(credit_account, order.token_in)
        if balance_before <= self.config.dust_floor:
            raise NothingToSell(
                f"balance of {order.token_in} is {balance_before} (floor {self.config.dust_floor})"
            )

        sellable = balance_before - self.config.dust_floor
        amount_to_sell = min(order.amount_in, sellable)
        min_amount_out = mul_div_down(amount_to_sell, order.min_price, unit_in)

        logger.debug(
            "gate01 pass: account=%s balance=%d amount_to_sell=%d min_amount_out=%d",
            credit_account,
            balance_before,
            amount_to_sell,
            min_amount_out,
        )
        return Gate01Result(
            credit_account=credit_account,
            balance_before=balance_before,
            amount_to_sell=amount_to_sell,
            min_amount_out=min_amount_out,
            oracle_price=oracle_price,
            capped=order.amount_in > sellable,
            details=(
                f"Order valid: sell {amount_to_sell} of {order.token_in} "
                f"(balance {balance_before}), min out {min_amount_out} {order.token_out}"
            ),
        )
