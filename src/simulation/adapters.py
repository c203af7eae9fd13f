"""
Adapter Simulators — in-memory исполнение вызовов адаптеров

Симуляторы декодируют call data теми же strict decoders, что и GATE 2,
и двигают балансы credit account по ценам oracle за вычетом комиссии.

- Swap: вход списывается с аккаунта, выход зачисляется на аккаунт
  (адаптеры всегда работают от имени credit account)
- Exact all input: тратится весь баланс, кроме 1 unit
- Withdraw: токен уходит с аккаунта на внешний адрес получателя
"""

from typing import TYPE_CHECKING, Final, Protocol

from src.core.calls.call_shapes import AdapterKind, DecodedCall, decode_call
from src.core.domain.errors import CollaboratorError
from src.simulation.price_oracle import StaticPriceOracle

if TYPE_CHECKING:
    from src.simulation.credit_accounts import InMemoryCreditAccountSystem


BPS: Final[int] = 10_000


class AdapterSimulator(Protocol):
    def execute(
        self,
        ledger: "InMemoryCreditAccountSystem",
        credit_account: str,
        call_data: bytes,
        index: int,
    ) -> DecodedCall:
        ...


class SimulatedSwapRouter:
    """V2 или V3 router: swap по маршруту через oracle цены."""

    def __init__(self, kind: AdapterKind, oracle: StaticPriceOracle, fee_bps: int = 30):
        if kind == AdapterKind.UNIVERSAL:
            raise ValueError("universal adapter is not a swap router")
        if not 0 <= fee_bps < BPS:
            raise ValueError(f"fee_bps must be in [0, {BPS}), got {fee_bps}")
        self.kind = kind
        self.oracle = oracle
        self.fee_bps = fee_bps

    def quote(self, route: tuple[str, ...], amount_in: int) -> int:
        """Выход после всех hops (комиссия на каждом hop)."""
        amount = amount_in
        for token_from, token_to in zip(route, route[1:]):
            amount = self.oracle.convert(amount, token_from, token_to) * (BPS - self.fee_bps) // BPS
        return amount

    def execute(self, ledger, credit_account, call_data, index):
        decoded = decode_call(self.kind, call_data, index=index)

        if decoded.spends_whole_balance:
            amount_in = max(ledger.balance_of(credit_account, decoded.spent_token) - 1, 0)
        else:
            amount_in = decoded.amount_in

        amount_out = self.quote(decoded.route, amount_in)
        if decoded.amount_out_min is not None and amount_out < decoded.amount_out_min:
            raise CollaboratorError(
                f"call #{index}: amount out {amount_out} < amountOutMin {decoded.amount_out_min}"
            )

        ledger.debit(credit_account, decoded.spent_token, amount_in)
        ledger.credit(credit_account, decoded.output_token, amount_out)
        return decoded


class SimulatedUniversalAdapter:
    """Universal adapter: withdraw на внешний адрес (bounty executor)."""

    def execute(self, ledger, credit_account, call_data, index):
        decoded = decode_call(AdapterKind.UNIVERSAL, call_data, index=index)
        ledger.debit(credit_account, decoded.spent_token, decoded.amount_in)
        ledger.credit_external(decoded.recipient, decoded.spent_token, decoded.amount_in)
        return decoded
