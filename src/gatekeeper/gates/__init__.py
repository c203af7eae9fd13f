"""Gates — последовательные проверки исполнения подписанного ордера.

- GATE 0: Подпись ордера + потребление nonce
- GATE 1: Валидация ордера, trigger, расчёт amount_to_sell / min_amount_out
- GATE 2: Аудит операций batch (whitelist target + таблица selector'ов)
- GATE 3: Построение balance invariant операции для facade
"""

from .gate_00_signature import Gate00Signature, Gate00Result, NoncePolicy
from .gate_01_order_validation import Gate01OrderValidation, Gate01Result, Gate01Config
from .gate_02_call_audit import Gate02CallAudit, Gate02Result
from .gate_03_balance_invariant import Gate03BalanceInvariant, Gate03Result

__all__ = [
    "Gate00Signature",
    "Gate00Result",
    "NoncePolicy",
    "Gate01OrderValidation",
    "Gate01Result",
    "Gate01Config",
    "Gate02CallAudit",
    "Gate02Result",
    "Gate03BalanceInvariant",
    "Gate03Result",
]
