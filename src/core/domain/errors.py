"""
Errors — типизированные ошибки исполнения ордера

Каждая ошибка несёт стабильный tag, чтобы off-chain tooling мог отличить
"плохую подпись" от "рынок ушёл" и от "плохого batch".

Любая ошибка терминальна для вызова: ничего не ретраится внутри движка,
частичных эффектов нет (атомарность обеспечивает account system).
"""

from typing import ClassVar


# =============================================================================
# BASE
# =============================================================================


class OrderExecutionError(Exception):
    """Базовая ошибка исполнения подписанного ордера."""

    tag: ClassVar[str] = "ORDER_EXECUTION_ERROR"

    def __init__(self, message: str = ""):
        super().__init__(message or self.tag)
        self.message = message or self.tag

    def __str__(self) -> str:
        return f"{self.tag}: {self.message}"


# =============================================================================
# SIGNATURE / ORDER
# =============================================================================


class InvalidSignature(OrderExecutionError):
    """Восстановленный signer != order.borrower (чужой ключ, stale nonce, другой domain, подмена полей)."""

    tag = "INVALID_SIGNATURE"


class InvalidOrder(OrderExecutionError):
    """token_in == token_out или amount_in == 0."""

    tag = "INVALID_ORDER"


class NotTriggered(OrderExecutionError):
    """Цена oracle ещё не опустилась до trigger_price."""

    tag = "NOT_TRIGGERED"

    def __init__(self, price: int, trigger_price: int):
        super().__init__(f"price {price} > trigger_price {trigger_price}")
        self.price = price
        self.trigger_price = trigger_price


class NothingToSell(OrderExecutionError):
    """Баланс token_in на аккаунте <= 1 (1 unit всегда остаётся на аккаунте)."""

    tag = "NOTHING_TO_SELL"


# =============================================================================
# CALL AUDIT
# =============================================================================


class InvalidCallTarget(OrderExecutionError):
    """Target операции не входит в whitelist адаптеров."""

    tag = "INVALID_CALL_TARGET"

    def __init__(self, target: str, index: int):
        super().__init__(f"call #{index}: target {target} is not whitelisted")
        self.target = target
        self.index = index


class InvalidCallMethod(OrderExecutionError):
    """Selector операции не распознан для её target."""

    tag = "INVALID_CALL_METHOD"

    def __init__(self, message: str, index: int = -1):
        super().__init__(message)
        self.index = index


class MalformedCallData(InvalidCallMethod):
    """Selector распознан, но payload обрезан или не декодируется строго."""

    tag = "MALFORMED_CALL_DATA"


# =============================================================================
# POST-CHECK
# =============================================================================


class InvalidAmountSold(OrderExecutionError):
    """Фактическое уменьшение баланса token_in != вычисленного amount_to_sell."""

    tag = "INVALID_AMOUNT_SOLD"

    def __init__(self, expected: int, actual: int):
        super().__init__(f"expected to sell {expected}, sold {actual}")
        self.expected = expected
        self.actual = actual


# =============================================================================
# COLLABORATORS
# =============================================================================


class CollaboratorError(OrderExecutionError):
    """Ошибка внешней системы (account system, adapters), пропагируется как abort."""

    tag = "COLLABORATOR_ERROR"


class AccountNotFound(CollaboratorError):
    """У borrower нет credit account."""

    tag = "ACCOUNT_NOT_FOUND"


class BalanceAssertionFailed(CollaboratorError):
    """Баланс side asset уменьшился или token_out получен меньше минимума."""

    tag = "BALANCE_ASSERTION_FAILED"

    def __init__(self, token: str, expected: int, actual: int):
        super().__init__(f"balance of {token}: expected >= {expected}, got {actual}")
        self.token = token
        self.expected = expected
        self.actual = actual


class UnknownAdapterCall(CollaboratorError):
    """Account system не умеет исполнить операцию для данного target."""

    tag = "UNKNOWN_ADAPTER_CALL"


class InsufficientBalance(CollaboratorError):
    """Операция пытается потратить больше, чем есть на аккаунте."""

    tag = "INSUFFICIENT_BALANCE"

    def __init__(self, token: str, required: int, available: int):
        super().__init__(f"{token}: required {required}, available {available}")
        self.token = token
        self.required = required
        self.available = available
