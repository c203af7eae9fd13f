"""Gatekeeper — цепочка gates между недоверенным executor и credit account.

- 4 gates с фиксированным порядком
- Любой отказ терминален (ошибка с tag), частичных эффектов нет
"""

from .gates import (
    Gate00Signature,
    Gate01OrderValidation,
    Gate02CallAudit,
    Gate03BalanceInvariant,
    NoncePolicy,
)

__all__ = [
    "Gate00Signature",
    "Gate01OrderValidation",
    "Gate02CallAudit",
    "Gate03BalanceInvariant",
    "NoncePolicy",
]
