"""GATE 0: Проверка подписи ордера и потребление nonce

Первый gate в цепочке:
- Вычисляет EIP-712 digest для (order, nonce) в domain текущего deployment
- Восстанавливает подписанта и сравнивает с order.borrower
- Потребляет nonce borrower

Политика nonce (NoncePolicy):
- CONSUME_ON_ATTEMPT: nonce потребляется до проверки, даже если подпись
  или последующие проверки не прошли. Проваленная попытка всё равно
  инвалидирует это значение nonce.
- CONSUME_ON_SUCCESS: gate только читает текущий nonce, потребление
  откладывается до конца pipeline (compare-and-increment в orchestrator).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Final

from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeyValidationError

from src.core.domain.errors import InvalidSignature
from src.core.domain.order import Order, Signature
from src.core.signing.nonces import NonceRegistry
from src.core.signing.typed_data import SigningDomain, order_digest, recover_signer


logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Порядок группы secp256k1
SECP256K1_N: Final[int] = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# EIP-2: s в верхней половине отклоняется (malleability)
SECP256K1_HALF_N: Final[int] = SECP256K1_N // 2


class NoncePolicy(str, Enum):
    """Момент потребления nonce."""

    CONSUME_ON_ATTEMPT = "CONSUME_ON_ATTEMPT"
    CONSUME_ON_SUCCESS = "CONSUME_ON_SUCCESS"


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class Gate00Result:
    """Результат GATE 0."""

    signer: str
    nonce: int
    digest: bytes

    # True если nonce уже потреблён этим gate
    nonce_consumed: bool

    details: str


# =============================================================================
# GATE 0
# =============================================================================


class Gate00Signature:
    """GATE 0: подпись + nonce.

    Порядок:
    1. Получение nonce (consume или read, по политике)
    2. Санитарные проверки подписи (r, s в диапазоне, low-s)
    3. Recovery подписанта над digest
    4. signer == order.borrower
    """

    def __init__(
        self,
        nonces: NonceRegistry,
        domain: SigningDomain,
        nonce_policy: NoncePolicy = NoncePolicy.CONSUME_ON_ATTEMPT,
    ):
        """
        Args:
            nonces: nonce registry (общий для всех вызовов)
            domain: EIP-712 domain deployment
            nonce_policy: момент потребления nonce
        """
        self.nonces = nonces
        self.domain = domain
        self.nonce_policy = nonce_policy

    def evaluate(self, order: Order, signature: Signature) -> Gate00Result:
        """Проверка подписи.

        Raises:
            InvalidSignature: подпись не принадлежит borrower для текущего nonce
        """
        if self.nonce_policy == NoncePolicy.CONSUME_ON_ATTEMPT:
            nonce = self.nonces.consume(order.borrower)
        else:
            nonce = self.nonces.current(order.borrower)

        digest = order_digest(order, nonce, self.domain)

        signature_error = self._validate_signature(signature)
        if signature_error:
            raise InvalidSignature(f"malformed signature: {signature_error}")

        try:
            signer = recover_signer(order, nonce, signature, self.domain)
        except (BadSignature, KeyValidationError, ValueError) as e:
            raise InvalidSignature(f"signature recovery failed: {e}") from e

        if signer != order.borrower:
            raise InvalidSignature(
                f"recovered {signer}, expected borrower {order.borrower} (nonce={nonce})"
            )

        logger.debug("gate00 pass: borrower=%s nonce=%d", order.borrower, nonce)
        return Gate00Result(
            signer=signer,
            nonce=nonce,
            digest=digest,
            nonce_consumed=self.nonce_policy == NoncePolicy.CONSUME_ON_ATTEMPT,
            details=f"Signature valid: signer={signer}, nonce={nonce}",
        )

    def _validate_signature(self, signature: Signature) -> str:
        """
        Returns:
            Пустая строка если подпись корректна по форме, иначе причина
        """
        if not 0 < signature.r < SECP256K1_N:
            return "r out of range"
        if not 0 < signature.s <= SECP256K1_HALF_N:
            return "s out of range (high-s signatures are rejected)"
        return ""
