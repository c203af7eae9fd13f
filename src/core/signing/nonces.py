"""
Nonce Registry — per-borrower монотонные счётчики

Nonce используется для двух целей:
- защита от replay: каждая подпись включает nonce, против которого она сделана
- bulk invalidation: borrower может поднять свой nonce (bump), после чего
  все ранее подписанные ордера перестают проходить проверку подписи

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Счётчик никогда не уменьшается и не сбрасывается
2. Чтение-и-инкремент атомарны: одно значение nonce потребляется ровно один раз
3. bump меняет только счётчик вызывающего
"""

import logging
import threading
from typing import Dict, Protocol

from src.core.domain.address import normalize_address


logger = logging.getLogger(__name__)


# =============================================================================
# STORE
# =============================================================================


class NonceStore(Protocol):
    """Key-value хранилище identity → counter с атомарным инкрементом."""

    def get(self, identity: str) -> int:
        ...

    def increment(self, identity: str) -> int:
        """Атомарно: вернуть текущее значение и увеличить на 1."""
        ...

    def compare_and_increment(self, identity: str, expected: int) -> bool:
        """Атомарно: увеличить на 1, только если текущее значение == expected."""
        ...


class InMemoryNonceStore:
    """Потокобезопасное in-memory хранилище (живёт всё время процесса)."""

    def __init__(self):
        self._counters: Dict[str, int] = {}
        self._lock = threading.Lock()

    def get(self, identity: str) -> int:
        with self._lock:
            return self._counters.get(identity, 0)

    def increment(self, identity: str) -> int:
        with self._lock:
            value = self._counters.get(identity, 0)
            self._counters[identity] = value + 1
            return value

    def compare_and_increment(self, identity: str, expected: int) -> bool:
        with self._lock:
            value = self._counters.get(identity, 0)
            if value != expected:
                return False
            self._counters[identity] = value + 1
            return True


# =============================================================================
# REGISTRY
# =============================================================================


class NonceRegistry:
    """
    Nonce registry поверх инжектируемого NonceStore.

    Все identity нормализуются к checksum адресу, поэтому
    lowercase и checksum формы одного адреса делят один счётчик.
    """

    def __init__(self, store: NonceStore | None = None):
        """
        Args:
            store: хранилище счётчиков (default: InMemoryNonceStore)
        """
        self._store = store or InMemoryNonceStore()

    def current(self, borrower: str) -> int:
        """Текущий nonce без мутации."""
        return self._store.get(normalize_address(borrower))

    def consume(self, borrower: str) -> int:
        """
        Потребление nonce.

        Returns:
            Значение до инкремента (против него должна быть сделана подпись)
        """
        nonce = self._store.increment(normalize_address(borrower))
        logger.debug("nonce consumed: borrower=%s nonce=%d", borrower, nonce)
        return nonce

    def consume_if_current(self, borrower: str, expected: int) -> bool:
        """Потребление nonce, только если он всё ещё равен expected."""
        return self._store.compare_and_increment(normalize_address(borrower), expected)

    def bump(self, caller: str) -> int:
        """
        Инвалидация всех ранее подписанных ордеров caller.

        Меняет только счётчик самого caller: чужой nonce через bump
        поднять невозможно.

        Returns:
            Новое значение nonce
        """
        identity = normalize_address(caller)
        previous = self._store.increment(identity)
        logger.info("nonce bumped: borrower=%s nonce=%d -> %d", identity, previous, previous + 1)
        return previous + 1
