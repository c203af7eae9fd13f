"""Тесты для Nonce Registry.

Coverage:
- consume возвращает значение до инкремента
- bump меняет только счётчик caller
- compare-and-increment
- нормализация identity (lowercase и checksum делят счётчик)
- атомарность при конкурентном consume
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from eth_utils import to_checksum_address

from src.core.signing.nonces import InMemoryNonceStore, NonceRegistry


ALICE = "0x" + "aa" * 20
BOB = "0x" + "bb" * 20


class TestNonceRegistry:
    """Тесты NonceRegistry."""

    def test_initial_nonce_is_zero(self):
        assert NonceRegistry().current(ALICE) == 0

    def test_consume_returns_pre_increment_value(self):
        registry = NonceRegistry()

        assert registry.consume(ALICE) == 0
        assert registry.consume(ALICE) == 1
        assert registry.current(ALICE) == 2

    def test_counters_are_per_borrower(self):
        registry = NonceRegistry()
        registry.consume(ALICE)

        assert registry.current(BOB) == 0

    def test_bump_returns_new_value(self):
        registry = NonceRegistry()

        assert registry.bump(ALICE) == 1
        assert registry.bump(ALICE) == 2
        assert registry.current(ALICE) == 2

    def test_bump_touches_only_caller(self):
        registry = NonceRegistry()
        registry.bump(ALICE)

        assert registry.current(BOB) == 0

    def test_bump_is_logged(self, caplog):
        registry = NonceRegistry()
        with caplog.at_level("INFO", logger="src.core.signing.nonces"):
            registry.bump(ALICE)

        assert "nonce bumped" in caplog.text

    def test_identity_is_normalized(self):
        """lowercase и checksum формы одного адреса — один счётчик."""
        registry = NonceRegistry()

        registry.consume(ALICE)

        assert registry.current(to_checksum_address(ALICE)) == 1
        assert registry.current(ALICE.upper().replace("0X", "0x")) == 1

    def test_invalid_identity(self):
        with pytest.raises(ValueError):
            NonceRegistry().consume("not-an-address")

    def test_consume_if_current(self):
        registry = NonceRegistry()

        assert registry.consume_if_current(ALICE, 0)
        assert not registry.consume_if_current(ALICE, 0)
        assert registry.current(ALICE) == 1

    def test_custom_store_is_used(self):
        store = InMemoryNonceStore()
        registry = NonceRegistry(store)
        registry.consume(ALICE)

        assert NonceRegistry(store).current(ALICE) == 1


class TestNonceConcurrency:
    """Одно значение nonce потребляется ровно один раз."""

    def test_concurrent_consume_yields_distinct_values(self):
        registry = NonceRegistry()
        workers = 16
        barrier = threading.Barrier(workers)

        def consume():
            barrier.wait()
            return registry.consume(ALICE)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            values = list(pool.map(lambda _: consume(), range(workers)))

        assert sorted(values) == list(range(workers))
        assert registry.current(ALICE) == workers

    def test_concurrent_compare_and_increment_single_winner(self):
        registry = NonceRegistry()
        workers = 8
        barrier = threading.Barrier(workers)

        def attempt():
            barrier.wait()
            return registry.consume_if_current(ALICE, 0)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda _: attempt(), range(workers)))

        assert results.count(True) == 1
        assert registry.current(ALICE) == 1
