"""Unit tests for AccountStore: load/reseed, commit, subscriptions, cross-context sync."""

import threading
from dataclasses import replace
from unittest.mock import MagicMock

from src.pm_account.application.engine import AccountEngine
from src.pm_account.application.store import RECENT_WRITES_LIMIT, AccountStore
from src.pm_account.domain.models import AccountState
from src.pm_account.domain.seed import seed_state
from src.pm_account.infrastructure.persistence import InMemoryStorage
from src.pm_account.infrastructure.serialization import dump_state, parse_state
from src.pm_common.errors import StorageError
from tests.helpers import FIXED_NOW_MS, TEST_KEY, empty_account


def _store(storage: InMemoryStorage) -> AccountStore:
    return AccountStore(storage=storage, key=TEST_KEY, seed_factory=empty_account)


class TestLoad:
    def test_first_load_seeds_and_persists(self) -> None:
        storage = InMemoryStorage()
        store = _store(storage)
        assert store.get_snapshot() == empty_account()
        assert parse_state(storage.get(TEST_KEY)) == empty_account()

    def test_loads_persisted_state(self) -> None:
        storage = InMemoryStorage()
        persisted = seed_state(FIXED_NOW_MS)
        storage.set(TEST_KEY, dump_state(persisted))
        assert _store(storage).get_snapshot() == persisted

    def test_malformed_blob_reseeds(self) -> None:
        storage = InMemoryStorage()
        storage.set(TEST_KEY, "{definitely not json")
        store = _store(storage)
        assert store.get_snapshot() == empty_account()
        assert parse_state(storage.get(TEST_KEY)) == empty_account()

    def test_unreadable_storage_reseeds(self) -> None:
        storage = MagicMock()
        storage.get.side_effect = StorageError("disk gone")
        store = AccountStore(storage=storage, key=TEST_KEY, seed_factory=empty_account)
        assert store.get_snapshot() == empty_account()

    def test_round_trip_through_reload(self, store: AccountStore) -> None:
        state = replace(seed_state(FIXED_NOW_MS), cash_usd=123.45)
        store.commit(state)
        assert store.load() == state

    def test_fresh_seed_ignores_persisted_state(self, store: AccountStore) -> None:
        store.commit(AccountState(cash_usd=1.0))
        assert store.fresh_seed() == empty_account()


class TestCommit:
    def test_replaces_snapshot_and_persists(self, store: AccountStore, storage: InMemoryStorage) -> None:
        nxt = AccountState(cash_usd=42.0)
        store.commit(nxt)
        assert store.get_snapshot() is nxt
        assert parse_state(storage.get(TEST_KEY)) == nxt

    def test_persistence_failure_does_not_raise(self) -> None:
        storage = MagicMock()
        storage.get.return_value = None
        storage.set.side_effect = StorageError("disk full")
        store = AccountStore(storage=storage, key=TEST_KEY, seed_factory=empty_account)
        calls: list[int] = []
        store.subscribe(lambda: calls.append(1))

        store.commit(AccountState(cash_usd=7.0))

        assert store.get_snapshot().cash_usd == 7.0
        assert calls == [1]

    def test_unexpected_backend_error_is_also_swallowed(self) -> None:
        storage = MagicMock()
        storage.get.return_value = None
        storage.set.side_effect = RuntimeError("quota exceeded")
        store = AccountStore(storage=storage, key=TEST_KEY, seed_factory=empty_account)
        store.commit(AccountState(cash_usd=8.0))
        assert store.get_snapshot().cash_usd == 8.0

    def test_failed_write_is_not_treated_as_own_echo(self) -> None:
        storage = MagicMock()
        storage.get.return_value = None
        storage.set.side_effect = StorageError("disk full")
        store = AccountStore(storage=storage, key=TEST_KEY, seed_factory=empty_account)
        calls: list[int] = []
        store.subscribe(lambda: calls.append(1))

        store.commit(AccountState(cash_usd=7.0))
        store.handle_external_change(dump_state(AccountState(cash_usd=7.0)))

        assert calls == [1, 1]

    def test_lock_released_while_backend_writes(self) -> None:
        blocked: list[bool] = []
        holder: list[AccountStore] = []

        class WriteCheckingStorage(InMemoryStorage):
            def set(self, key: str, value: str) -> None:
                if holder:
                    worker = threading.Thread(target=holder[0].subscribe, args=(lambda: None,))
                    worker.start()
                    worker.join(timeout=1.0)
                    blocked.append(worker.is_alive())
                super().set(key, value)

        holder.append(_store(WriteCheckingStorage()))
        holder[0].commit(AccountState(cash_usd=2.0))

        assert blocked == [False]


class TestSubscribe:
    def test_listeners_notified_in_order(self, store: AccountStore) -> None:
        calls: list[str] = []
        store.subscribe(lambda: calls.append("a"))
        store.subscribe(lambda: calls.append("b"))
        store.commit(AccountState(cash_usd=1.0))
        assert calls == ["a", "b"]

    def test_listener_sees_new_snapshot(self, store: AccountStore) -> None:
        seen: list[float] = []
        store.subscribe(lambda: seen.append(store.get_snapshot().cash_usd))
        store.commit(AccountState(cash_usd=3.0))
        assert seen == [3.0]

    def test_unsubscribe_is_idempotent(self, store: AccountStore) -> None:
        calls: list[int] = []
        unsubscribe = store.subscribe(lambda: calls.append(1))
        unsubscribe()
        unsubscribe()
        store.commit(AccountState(cash_usd=1.0))
        assert calls == []

    def test_unsubscribe_only_removes_its_own_registration(self, store: AccountStore) -> None:
        calls: list[int] = []

        def listener() -> None:
            calls.append(1)

        unsubscribe_first = store.subscribe(listener)
        store.subscribe(listener)
        unsubscribe_first()
        unsubscribe_first()
        store.commit(AccountState(cash_usd=1.0))
        assert calls == [1]

    def test_failing_listener_does_not_block_others(self, store: AccountStore) -> None:
        calls: list[int] = []

        def boom() -> None:
            raise RuntimeError("render failed")

        store.subscribe(boom)
        store.subscribe(lambda: calls.append(1))
        store.commit(AccountState(cash_usd=1.0))
        assert calls == [1]


class TestExternalChanges:
    def test_other_store_follows_writes(self) -> None:
        storage = InMemoryStorage()
        tab_a = _store(storage)
        tab_b = _store(storage)
        a_calls: list[int] = []
        b_calls: list[int] = []
        tab_a.subscribe(lambda: a_calls.append(1))
        tab_b.subscribe(lambda: b_calls.append(1))

        tab_a.commit(AccountState(cash_usd=99.0))

        assert tab_b.get_snapshot() == AccountState(cash_usd=99.0)
        assert a_calls == [1]
        assert b_calls == [1]

    def test_own_echo_is_ignored(self, store: AccountStore) -> None:
        calls: list[int] = []
        store.subscribe(lambda: calls.append(1))
        store.commit(AccountState(cash_usd=5.0))
        store.handle_external_change(dump_state(AccountState(cash_usd=5.0)))
        assert calls == [1]

    def test_late_echo_of_older_write_is_ignored(
        self, engine: AccountEngine, store: AccountStore, storage: InMemoryStorage
    ) -> None:
        engine.deposit(10)
        older = storage.get(TEST_KEY)
        engine.deposit(20)

        store.handle_external_change(older)
        engine.deposit(1)

        assert engine.get_snapshot().cash_usd == 531.0

    def test_echo_memory_is_bounded(self, store: AccountStore) -> None:
        first = AccountState(cash_usd=1.0)
        store.commit(first)
        for i in range(RECENT_WRITES_LIMIT):
            store.commit(AccountState(cash_usd=100.0 + i))

        store.handle_external_change(dump_state(first))

        assert store.get_snapshot() == first

    def test_malformed_external_blob_ignored(self, store: AccountStore) -> None:
        before = store.get_snapshot()
        calls: list[int] = []
        store.subscribe(lambda: calls.append(1))
        store.handle_external_change("garbage")
        assert store.get_snapshot() is before
        assert calls == []

    def test_cleared_slot_reseeds(self, store: AccountStore, storage: InMemoryStorage) -> None:
        store.commit(AccountState(cash_usd=1.0))
        storage.delete(TEST_KEY)
        assert store.get_snapshot() == empty_account()
        assert parse_state(storage.get(TEST_KEY)) == empty_account()

    def test_close_stops_following(self) -> None:
        storage = InMemoryStorage()
        tab_a = _store(storage)
        tab_b = _store(storage)
        tab_b.close()
        tab_a.commit(AccountState(cash_usd=11.0))
        assert tab_b.get_snapshot() == empty_account()
