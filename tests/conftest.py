"""Shared test fixtures."""

from collections.abc import Callable, Iterator

import pytest

from src.pm_account.application.engine import AccountEngine
from src.pm_account.application.store import AccountStore
from src.pm_account.domain.models import AccountState
from src.pm_account.infrastructure.persistence import InMemoryStorage
from src.pm_market.application.service import MarketCatalog
from tests.helpers import FIXED_NOW_MS, TEST_KEY, empty_account


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def seed_factory() -> Callable[[], AccountState]:
    return empty_account


@pytest.fixture
def store(storage: InMemoryStorage, seed_factory: Callable[[], AccountState]) -> Iterator[AccountStore]:
    s = AccountStore(storage=storage, key=TEST_KEY, seed_factory=seed_factory)
    yield s
    s.close()


@pytest.fixture
def engine(store: AccountStore) -> AccountEngine:
    return AccountEngine(store=store, catalog=MarketCatalog(), clock=lambda: FIXED_NOW_MS)
