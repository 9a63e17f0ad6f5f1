"""Composition root — builds the single store/engine pair the UI layer binds to.

Usage:
    from src.main import build_account_engine
    engine = build_account_engine()
    unsubscribe = engine.subscribe(lambda: render(engine.get_snapshot()))
"""

import logging
from functools import partial

from config.settings import Settings, settings as default_settings
from src.pm_account.application.engine import AccountEngine
from src.pm_account.application.store import AccountStore
from src.pm_account.domain.models import AccountState
from src.pm_account.domain.repository import AccountStorageProtocol
from src.pm_account.domain.seed import seed_state
from src.pm_account.infrastructure.persistence import (
    FileStorage,
    InMemoryStorage,
    RedisStorage,
)
from src.pm_common.datetime_utils import now_ms
from src.pm_common.logging_config import configure_logging
from src.pm_market.application.service import MarketCatalog

logger = logging.getLogger(__name__)


def build_storage(cfg: Settings) -> AccountStorageProtocol:
    backend = cfg.STORAGE_BACKEND.lower()
    if backend == "memory":
        return InMemoryStorage()
    if backend == "file":
        return FileStorage(cfg.STORAGE_DIR)
    if backend == "redis":
        return RedisStorage.from_url(cfg.REDIS_URL)
    raise ValueError(f"Unknown STORAGE_BACKEND: {cfg.STORAGE_BACKEND!r}")


def _seed(cfg: Settings) -> AccountState:
    return seed_state(
        now_ms(),
        initial_cash_usd=cfg.SEED_CASH_USD,
        history_limit=cfg.SEED_HISTORY_LIMIT,
    )


def build_account_engine(
    cfg: Settings | None = None,
    storage: AccountStorageProtocol | None = None,
    catalog: MarketCatalog | None = None,
) -> AccountEngine:
    cfg = cfg or default_settings
    configure_logging("DEBUG" if cfg.DEBUG else cfg.LOG_LEVEL)

    store = AccountStore(
        storage=storage if storage is not None else build_storage(cfg),
        key=cfg.STORAGE_KEY,
        seed_factory=partial(_seed, cfg),
    )
    logger.info(
        "%s account engine ready: backend=%s key=%s",
        cfg.APP_NAME,
        cfg.STORAGE_BACKEND,
        cfg.STORAGE_KEY,
    )
    return AccountEngine(
        store=store,
        catalog=catalog or MarketCatalog(),
        history_limit=cfg.HISTORY_LIMIT,
    )
