"""AccountStore — durable, observable single-writer holder of AccountState.

commit() replaces the snapshot, persists it and then notifies subscribers,
all synchronously. A failed write is logged and ignored: the in-memory
state stays authoritative until the next successful write.

Other execution contexts sharing the storage slot are followed through the
backend's change feed (best effort, last write observed wins).
"""

import logging
import threading
from collections import deque
from collections.abc import Callable

from src.pm_account.domain.models import AccountState
from src.pm_account.domain.repository import AccountStorageProtocol, StopWatching
from src.pm_account.infrastructure.serialization import dump_state, parse_state
from src.pm_common.errors import StorageError

logger = logging.getLogger(__name__)

Listener = Callable[[], None]
Unsubscribe = Callable[[], None]
SeedFactory = Callable[[], AccountState]

# Own writes remembered for echo filtering; pub/sub may deliver them late.
RECENT_WRITES_LIMIT = 64


class AccountStore:
    def __init__(
        self,
        storage: AccountStorageProtocol,
        key: str,
        seed_factory: SeedFactory,
        watch_external: bool = True,
    ) -> None:
        self._storage = storage
        self._key = key
        self._seed_factory = seed_factory
        self._listeners: dict[object, Listener] = {}
        self._lock = threading.RLock()
        self._recent_writes: deque[str] = deque(maxlen=RECENT_WRITES_LIMIT)
        self._state: AccountState = self.load()
        self._stop_watching: StopWatching | None = (
            storage.watch(key, self.handle_external_change) if watch_external else None
        )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def load(self) -> AccountState:
        """Read the persisted blob; reseed (and persist the seed) when absent or malformed."""
        try:
            raw = self._storage.get(self._key)
        except StorageError:
            logger.warning("Account storage unreadable, starting from seed", exc_info=True)
            raw = None

        stored = parse_state(raw)
        if stored is not None:
            return stored

        seeded = self._seed_factory()
        self._persist(seeded)
        return seeded

    def get_snapshot(self) -> AccountState:
        return self._state

    def fresh_seed(self) -> AccountState:
        """A newly generated seed, ignoring whatever is persisted."""
        return self._seed_factory()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        token = object()
        with self._lock:
            self._listeners[token] = listener

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.pop(token, None)

        return unsubscribe

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------

    def commit(self, next_state: AccountState) -> None:
        with self._lock:
            self._state = next_state
        # storage.set may call other stores synchronously; never hold our lock across it
        self._persist(next_state)
        self._emit()

    def handle_external_change(self, raw: str | None) -> None:
        """Refresh from a blob written by another context, then notify."""
        if raw is not None and self._is_own_write(raw):
            return  # our own write echoed back, possibly after newer commits
        if raw is None:
            logger.info("Account slot %s cleared externally, reseeding", self._key)
            self.commit(self._seed_factory())
            return

        external = parse_state(raw)
        if external is None:
            logger.warning("Ignoring malformed external update for %s", self._key)
            return
        with self._lock:
            self._state = external
        self._emit()

    def close(self) -> None:
        if self._stop_watching is not None:
            self._stop_watching()
            self._stop_watching = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_own_write(self, raw: str) -> bool:
        with self._lock:
            return raw in self._recent_writes

    def _persist(self, state: AccountState) -> None:
        try:
            raw = dump_state(state)
        except Exception:
            logger.warning("Failed to serialize account state for %s", self._key, exc_info=True)
            return
        # Registered before set(): in-memory watchers are called from inside it.
        with self._lock:
            self._recent_writes.append(raw)
        try:
            self._storage.set(self._key, raw)
        except Exception:
            with self._lock:
                if raw in self._recent_writes:
                    self._recent_writes.remove(raw)
            logger.warning("Failed to persist account state to %s", self._key, exc_info=True)

    def _emit(self) -> None:
        with self._lock:
            listeners = list(self._listeners.values())
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("Account store listener failed")
