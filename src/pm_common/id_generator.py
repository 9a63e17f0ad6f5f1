"""Ledger ID generator for positions, orders, trades and transactions.

IDs read "<prefix>-<n>" where n is a snowflake-style integer, so IDs minted
in the same millisecond stay unique and sort by creation time.
"""

import threading
from collections.abc import Callable

from src.pm_common.datetime_utils import now_ms

_EPOCH_MS = 1_700_000_000_000  # 2023-11-14
_WORKER_BITS = 10
_SEQUENCE_BITS = 12
_MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1
_MAX_WORKER = (1 << _WORKER_BITS) - 1


class LedgerIdGenerator:
    """Thread-safe generator of prefixed, time-ordered IDs.

    Integer layout: ms since _EPOCH_MS | worker (10 bits) | sequence (12 bits).
    `worker` separates generators sharing one storage slot (e.g. two tabs).
    """

    def __init__(self, worker: int = 0, clock: Callable[[], int] = now_ms) -> None:
        if not 0 <= worker <= _MAX_WORKER:
            raise ValueError(f"worker must be 0-{_MAX_WORKER}")
        self._worker = worker
        self._clock = clock
        self._sequence = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_id(self, prefix: str = "") -> str:
        with self._lock:
            ts = max(self._clock(), self._last_ms)
            if ts == self._last_ms:
                self._sequence = (self._sequence + 1) & _MAX_SEQUENCE
                if self._sequence == 0:
                    # sequence exhausted: borrow the next millisecond
                    ts += 1
            else:
                self._sequence = 0
            self._last_ms = ts

            n = (
                ((ts - _EPOCH_MS) << (_WORKER_BITS + _SEQUENCE_BITS))
                | (self._worker << _SEQUENCE_BITS)
                | self._sequence
            )
        return f"{prefix}-{n}" if prefix else str(n)
