"""Time utilities. Ledger timestamps are integer epoch milliseconds."""

import time


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)
