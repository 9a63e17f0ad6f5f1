"""Storage Protocol — dependency inversion for the account blob.

The store only needs a key-value slot plus an optional change feed from
other execution contexts. Unit tests inject InMemoryStorage; the
infrastructure layer also provides file and Redis backends.
"""

from collections.abc import Callable
from typing import Protocol

ChangeCallback = Callable[[str | None], None]
StopWatching = Callable[[], None]


class AccountStorageProtocol(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def watch(self, key: str, callback: ChangeCallback) -> StopWatching:
        """Invoke callback with the new raw value whenever another context writes key."""
        ...
