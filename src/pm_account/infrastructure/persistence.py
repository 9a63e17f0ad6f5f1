"""Key-value storage backends for the persisted account blob.

- InMemoryStorage: process-local dict; one instance can be shared by several
  stores to model multiple open tabs (writes are pushed to every watcher).
- FileStorage: one JSON file per key, replaced atomically. No change feed.
- RedisStorage: GET/SET plus a pub/sub channel per key carrying new blobs,
  so stores in other processes can refresh.

Watchers may receive their own writes; the store filters those out.
"""

import logging
import os
import tempfile
import threading
from collections import defaultdict
from pathlib import Path
from typing import Any

import redis

from src.pm_account.domain.repository import ChangeCallback, StopWatching
from src.pm_common.errors import StorageError

logger = logging.getLogger(__name__)


class InMemoryStorage:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._watchers: dict[str, list[ChangeCallback]] = defaultdict(list)
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
            watchers = list(self._watchers[key])
        for cb in watchers:
            cb(value)

    def delete(self, key: str) -> None:
        with self._lock:
            existed = self._data.pop(key, None) is not None
            watchers = list(self._watchers[key])
        if existed:
            for cb in watchers:
                cb(None)

    def watch(self, key: str, callback: ChangeCallback) -> StopWatching:
        with self._lock:
            self._watchers[key].append(callback)

        def stop() -> None:
            with self._lock:
                if callback in self._watchers[key]:
                    self._watchers[key].remove(callback)

        return stop


class FileStorage:
    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._dir = Path(directory)

    def _path(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError(f"cannot read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, path)
        except OSError as exc:
            raise StorageError(f"cannot write {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"cannot delete {self._path(key)}: {exc}") from exc

    def watch(self, key: str, callback: ChangeCallback) -> StopWatching:
        # Files have no change feed; other processes are picked up on next load().
        return lambda: None


class RedisStorage:
    """Redis-backed slot. Every write also PUBLISHes the blob on `<key>:changed`.

    A deletion publishes an empty payload, which watchers receive as None.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisStorage":
        return cls(redis.Redis.from_url(url, decode_responses=True))

    @staticmethod
    def channel_for(key: str) -> str:
        return f"{key}:changed"

    def get(self, key: str) -> str | None:
        try:
            value = self._client.get(key)
        except redis.RedisError as exc:
            raise StorageError(f"GET {key} failed: {exc}") from exc
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            pipe = self._client.pipeline()
            pipe.set(key, value)
            pipe.publish(self.channel_for(key), value)
            pipe.execute()
        except redis.RedisError as exc:
            raise StorageError(f"SET {key} failed: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            pipe = self._client.pipeline()
            pipe.delete(key)
            pipe.publish(self.channel_for(key), "")
            pipe.execute()
        except redis.RedisError as exc:
            raise StorageError(f"DEL {key} failed: {exc}") from exc

    def watch(self, key: str, callback: ChangeCallback) -> StopWatching:
        pubsub = self._client.pubsub(ignore_subscribe_messages=True)

        def on_message(message: dict[str, Any]) -> None:
            data = message.get("data")
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            callback(data or None)

        pubsub.subscribe(**{self.channel_for(key): on_message})
        worker = pubsub.run_in_thread(sleep_time=0.1, daemon=True)
        logger.info("Watching %s for external account changes", self.channel_for(key))

        def stop() -> None:
            worker.stop()
            pubsub.close()

        return stop
