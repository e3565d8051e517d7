# SPDX-License-Identifier: MIT
"""In-process catalog backend."""

import threading

from ..models.provider import ProviderVersions
from .base import VersionCatalog
from .keys import ProviderKey
from .rwlock import ReadWriteLock


class MemoryCatalog(VersionCatalog):
    """Dictionary-backed catalog guarded by one reader/writer lock per key.

    Writers to the same key exclude each other and all readers of that key;
    writers to different keys proceed independently. Values are deep-copied
    on the way in and out so callers never share state with the store.
    """

    name = "memory"

    def __init__(self) -> None:
        self._providers: dict[ProviderKey, ProviderVersions] = {}
        self._locks: dict[ProviderKey, ReadWriteLock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: ProviderKey) -> ReadWriteLock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = ReadWriteLock()
            return lock

    def read(self, key: ProviderKey) -> ProviderVersions | None:
        # Locks are only created by writes; a key without one was never stored.
        with self._locks_guard:
            lock = self._locks.get(key)
        if lock is None:
            return None

        with lock.read_locked():
            stored = self._providers.get(key)
            if stored is None:
                return None
            return stored.model_copy(deep=True)

    def write(self, key: ProviderKey, versions: ProviderVersions) -> None:
        snapshot = versions.model_copy(deep=True)
        with self._lock_for(key).write_locked():
            self._providers[key] = snapshot

    def __len__(self) -> int:
        return len(self._providers)
