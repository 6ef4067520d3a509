"""
Key-Value Store Module

This module implements the core key-value storage shared by every
request handler of the server.

The store is safe to use from many threads at once: each operation
takes a single mutual-exclusion lock for exactly one dictionary access
and releases it before returning. Callers must never hold the store
while doing I/O (reading bodies, writing responses, logging).
"""

import threading
from typing import Dict, Optional


class KVStore:
    """
    Thread-safe in-memory key-value store.

    This class provides O(1) average-case time complexity for:
    - put: Insert or update a key-value pair
    - get: Retrieve a value by key
    - size: Count the distinct keys stored

    Entries are never removed: once a key has been written it stays
    present for the lifetime of the store, only its value can change.

    Internal Storage:
        A plain dict guarded by one threading.Lock. Reads and writes
        share the same lock, so concurrent gets are serialized too.
    """

    def __init__(self):
        """Initialize an empty store."""
        self._store: Dict[str, str] = {}
        self._lock = threading.Lock()

    def put(self, key: str, value: str) -> None:
        """
        Insert or update a key-value pair.

        Any key and value are accepted, including empty strings.

        Args:
            key: The key to store
            value: The value to associate with the key

        Time Complexity: O(1) average
        """
        with self._lock:
            self._store[key] = value

    def get(self, key: str) -> Optional[str]:
        """
        Retrieve the value for a given key.

        Args:
            key: The key to look up

        Returns:
            The value of the most recently completed put for the key,
            None if the key was never written

        Time Complexity: O(1) average
        """
        with self._lock:
            return self._store.get(key)

    def size(self) -> int:
        """
        Get the current number of distinct keys in the store.

        Returns:
            Number of keys currently stored
        """
        with self._lock:
            return len(self._store)
