# Copyright 2025 Sushanth (https://github.com/sushanthpy)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Key-value stores backing the priority queue.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterator, Mapping, Optional


class KeyValueStore(ABC):
    """
    Abstract key-value store interface.

    Any associative container keyed by bytes and holding bytes values can
    back a queue. Iteration order carries no meaning unless the store
    overrides ``max_key()``.
    """

    @abstractmethod
    def get(self, key: bytes) -> Optional[bytes]:
        """Get a value by key."""
        pass

    @abstractmethod
    def put(self, key: bytes, value: bytes) -> None:
        """Store a key-value pair, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: bytes) -> None:
        """Delete a key. Missing keys are ignored."""
        pass

    @abstractmethod
    def keys(self) -> Iterator[bytes]:
        """Iterate over every key, in no particular order."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    def max_key(self) -> Optional[bytes]:
        """Largest key for stores with ordered keys, ``None`` otherwise.

        Unordered stores return ``None`` and the queue falls back to a
        full key scan.
        """
        return None

    @property
    def ordered(self) -> bool:
        return type(self).max_key is not KeyValueStore.max_key


class InMemoryStore(KeyValueStore):
    """
    In-memory store backed by a Python dictionary.
    """

    def __init__(self, items: Optional[Mapping[bytes, bytes]] = None):
        self._store: Dict[bytes, bytes] = dict(items or {})

    def get(self, key: bytes) -> Optional[bytes]:
        return self._store.get(key)

    def put(self, key: bytes, value: bytes) -> None:
        self._store[key] = value

    def delete(self, key: bytes) -> None:
        self._store.pop(key, None)

    def keys(self) -> Iterator[bytes]:
        # Snapshot so callers may mutate while iterating
        return iter(list(self._store))

    def __len__(self) -> int:
        return len(self._store)
