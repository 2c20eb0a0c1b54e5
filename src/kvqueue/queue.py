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
kvqueue Priority Queue

Priority queue over byte payloads stored in a flat key-value store.

    from kvqueue import PriorityQueue

    queue = PriorityQueue.new()
    queue.insert(b"low", 1)
    queue.insert(b"high", 10)
    queue.pop()   # b"high"

Each distinct priority is one store entry:

    key   = priority as 8 big-endian bytes
    value = bucket of length-prefixed records, oldest first

Elements sharing a priority are appended to the same bucket and popped
from its front, giving FIFO order within a priority. Finding the highest
priority is a linear scan over the keys, so peek/pop cost
O(distinct priorities) rather than O(elements).

A queue is owned by one thread. Wrap it in a lock to share it.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional

from .encoding import (
    MAX_PAYLOAD_SIZE,
    BytesLike,
    decode_front_record,
    decode_priority,
    encode_priority,
    encode_record,
    iter_records,
)
from .errors import CorruptStoreError
from .store import InMemoryStore, KeyValueStore

logger = logging.getLogger(__name__)


# ============================================================================
# QueueConfig - Queue Configuration
# ============================================================================

@dataclass
class QueueConfig:
    """Queue configuration."""
    name: str = "default"
    max_payload_size: int = MAX_PAYLOAD_SIZE

    def __post_init__(self):
        if not 0 <= self.max_payload_size <= MAX_PAYLOAD_SIZE:
            raise ValueError(
                f"max_payload_size must be between 0 and {MAX_PAYLOAD_SIZE}, "
                f"got {self.max_payload_size}"
            )

    def with_name(self, name: str) -> 'QueueConfig':
        """Builder pattern for the queue name."""
        self.name = name
        return self

    def with_max_payload_size(self, size: int) -> 'QueueConfig':
        """Builder pattern for the payload cap."""
        if not 0 <= size <= MAX_PAYLOAD_SIZE:
            raise ValueError(
                f"max_payload_size must be between 0 and {MAX_PAYLOAD_SIZE}, got {size}"
            )
        self.max_payload_size = size
        return self

    @classmethod
    def from_env(cls, prefix: str = "KVQUEUE_") -> 'QueueConfig':
        """
        Build a config from environment variables.

        Reads ``<prefix>NAME`` and ``<prefix>MAX_PAYLOAD_SIZE``; unset
        variables keep their defaults.
        """
        config = cls()
        name = os.environ.get(f"{prefix}NAME")
        if name:
            config.with_name(name)
        size = os.environ.get(f"{prefix}MAX_PAYLOAD_SIZE")
        if size:
            config.with_max_payload_size(int(size))
        return config


# ============================================================================
# QueueStats - Queue Statistics
# ============================================================================

@dataclass
class QueueStats:
    """Queue statistics."""
    name: str
    priorities: int = 0
    pending: int = 0
    stored_bytes: int = 0


# ============================================================================
# BasePriorityQueue - Queue Contract
# ============================================================================

class BasePriorityQueue(ABC):
    """Operations every priority queue engine provides."""

    @classmethod
    @abstractmethod
    def new(cls) -> 'BasePriorityQueue':
        """Create an empty queue."""
        pass

    @abstractmethod
    def is_empty(self) -> bool:
        """Check whether the queue holds no elements."""
        pass

    @abstractmethod
    def peek(self) -> Optional[bytes]:
        """Return the highest-priority element without removing it."""
        pass

    @abstractmethod
    def insert(self, element: BytesLike, priority: int) -> None:
        """Add an element with the given priority."""
        pass

    @abstractmethod
    def pop(self) -> Optional[bytes]:
        """Remove and return the highest-priority element."""
        pass


# ============================================================================
# PriorityQueue - The Main Queue Implementation
# ============================================================================

class PriorityQueue(BasePriorityQueue):
    """
    Priority queue backed by a key-value store.

    Higher priorities pop first; equal priorities pop in insertion order.

    Example:
        queue = PriorityQueue.new()
        queue.insert(b"A", 5)
        queue.insert(b"B", 10)
        queue.insert(b"C", 10)

        queue.peek()  # b"B"
        queue.pop()   # b"B"
        queue.pop()   # b"C"
        queue.pop()   # b"A"
        queue.pop()   # None
    """

    def __init__(self, config: Optional[QueueConfig] = None):
        """
        Initialize an empty queue over a fresh in-memory store.

        Args:
            config: Queue configuration, defaults to ``QueueConfig()``
        """
        self._config = config or QueueConfig()
        self._store: KeyValueStore = InMemoryStore()

    @classmethod
    def new(cls, config: Optional[QueueConfig] = None) -> "PriorityQueue":
        """Create an empty queue."""
        return cls(config)

    @classmethod
    def from_store(
        cls,
        store: KeyValueStore,
        config: Optional[QueueConfig] = None,
    ) -> "PriorityQueue":
        """
        Create a queue over an existing store.

        The queue takes ownership of ``store``; callers must not write to
        it afterwards. Entries already present must follow the encoding
        ``insert()`` produces, otherwise peek/pop raise ``MalformedKey`` or
        ``MalformedRecord``.

        Args:
            store: Backing key-value store
            config: Queue configuration

        Returns:
            PriorityQueue instance
        """
        queue = cls(config)
        queue._store = store
        return queue

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def max_payload_size(self) -> int:
        return self._config.max_payload_size

    def __repr__(self) -> str:
        return f"PriorityQueue(name={self.name!r}, priorities={len(self._store)})"

    # =========================================================================
    # Core Operations
    # =========================================================================

    def is_empty(self) -> bool:
        """Check whether the queue holds no elements."""
        return len(self._store) == 0

    def insert(self, element: BytesLike, priority: int) -> None:
        """
        Add an element to the queue.

        Args:
            element: Payload bytes, at most ``max_payload_size`` long
            priority: Unsigned 64-bit priority, higher pops first

        Raises:
            PayloadTooLarge: if the payload exceeds the configured cap
            InvalidPriority: if the priority is outside [0, 2**64 - 1]
        """
        key = encode_priority(priority)
        record = encode_record(element, self._config.max_payload_size)

        bucket = self._store.get(key)
        if bucket is None:
            self._store.put(key, record)
        else:
            self._store.put(key, bucket + record)
        logger.debug(
            "queue %s: inserted %d bytes at priority %d",
            self.name, len(record) - 1, priority,
        )

    def peek(self) -> Optional[bytes]:
        """
        Return the highest-priority element without removing it.

        Returns:
            The payload, or None if the queue is empty

        Raises:
            MalformedKey: if the store holds a key insert() did not write
            MalformedRecord: if the store holds a truncated bucket
        """
        try:
            key = self._highest_priority_key()
            bucket = self._store.get(key)
            if bucket is None:
                return None
            payload, _ = decode_front_record(bucket)
        except CorruptStoreError as e:
            logger.error("queue %s: peek aborted: %s", self.name, e)
            raise
        return payload

    def pop(self) -> Optional[bytes]:
        """
        Remove and return the highest-priority element.

        Elements with equal priority come out in the order they were
        inserted.

        Returns:
            The payload, or None if the queue is empty

        Raises:
            MalformedKey: if the store holds a key insert() did not write
            MalformedRecord: if the store holds a truncated bucket
        """
        try:
            key = self._highest_priority_key()
            bucket = self._store.get(key)
            if bucket is None:
                return None
            payload, remainder = decode_front_record(bucket)
        except CorruptStoreError as e:
            logger.error("queue %s: pop aborted: %s", self.name, e)
            raise

        if remainder:
            self._store.put(key, remainder)
        else:
            # keys never map to empty buckets
            self._store.delete(key)
        logger.debug(
            "queue %s: popped %d bytes at priority %d",
            self.name, len(payload), decode_priority(key),
        )
        return payload

    def _highest_priority_key(self) -> bytes:
        """
        Find the key of the highest priority present.

        Returns the encoded zero key when the store is empty; callers tell
        the two apart by looking the key up.
        """
        if self._store.ordered:
            key = self._store.max_key()
            if key is None:
                return encode_priority(0)
            decode_priority(key)
            return bytes(key)

        highest = 0
        for key in self._store.keys():
            priority = decode_priority(key)
            if priority > highest:
                highest = priority
        return encode_priority(highest)

    # =========================================================================
    # Convenience Operations
    # =========================================================================

    def __len__(self) -> int:
        """Number of pending elements across all priorities."""
        return sum(1 for _ in self._iter_payloads())

    def __bool__(self) -> bool:
        return not self.is_empty()

    def drain(self) -> Iterator[bytes]:
        """Pop elements until the queue is empty, highest priority first."""
        while True:
            payload = self.pop()
            if payload is None:
                return
            yield payload

    def stats(self) -> QueueStats:
        """
        Get queue statistics.

        Returns:
            Distinct priorities, pending elements and stored payload bytes
        """
        stats = QueueStats(name=self.name, priorities=len(self._store))
        for payload in self._iter_payloads():
            stats.pending += 1
            stats.stored_bytes += len(payload)
        return stats

    def _iter_payloads(self) -> Iterator[bytes]:
        for key in self._store.keys():
            bucket = self._store.get(key)
            if bucket is None:
                continue
            yield from iter_records(bucket)
