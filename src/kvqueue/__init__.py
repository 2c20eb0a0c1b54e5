"""
kvqueue v0.1.0

Priority queue over byte payloads, stored in a flat key-value store.

Example:
    from kvqueue import PriorityQueue

    queue = PriorityQueue.new()
    queue.insert(b"A", 5)
    queue.insert(b"B", 10)

    queue.peek()      # b"B"
    queue.pop()       # b"B"
    queue.pop()       # b"A"
    queue.is_empty()  # True
"""

__version__ = "0.1.0"

from .queue import (
    BasePriorityQueue,
    PriorityQueue,
    QueueConfig,
    QueueStats,
)
from .store import KeyValueStore, InMemoryStore
from .encoding import (
    KEY_SIZE,
    MAX_PAYLOAD_SIZE,
    MAX_PRIORITY,
    encode_priority,
    decode_priority,
    encode_record,
    decode_front_record,
    iter_records,
    payload_bytes,
)
from .bulk import insert_batch

# Type definitions
from .errors import (
    KVQueueError,
    ErrorCode,
    ValidationError,
    PayloadTooLarge,
    InvalidPriority,
    CorruptStoreError,
    MalformedKey,
    MalformedRecord,
)

__all__ = [
    # Version
    "__version__",

    # Queue
    "BasePriorityQueue",
    "PriorityQueue",
    "QueueConfig",
    "QueueStats",
    "insert_batch",

    # Stores
    "KeyValueStore",
    "InMemoryStore",

    # Encoding
    "KEY_SIZE",
    "MAX_PAYLOAD_SIZE",
    "MAX_PRIORITY",
    "encode_priority",
    "decode_priority",
    "encode_record",
    "decode_front_record",
    "iter_records",
    "payload_bytes",

    # Errors
    "KVQueueError",
    "ErrorCode",
    "ValidationError",
    "PayloadTooLarge",
    "InvalidPriority",
    "CorruptStoreError",
    "MalformedKey",
    "MalformedRecord",
]
