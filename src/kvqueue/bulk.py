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
Bulk insertion.

Usage
-----
```python
import numpy as np
from kvqueue import PriorityQueue
from kvqueue.bulk import insert_batch

queue = PriorityQueue.new()
priorities = np.array([5, 10, 3], dtype=np.uint64)
insert_batch(queue, [b"a", b"b", b"c"], priorities)
```

The whole batch is validated before anything is inserted, so a bad
payload or priority leaves the queue unchanged.
"""

from __future__ import annotations

import logging
import operator
from typing import Any, List, Sequence

import numpy as np

from .encoding import BytesLike, encode_priority, payload_bytes
from .errors import InvalidPriority, PayloadTooLarge
from .queue import PriorityQueue

logger = logging.getLogger(__name__)


def _normalize_priorities(priorities: Any, expected: int) -> List[int]:
    """Validate a priority array and return it as Python ints."""
    arr = np.asarray(priorities)
    if arr.ndim != 1:
        raise ValueError(f"priorities must be one-dimensional, got shape {arr.shape}")
    if arr.shape[0] != expected:
        raise ValueError(
            f"got {arr.shape[0]} priorities for {expected} payloads"
        )
    if arr.size == 0:
        return []

    if arr.dtype == np.bool_:
        raise InvalidPriority(arr[0].item())

    if np.issubdtype(arr.dtype, np.integer):
        lowest = arr.min()
        if lowest < 0:
            raise InvalidPriority(lowest.item())
        return arr.tolist()

    if arr.dtype == object:
        # Python ints beyond int64 land here
        values = arr.tolist()
        for value in values:
            encode_priority(value)
        return [operator.index(value) for value in values]

    raise InvalidPriority(arr[0].item())


def insert_batch(
    queue: PriorityQueue,
    payloads: Sequence[BytesLike],
    priorities: Any,
) -> int:
    """
    Insert many payloads in input order.

    Args:
        queue: Target queue
        payloads: Payload bytes, each at most the queue's payload cap
        priorities: Sequence or numpy array of unsigned 64-bit priorities,
            one per payload

    Returns:
        Number of payloads inserted

    Raises:
        ValueError: if priorities is not 1-D or its length differs
        InvalidPriority: if any priority is negative, non-integral or
            too large
        PayloadTooLarge: if any payload exceeds the queue's cap
        TypeError: if any payload is not bytes-like
    """
    values = _normalize_priorities(priorities, len(payloads))

    limit = queue.max_payload_size
    data = [payload_bytes(payload) for payload in payloads]
    for payload in data:
        if len(payload) > limit:
            raise PayloadTooLarge(len(payload), limit)

    for payload, priority in zip(data, values):
        queue.insert(payload, priority)

    logger.debug("queue %s: batch inserted %d payloads", queue.name, len(values))
    return len(values)
