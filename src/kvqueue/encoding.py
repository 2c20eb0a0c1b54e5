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
Key and record encoding.

Priority keys are big-endian u64 so byte order matches numeric order.
Buckets are concatenations of records, each a one-byte length prefix
followed by the payload:

    bucket := record*
    record := len:u8 payload[len]
"""

from __future__ import annotations

import operator
import struct
from typing import Iterator, Tuple, Union

from .errors import InvalidPriority, MalformedKey, MalformedRecord, PayloadTooLarge

BytesLike = Union[bytes, bytearray, memoryview]

KEY_SIZE = 8
MAX_PAYLOAD_SIZE = 255
MAX_PRIORITY = (1 << 64) - 1

_U64_BE = struct.Struct('>Q')


# ============================================================================
# Priority Keys - Big-Endian for Lexicographic Ordering
# ============================================================================

def encode_priority(priority: int) -> bytes:
    """Encode a u64 priority as 8 big-endian bytes."""
    if isinstance(priority, bool):
        raise InvalidPriority(priority)
    try:
        value = operator.index(priority)
    except TypeError:
        raise InvalidPriority(priority) from None
    if value < 0 or value > MAX_PRIORITY:
        raise InvalidPriority(priority)
    return _U64_BE.pack(value)


def decode_priority(key: BytesLike) -> int:
    """Decode an 8-byte big-endian key back into its priority."""
    if len(key) != KEY_SIZE:
        raise MalformedKey(key)
    return _U64_BE.unpack(key)[0]


# ============================================================================
# Element Records - Length-Prefixed Payloads
# ============================================================================

def payload_bytes(payload: BytesLike) -> bytes:
    """Copy a bytes-like payload into ``bytes``.

    Sizes are counted in bytes, not items, so a memoryview over a
    multi-byte array is measured by its buffer length.

    Raises:
        TypeError: if ``payload`` does not support the buffer protocol
    """
    return memoryview(payload).tobytes()


def encode_record(payload: BytesLike, limit: int = MAX_PAYLOAD_SIZE) -> bytes:
    """Prefix ``payload`` with its length byte.

    Raises:
        PayloadTooLarge: if the payload is longer than ``limit`` bytes
        TypeError: if ``payload`` is not bytes-like
    """
    data = payload_bytes(payload)
    size = len(data)
    if size > limit:
        raise PayloadTooLarge(size, limit)
    return bytes((size,)) + data


def decode_front_record(bucket: BytesLike) -> Tuple[bytes, bytes]:
    """Split the first record off a bucket.

    Returns:
        ``(payload, remainder)`` where remainder holds the records that
        follow, possibly empty.

    Raises:
        MalformedRecord: if the bucket is empty or truncated
    """
    if len(bucket) == 0:
        raise MalformedRecord(bucket)
    size = bucket[0]
    end = 1 + size
    if len(bucket) < end:
        raise MalformedRecord(bucket, size)
    return bytes(bucket[1:end]), bytes(bucket[end:])


def iter_records(bucket: BytesLike) -> Iterator[bytes]:
    """Yield every payload in a bucket, front first."""
    while bucket:
        payload, bucket = decode_front_record(bucket)
        yield payload
