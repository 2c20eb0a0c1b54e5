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
kvqueue Error Types

Error codes are machine-readable and every exception carries an actionable
remediation message where one exists.

Error Code Ranges:
- 6xxx: Validation errors (caller-correctable)
- 9xxx: Internal errors (store contract violations)
"""

from enum import IntEnum
from typing import Optional, Dict, Any


class ErrorCode(IntEnum):
    """Machine-readable error codes."""

    # Validation errors (6xxx)
    PAYLOAD_TOO_LARGE = 6001
    INVALID_PRIORITY = 6002

    # Internal errors (9xxx)
    INTERNAL_ERROR = 9001
    MALFORMED_KEY = 9101
    MALFORMED_RECORD = 9102


class KVQueueError(Exception):
    """
    Base exception for kvqueue errors.

    All kvqueue exceptions inherit from this class, providing:
    - Machine-readable error codes
    - Human-readable messages
    - Optional remediation hints
    - Optional context data

    Example:
        try:
            queue.insert(payload, 10)
        except PayloadTooLarge as e:
            print(f"Error {e.code}: {e.message}")
            print(f"Remediation: {e.remediation}")
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        remediation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.remediation = remediation
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "code": self.code.value,
            "code_name": self.code.name,
            "message": self.message,
            "remediation": self.remediation,
            "context": self.context,
        }


# ============================================================================
# Validation Errors
# ============================================================================

class ValidationError(KVQueueError, ValueError):
    """Base class for errors caused by caller input."""
    pass


class PayloadTooLarge(ValidationError):
    """Payload does not fit in a one-byte length prefix."""
    code = ErrorCode.PAYLOAD_TOO_LARGE

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"Payload of {size} bytes exceeds the {limit} byte limit",
            remediation=f"Shrink the payload or split it into chunks of at most {limit} bytes",
            context={"size": size, "limit": limit},
        )

    @property
    def size(self) -> int:
        return self.context["size"]

    @property
    def limit(self) -> int:
        return self.context["limit"]


class InvalidPriority(ValidationError):
    """Priority is not an unsigned 64-bit integer."""
    code = ErrorCode.INVALID_PRIORITY

    def __init__(self, priority: Any):
        super().__init__(
            f"Priority must be an integer in [0, 2**64 - 1], got {priority!r}",
            remediation="Clamp or rescale priorities into the unsigned 64-bit range",
            context={"priority": priority},
        )


# ============================================================================
# Store Corruption Errors
# ============================================================================

class CorruptStoreError(KVQueueError):
    """
    The backing store holds data that ``insert()`` could never have written.

    These are contract violations, not runtime conditions: they are never
    retried and the failing operation leaves the store untouched.
    """
    pass


class MalformedKey(CorruptStoreError):
    """A store key is not an 8-byte encoded priority."""
    code = ErrorCode.MALFORMED_KEY

    def __init__(self, key: bytes):
        super().__init__(
            f"Key {bytes(key)!r} is {len(key)} bytes, expected 8",
            remediation="Only populate the store through PriorityQueue.insert()",
            context={"key": bytes(key)},
        )


class MalformedRecord(CorruptStoreError):
    """A bucket is shorter than the length prefix of its front record."""
    code = ErrorCode.MALFORMED_RECORD

    def __init__(self, bucket: bytes, declared: Optional[int] = None):
        if declared is None:
            message = "Bucket is empty, expected at least one record"
        else:
            message = (
                f"Record declares {declared} payload bytes but bucket only holds "
                f"{len(bucket) - 1}"
            )
        super().__init__(
            message,
            remediation="Only populate the store through PriorityQueue.insert()",
            context={"bucket_size": len(bucket), "declared": declared},
        )
