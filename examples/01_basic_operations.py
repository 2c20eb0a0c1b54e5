#!/usr/bin/env python3
"""
Example 01: Basic Operations
============================

This example demonstrates the core kvqueue operations:
- Creating a queue
- Insert, Peek, Pop
- FIFO order within a priority
- Handling oversized payloads

Difficulty: Beginner
"""

import os
import sys

# Add parent directory to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from kvqueue import PriorityQueue, QueueConfig
from kvqueue.errors import PayloadTooLarge


def example_priority_order():
    """Highest priority pops first."""
    print("\n" + "=" * 60)
    print("Example 1.1: Priority Order")
    print("=" * 60)

    queue = PriorityQueue.new()
    for payload, priority in [(b"A", 5), (b"B", 10), (b"C", 3), (b"D", 4), (b"E", 6)]:
        queue.insert(payload, priority)
        print(f"✓ Inserted {payload!r} at priority {priority}")

    print(f"\nPeek: {queue.peek()!r}")
    print(f"Stats: {queue.stats()}")

    print("\n--- POP Operations ---")
    while not queue.is_empty():
        print(f"  popped {queue.pop()!r}")

    print(f"✓ Queue empty, pop returns {queue.pop()!r}")


def example_fifo_tier():
    """Equal priorities pop in insertion order."""
    print("\n" + "=" * 60)
    print("Example 1.2: FIFO Within a Priority")
    print("=" * 60)

    queue = PriorityQueue.new(QueueConfig(name="tier"))
    for value in (b"v1", b"v2", b"v3"):
        queue.insert(value, 10)

    print(f"✓ Drained: {list(queue.drain())}")


def example_payload_limit():
    """Payloads are capped at 255 bytes."""
    print("\n" + "=" * 60)
    print("Example 1.3: Payload Limit")
    print("=" * 60)

    queue = PriorityQueue.new()
    queue.insert(b"x" * 255, 1)
    print("✓ 255-byte payload accepted")

    try:
        queue.insert(b"x" * 256, 1)
    except PayloadTooLarge as e:
        print(f"✓ Rejected: {e}")
        print(f"  Remediation: {e.remediation}")


def main():
    example_priority_order()
    example_fifo_tier()
    example_payload_limit()
    print("\n✓ All examples completed successfully!")


if __name__ == "__main__":
    main()
