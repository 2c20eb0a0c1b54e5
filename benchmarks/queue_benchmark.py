#!/usr/bin/env python3
"""
Queue Performance Benchmark

Measures kvqueue operation latency as the number of distinct priorities
grows. Peek and pop scan every key, so their cost tracks the number of
distinct priorities, not the number of elements:

1. Key and record encoding
2. Insert latency at various queue sizes
3. Pop latency with many vs. few distinct priorities
4. Batch insert throughput

Usage:
    python queue_benchmark.py
    python queue_benchmark.py --quick       # Quick run
    python queue_benchmark.py --full        # Full benchmark suite
"""

import argparse
import gc
import os
import random
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, List

import numpy as np

# Add parent directory to path for local development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from kvqueue import (
    PriorityQueue,
    encode_priority,
    decode_priority,
    encode_record,
    decode_front_record,
    insert_batch,
)


# ============================================================================
# Benchmark Utilities
# ============================================================================

@dataclass
class BenchmarkResult:
    """Latency samples from one benchmark, in microseconds."""
    name: str
    total_time_s: float
    latencies_us: np.ndarray

    @property
    def iterations(self) -> int:
        return int(self.latencies_us.size)

    @property
    def mean_latency_us(self) -> float:
        return float(self.latencies_us.mean())

    @property
    def throughput_ops(self) -> float:
        return self.iterations / self.total_time_s

    def __str__(self) -> str:
        p50, p95, p99 = np.percentile(self.latencies_us, [50, 95, 99])
        return (
            f"{self.name}: {self.iterations:,} ops in {self.total_time_s:.4f}s\n"
            f"  μs  mean={self.mean_latency_us:.1f} p50={p50:.1f} "
            f"p95={p95:.1f} p99={p99:.1f} max={self.latencies_us.max():.1f}\n"
            f"  {self.throughput_ops:,.1f} ops/s"
        )


def benchmark(name: str, iterations: int, func: Callable[[], Any]) -> BenchmarkResult:
    """Time ``func`` once per iteration."""
    gc.collect()
    samples = np.empty(iterations)
    clock = time.perf_counter

    begin = clock()
    for i in range(iterations):
        t0 = clock()
        func()
        samples[i] = clock() - t0
    elapsed = clock() - begin

    return BenchmarkResult(name, elapsed, samples * 1e6)


# ============================================================================
# Queue Benchmarks
# ============================================================================

def bench_encoding(iterations: int) -> BenchmarkResult:
    """Benchmark key and record encode/decode."""
    payload = b"benchmark-task-payload"

    def encode_decode():
        decode_priority(encode_priority(123456789))
        decode_front_record(encode_record(payload))

    return benchmark("Key+record encode/decode", iterations, encode_decode)


def bench_insert(queue_size: int, iterations: int) -> BenchmarkResult:
    """Benchmark insert operations."""
    queue = PriorityQueue.new()
    for i in range(queue_size):
        queue.insert(f"task-{i}".encode(), random.randint(0, 100))

    def insert():
        queue.insert(b"benchmark-task-payload", random.randint(0, 100))

    return benchmark(f"Insert (queue_size={queue_size:,})", iterations, insert)


def bench_pop(distinct: int, iterations: int) -> BenchmarkResult:
    """Benchmark pop with a given number of distinct priorities."""
    queue = PriorityQueue.new()
    for i in range(iterations):
        queue.insert(f"task-{i}".encode(), i % distinct)

    return benchmark(
        f"Pop (elements={iterations:,}, priorities={distinct:,})",
        iterations,
        queue.pop,
    )


def bench_batch_insert(batch_size: int, iterations: int) -> BenchmarkResult:
    """Benchmark insert_batch with numpy priorities."""
    queue = PriorityQueue.new()
    payloads = [f"task-{i}".encode() for i in range(batch_size)]
    priorities = np.random.randint(0, 100, size=batch_size).astype(np.uint64)

    def batch():
        insert_batch(queue, payloads, priorities)

    return benchmark(f"Batch insert (batch_size={batch_size})", iterations, batch)


def run_benchmarks(full: bool) -> List[BenchmarkResult]:
    sizes = [0, 100, 1000, 10000] if full else [0, 1000]
    distinct_counts = [1, 10, 100, 1000] if full else [1, 100]
    results = []

    print("\n--- Encoding ---")
    results.append(bench_encoding(10000))
    print(results[-1])

    print("\n--- Insert Performance ---")
    for size in sizes:
        results.append(bench_insert(size, 5000))
        print(results[-1])
        print()

    print("\n--- Pop Performance ---")
    for distinct in distinct_counts:
        results.append(bench_pop(distinct, 2000))
        print(results[-1])
        print()

    print("\n--- Batch Insert ---")
    for batch_size in [10, 100]:
        results.append(bench_batch_insert(batch_size, 200))
        print(results[-1])
        print()

    return results


def main():
    parser = argparse.ArgumentParser(description="Queue Performance Benchmark")
    parser.add_argument("--quick", action="store_true", help="Run quick benchmark")
    parser.add_argument("--full", action="store_true", help="Run full benchmark suite")
    args = parser.parse_args()

    results = run_benchmarks(full=args.full)

    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)

    for result in results:
        print(f"{result.name}: {result.mean_latency_us:.1f}μs mean, "
              f"{result.throughput_ops:,.0f} ops/s")


if __name__ == "__main__":
    main()
