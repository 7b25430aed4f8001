"""
Dictionary Command-Line Interface (CLI)

Small operational tool around :class:`commons.datastructures.Dictionary`:
- Print the one-at-a-time hash of keys (handy when chasing collisions)
- Benchmark the core operations over exponentially growing workloads

Usage examples:
    python -m commons.cli hash alpha beta
    python -m commons.cli bench --base-input 100 --rounds 8 --path dictionary_bench.csv
"""

import argparse
import csv
import logging
import random
import statistics
import sys
import time

from .datastructures import Dictionary, one_at_a_time

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "Input Size",
    "Operation",
    "Average Time (ms)",
    "Standard Deviation (ms)",
    "Final Capacity",
]


# -------------------------------------------------------------------
# Workload helpers
# -------------------------------------------------------------------
def generate_random_pairs(size: int):
    """Generate a list of random (key, value) pairs; keys may repeat."""
    return [(f"k{random.randint(0, size * 10)}", random.randint(0, 1000000)) for _ in range(size)]


def measure_operation_time(operation, input_size: int, iterations: int = 5):
    """Run the operation several times; return (avg ms, std dev ms, final capacity)."""
    times = []
    capacity = 0
    for _ in range(iterations):
        data = generate_random_pairs(input_size)
        start = time.perf_counter()
        d = operation(data)
        end = time.perf_counter()
        times.append((end - start) * 1000)  # convert to milliseconds
        capacity = d.capacity

    avg_time = statistics.mean(times)
    std_dev = statistics.stdev(times) if len(times) > 1 else 0.0
    return avg_time, std_dev, capacity


# -------------------------------------------------------------------
# Operations to benchmark
# -------------------------------------------------------------------
def _filled(data):
    d = Dictionary()
    for k, v in data:
        d.put(k, v)
    return d


def op_put(data):
    return _filled(data)


def op_get(data):
    d = _filled(data)
    for k, _ in data:
        d.get(k)
    return d


def op_remove(data):
    d = _filled(data)
    for k, _ in data:
        d.remove(k, None)
    return d


def op_iterate(data):
    d = _filled(data)
    seen = []
    d.iterate(seen.append)
    return d


def op_clean(data):
    d = _filled(data)
    d.clean()
    return d


OPERATIONS = {
    "put": op_put,
    "get": op_get,
    "remove": op_remove,
    "iterate": op_iterate,
    "clean": op_clean,
}


def run_benchmarks(output_file=None, base_input: int = 100, rounds: int = 12, iterations: int = 5):
    """Run exponential performance tests; returns the rows that were produced."""
    input_sizes = [base_input * (2 ** i) for i in range(rounds)]
    rows = []
    for op_name, op_func in OPERATIONS.items():
        for size in input_sizes:
            avg_time, std_time, capacity = measure_operation_time(op_func, size, iterations)
            rows.append([size, op_name, f"{avg_time:.3f}", f"{std_time:.3f}", capacity])
            print(f"{op_name:<10} | Size: {size:<8} | Avg Time: {avg_time:.3f} ms | "
                  f"Std: {std_time:.3f} ms | Capacity: {capacity}")

    if output_file:
        with open(output_file, "w", newline="") as csvfile:
            writer = csv.writer(csvfile)
            writer.writerow(CSV_HEADER)
            writer.writerows(rows)
        print(f"\nBenchmark completed. Results saved to {output_file}")
    return rows


# -------------------------------------------------------------------
# Command handlers
# -------------------------------------------------------------------
def cmd_hash(args):
    """Print the 32-bit hash of every key given on the command line."""
    for key in args.keys:
        print(f"{key}\t0x{one_at_a_time(key.encode('utf-8')):08x}")


def cmd_bench(args):
    """Benchmark Dictionary operations."""
    if args.base_input < 1 or args.rounds < 1 or args.iterations < 1:
        raise SystemExit("--base-input, --rounds and --iterations must be positive")
    logger.debug("benchmarking: base_input=%d rounds=%d iterations=%d",
                 args.base_input, args.rounds, args.iterations)
    run_benchmarks(args.path, args.base_input, args.rounds, args.iterations)


# -------------------------------------------------------------------
# CLI parser setup
# -------------------------------------------------------------------
def build_parser():
    """Build the argparse command-line parser with subcommands."""
    p = argparse.ArgumentParser(prog="python -m commons.cli", description="String-keyed dictionary tools")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("hash", help="Print the one-at-a-time hash of keys")
    s.add_argument("keys", nargs="+")
    s.set_defaults(func=cmd_hash)

    s = sub.add_parser("bench", help="Benchmark dictionary operations")
    s.add_argument("--base-input", type=int, default=100)
    s.add_argument("--rounds", type=int, default=12)
    s.add_argument("--iterations", type=int, default=5)
    s.add_argument("--path", default=None, help="Write results to this CSV file")
    s.set_defaults(func=cmd_bench)

    return p


# -------------------------------------------------------------------
# Entry point
# -------------------------------------------------------------------
def main(argv=None):
    """CLI entry point when invoked via `python -m commons.cli`."""
    argv = argv or sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    args.func(args)


if __name__ == "__main__":
    main()
