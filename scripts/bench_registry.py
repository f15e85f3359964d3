#!/usr/bin/env python3
"""Registry benchmark: per-call latency and throughput, in process.

RUN:  python scripts/bench_registry.py [N] [TOTAL_TX]

Builds a fresh registry, seeds one identity as both accredited issuer
("TEST-HEI") and attester, then:

  1. Lifecycle run: N iterations of issue / attest (even i) / revoke
     (every 10th i).  Writes one row per call to results_registry.csv.
  2. Concurrency run: TOTAL_TX issue calls at 1, 5, 10 and 20 worker
     threads.  Writes throughput per level to tps_registry.json.

No HTTP involved: this measures the registry core plus the sequencer,
which is the floor under whatever the API adds.
"""

from __future__ import annotations

import sys
from pathlib import Path

from anchor_registry.core.logging import setup_logging
from anchor_registry.services.benchmark import (
    run_concurrency_benchmark,
    run_lifecycle_benchmark,
    write_rows_csv,
    write_throughput_json,
)
from anchor_registry.services.bootstrap import bootstrap_roles
from anchor_registry.services.registry import Registry
from anchor_registry.services.sequencer import OperationSequencer

PLATFORM = "in-process"
BENCH_ADMIN = "bench-admin"
BENCH_CALLER = "bench-hei"


def main() -> None:
    n = int(sys.argv[1]) if len(sys.argv) > 1 else 50
    total_tx = int(sys.argv[2]) if len(sys.argv) > 2 else 50

    setup_logging("warning")
    registry = Registry(BENCH_ADMIN)
    bootstrap_roles(registry, attesters=[BENCH_CALLER], issuers=[BENCH_CALLER])
    sequencer = OperationSequencer()

    print("Registry Benchmark")
    print("=" * 50)

    rows = run_lifecycle_benchmark(registry, sequencer, BENCH_CALLER, n)
    csv_path = Path("results_registry.csv")
    write_rows_csv(rows, csv_path, platform=PLATFORM)
    failed = sum(1 for r in rows if not r.success)
    print(f"Lifecycle: {len(rows)} calls, {failed} failed -> {csv_path}")

    results = run_concurrency_benchmark(registry, sequencer, BENCH_CALLER, total_tx)
    for r in results:
        print(f"  TPS @ {r.concurrency:>2} = {r.tps:,.0f}")
    json_path = Path("tps_registry.json")
    write_throughput_json(results, json_path)
    print(f"Saved throughput results to {json_path}")


if __name__ == "__main__":
    main()
