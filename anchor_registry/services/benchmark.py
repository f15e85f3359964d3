"""In-process benchmark harness for the registry lifecycle.

Two workloads:

  run_lifecycle_benchmark
    For i in 0..n-1: issue a fresh credential, attest it when i is even,
    revoke it (reason "test") when i is a multiple of 10.  Every call is
    recorded as one BenchRow with its latency and outcome.  A rejection
    ends that iteration and is recorded as a failed row, the rest of the
    run continues.

  run_concurrency_benchmark
    Submit ``total`` issue calls from ``concurrency`` worker threads at
    once and report throughput.  The sequencer still admits them one at
    a time; this measures how much the admission lock costs under
    contention.

The caller must already hold both the issuer and attester roles (see
bootstrap_roles).  Both workloads go through the OperationSequencer, the
same path the HTTP API uses.
"""

from __future__ import annotations

import csv
import json
import time
import uuid
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from pathlib import Path

from anchor_registry.core.errors import RegistryError
from anchor_registry.models.identity import digest32
from anchor_registry.services.registry import Registry
from anchor_registry.services.sequencer import OperationSequencer

DEFAULT_LEVELS = (1, 5, 10, 20)


@dataclass(frozen=True, slots=True)
class BenchRow:
    operation: str
    i: int
    position: int
    latency_ms: float
    success: bool
    error: str = ""


@dataclass(frozen=True, slots=True)
class ThroughputResult:
    concurrency: int
    total: int
    duration_sec: float
    tps: float


def _fresh_cred_id(i: int) -> bytes:
    return digest32(f"cred:{i}:{uuid.uuid4().hex}")


def run_lifecycle_benchmark(
    registry: Registry,
    sequencer: OperationSequencer,
    caller: str,
    n: int,
    *,
    pointer: str = "",
) -> list[BenchRow]:
    rows: list[BenchRow] = []
    lifecycle = registry.lifecycle

    for i in range(n):
        cred_id = _fresh_cred_id(i)
        steps: list[tuple[str, tuple]] = [
            (
                "issue",
                (lifecycle.issue, caller, cred_id, digest32(f"holder:{i}"),
                 digest32(f"commit:{i}"), pointer),
            )
        ]
        if i % 2 == 0:
            steps.append(("attest", (lifecycle.attest, caller, cred_id)))
        if i % 10 == 0:
            steps.append(("revoke", (lifecycle.revoke, caller, cred_id, "test")))

        for operation, (fn, *args) in steps:
            start = time.perf_counter()
            try:
                admitted = sequencer.submit(operation, fn, *args)
            except RegistryError as exc:
                rows.append(
                    BenchRow(
                        operation=operation,
                        i=i,
                        position=sequencer.position,
                        latency_ms=(time.perf_counter() - start) * 1000,
                        success=False,
                        error=exc.code,
                    )
                )
                break
            rows.append(
                BenchRow(
                    operation=operation,
                    i=i,
                    position=admitted.position,
                    latency_ms=(time.perf_counter() - start) * 1000,
                    success=True,
                )
            )
    return rows


def run_concurrency_benchmark(
    registry: Registry,
    sequencer: OperationSequencer,
    caller: str,
    total: int,
    levels: Sequence[int] = DEFAULT_LEVELS,
) -> list[ThroughputResult]:
    results: list[ThroughputResult] = []
    offset = 0

    for concurrency in levels:
        def _issue(i: int) -> int:
            admitted = sequencer.submit(
                "issue",
                registry.lifecycle.issue,
                caller,
                _fresh_cred_id(i),
                digest32(f"holder:{i}"),
                digest32(f"commit:{i}"),
            )
            return admitted.position

        start = time.perf_counter()
        with ThreadPoolExecutor(max_workers=concurrency) as pool:
            list(pool.map(_issue, range(offset, offset + total)))
        duration = time.perf_counter() - start
        offset += total

        results.append(
            ThroughputResult(
                concurrency=concurrency,
                total=total,
                duration_sec=duration,
                tps=total / duration if duration > 0 else float("inf"),
            )
        )
    return results


def write_rows_csv(rows: Sequence[BenchRow], path: Path, *, platform: str) -> None:
    fields = ["platform", "operation", "i", "position", "latency_ms", "success", "error"]
    with path.open("w", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=fields)
        writer.writeheader()
        for row in rows:
            writer.writerow({"platform": platform, **asdict(row)})


def write_throughput_json(results: Sequence[ThroughputResult], path: Path) -> None:
    path.write_text(json.dumps([asdict(r) for r in results], indent=2))
