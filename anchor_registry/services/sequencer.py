"""External sequencing layer for registry mutations.

The registry core assumes its mutations arrive one at a time in a global
order and never locks anything itself.  This is the piece that makes
that assumption true inside a server where requests run on a thread
pool: every mutation is admitted through ``submit()``, which holds a
single lock for the whole operation and stamps it with the next position
in a strict total order.

Reads do not go through the sequencer.  Anchor and issuer records are
immutable and replaced whole, so a reader racing a writer sees either
the previous record or the next one, never a half-applied transition.

Each admitted operation is also timed and counted here, by operation
name and outcome, which is where the benchmark harness and the
Prometheus dashboards get per-call latency from.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from anchor_registry.core.errors import RegistryError
from anchor_registry.core.metrics import REGISTRY_OPERATION_DURATION, REGISTRY_OPERATIONS

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Admitted(Generic[T]):
    """Result of one sequenced operation.

    position:   1-based slot in the global order
    result:     whatever the operation returned
    latency_ms: time spent applying the operation, lock wait excluded
    """

    position: int
    result: T
    latency_ms: float


class OperationSequencer:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    def submit(self, operation: str, fn: Callable[..., T], *args, **kwargs) -> Admitted[T]:
        """Run ``fn`` as the only active mutation, in admission order.

        RegistryError rejections still consume a position (the operation
        was admitted and ran to completion, it just did not apply) and
        propagate to the caller unchanged.
        """
        with self._lock:
            self._position += 1
            position = self._position
            start = time.perf_counter()
            outcome = "ok"
            try:
                result = fn(*args, **kwargs)
            except RegistryError as exc:
                outcome = exc.code
                raise
            except Exception:
                outcome = "INTERNAL_ERROR"
                logger.exception("Operation %s failed at position=%d", operation, position)
                raise
            finally:
                elapsed = time.perf_counter() - start
                REGISTRY_OPERATIONS.labels(operation=operation, outcome=outcome).inc()
                REGISTRY_OPERATION_DURATION.labels(operation=operation).observe(elapsed)
                logger.debug(
                    "Sequenced %s position=%d outcome=%s (%.3fms)",
                    operation,
                    position,
                    outcome,
                    elapsed * 1000,
                )

        return Admitted(position=position, result=result, latency_ms=elapsed * 1000)


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

sequencer = OperationSequencer()
