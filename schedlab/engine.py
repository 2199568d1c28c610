from __future__ import annotations

# Next-event list scheduler. Mutable state (remaining in-degrees, processor
# bank, ready heap) is built per run from the immutable TaskGraph, so runs
# over the same graph never share counters.

import heapq
import logging
from typing import Callable

import numpy as np

from schedlab.model import TaskGraph
from schedlab.types import RunResult, TaskInstance

logger = logging.getLogger(__name__)

IDLE = -1

PriorityKey = Callable[[int, str], tuple[int, str]]


def _priority_key(policy: str) -> PriorityKey:
    # Equal costs fall back to the task name, ascending, in both policies.
    if policy == "min":
        return lambda cost, name: (cost, name)
    if policy == "max":
        return lambda cost, name: (-cost, name)
    raise AssertionError(f"unhandled policy: {policy}")


class ProcessorBank:
    """Identical processors held as two parallel int64 arrays.

    ``task[i]`` is the id running on processor ``i`` (IDLE when free) and
    ``remaining[i]`` its countdown.
    """

    def __init__(self, count: int) -> None:
        self.task = np.full(count, IDLE, dtype=np.int64)
        self.remaining = np.zeros(count, dtype=np.int64)

    def __len__(self) -> int:
        return int(self.task.shape[0])

    def busy_mask(self) -> np.ndarray:
        return self.task != IDLE

    def idle_slots(self) -> list[int]:
        return [int(i) for i in np.flatnonzero(self.task == IDLE)]

    def start(self, slot: int, task_id: int, cost: int) -> None:
        self.task[slot] = task_id
        self.remaining[slot] = cost

    def next_event(self) -> int | None:
        busy = self.busy_mask()
        if not busy.any():
            return None
        return int(self.remaining[busy].min())

    def advance(self, elapsed: int) -> list[tuple[int, int]]:
        """Count every busy processor down; return ``(slot, task_id)`` finished."""

        busy = self.busy_mask()
        self.remaining[busy] -= elapsed
        finished: list[tuple[int, int]] = []
        for slot in np.flatnonzero(busy & (self.remaining <= 0)):
            finished.append((int(slot), int(self.task[slot])))
            self.task[slot] = IDLE
            self.remaining[slot] = 0
        return finished


def simulate_run(
    *,
    processors: int,
    graph: TaskGraph,
    policy: str,
    want_trace: bool = False,
) -> tuple[RunResult, list[TaskInstance]]:
    key = _priority_key(policy)
    total = len(graph)
    in_degree = list(graph.in_degree)
    finished = [False] * total

    ready: list[tuple[tuple[int, str], int]] = [
        (key(graph.costs[t], graph.names[t]), t) for t in range(total) if in_degree[t] == 0
    ]
    heapq.heapify(ready)

    bank = ProcessorBank(processors)
    trace: list[TaskInstance] = []
    clock = 0
    completed = 0
    stalled = False
    failure_reason: str | None = None

    while completed < total:
        for slot in bank.idle_slots():
            if not ready:
                break
            _, tid = heapq.heappop(ready)
            cost = graph.costs[tid]
            bank.start(slot, tid, cost)
            if want_trace:
                trace.append(
                    TaskInstance(
                        policy=policy,
                        task_name=graph.names[tid],
                        processor=slot,
                        start_time=clock,
                        end_time=clock + cost,
                    )
                )

        elapsed = bank.next_event()
        if elapsed is None:
            stalled = True
            failure_reason = (
                f"stalled with {total - completed} of {total} task(s) unfinished; "
                "check the task graph for cycles"
            )
            logger.warning(
                "policy %s: no task running or ready at t=%d, %s",
                policy,
                clock,
                failure_reason,
            )
            break

        clock += elapsed
        for _slot, tid in bank.advance(elapsed):
            completed += 1
            finished[tid] = True
            for succ in graph.successors[tid]:
                in_degree[succ] -= 1
                if in_degree[succ] == 0:
                    heapq.heappush(
                        ready, (key(graph.costs[succ], graph.names[succ]), succ)
                    )

    pending = tuple(graph.names[t] for t in range(total) if not finished[t])
    run = RunResult(
        policy=policy,
        processors=processors,
        makespan=clock,
        completed=completed,
        total=total,
        stalled=stalled,
        failure_reason=failure_reason,
        pending_tasks=pending if stalled else (),
    )
    return run, trace
