from __future__ import annotations

# Public simulation entrypoints. The event loop lives in schedlab.engine; the
# executor decides whether policy runs happen one after another or on threads.

from schedlab.engine import simulate_run
from schedlab.executors import PolicyExecutor, default_executor
from schedlab.model import TaskGraph
from schedlab.types import POLICIES, RunResult, TaskInstance


def simulate(processors: int, graph: TaskGraph, policy: str) -> int:
    """Makespan of one list-scheduling run."""

    run, _ = simulate_run(processors=processors, graph=graph, policy=policy)
    return run.makespan


def simulate_policies(
    *,
    processors: int,
    graph: TaskGraph,
    policies: tuple[str, ...] = POLICIES,
    want_trace: bool = False,
    executor: PolicyExecutor | None = None,
) -> tuple[list[RunResult], list[TaskInstance]]:
    executor = executor or default_executor()
    results = executor.execute(
        processors=processors,
        graph=graph,
        policies=tuple(policies),
        want_trace=want_trace,
    )
    runs: list[RunResult] = []
    traces: list[TaskInstance] = []
    for run, trace in results:
        runs.append(run)
        if want_trace:
            traces.extend(trace)
    return runs, traces
