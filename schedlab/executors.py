from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol

from schedlab.model import TaskGraph
from schedlab.types import RunResult, TaskInstance

PolicyRun = tuple[RunResult, list[TaskInstance]]


class PolicyExecutor(Protocol):
    def execute(
        self,
        *,
        processors: int,
        graph: TaskGraph,
        policies: tuple[str, ...],
        want_trace: bool,
    ) -> list[PolicyRun]:
        raise NotImplementedError


@dataclass(frozen=True)
class SequentialExecutor:
    def execute(
        self,
        *,
        processors: int,
        graph: TaskGraph,
        policies: tuple[str, ...],
        want_trace: bool,
    ) -> list[PolicyRun]:
        from schedlab.engine import simulate_run

        return [
            simulate_run(
                processors=processors,
                graph=graph,
                policy=policy,
                want_trace=want_trace,
            )
            for policy in policies
        ]


@dataclass(frozen=True)
class ThreadedExecutor:
    # Safe because each run copies the in-degrees it mutates; the graph itself
    # is shared read-only.
    max_workers: int | None = None

    def execute(
        self,
        *,
        processors: int,
        graph: TaskGraph,
        policies: tuple[str, ...],
        want_trace: bool,
    ) -> list[PolicyRun]:
        from schedlab.engine import simulate_run

        workers = self.max_workers or max(1, len(policies))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(
                    simulate_run,
                    processors=processors,
                    graph=graph,
                    policy=policy,
                    want_trace=want_trace,
                )
                for policy in policies
            ]
            return [f.result() for f in futures]


def default_executor(*, parallel: bool = False) -> PolicyExecutor:
    if parallel:
        return ThreadedExecutor()
    return SequentialExecutor()
