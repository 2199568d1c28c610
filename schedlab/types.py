from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Policy = Literal["min", "max"]

POLICIES: tuple[Policy, ...] = ("min", "max")


@dataclass(frozen=True)
class TaskInstance:
    policy: str
    task_name: str
    processor: int
    start_time: int
    end_time: int


@dataclass(frozen=True)
class RunResult:
    policy: str
    processors: int
    makespan: int
    completed: int
    total: int
    stalled: bool
    failure_reason: str | None
    pending_tasks: tuple[str, ...] = ()


@dataclass(frozen=True)
class CaseResult:
    source: str
    processors: int | None
    task_count: int
    skipped_lines: int
    runs: tuple[RunResult, ...]
    failed: bool
    failure_reason: str | None

    def makespan(self, policy: str) -> int | None:
        for r in self.runs:
            if r.policy == policy:
                return r.makespan
        return None
