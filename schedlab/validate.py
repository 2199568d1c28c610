from __future__ import annotations

from schedlab.model import TaskGraph
from schedlab.types import POLICIES

# Countdowns live in int64 arrays; a single run can add up every cost.
MAX_TOTAL_COST = 2**63 - 1


class CaseValidationError(ValueError):
    pass


def validate_policies(policies: tuple[str, ...] | list[str]) -> None:
    if not policies:
        raise CaseValidationError("at least one policy is required")
    for p in policies:
        if p not in POLICIES:
            raise CaseValidationError(
                f"unknown policy {p!r} (expected one of {', '.join(POLICIES)})"
            )


def validate_case(*, processors: int, graph: TaskGraph) -> None:
    # Zero processors is legal: any task makes the run stall at t=0.
    if processors < 0:
        raise CaseValidationError(
            f"processor count must be >= 0 (got {processors})"
        )

    total = 0
    for name, cost in zip(graph.names, graph.costs):
        if cost < 0:
            raise CaseValidationError(f"task '{name}' cost must be >= 0")
        total += cost
    if total > MAX_TOTAL_COST:
        raise CaseValidationError(
            f"total task cost {total} exceeds the supported range ({MAX_TOTAL_COST})"
        )

    for tid, succs in enumerate(graph.successors):
        for s in succs:
            if not 0 <= s < len(graph):
                raise CaseValidationError(
                    f"task '{graph.names[tid]}' references unknown successor id {s}"
                )
