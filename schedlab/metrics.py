from __future__ import annotations

import math
from typing import Any

from schedlab.types import CaseResult


def _percentile_sorted(values_sorted: list[float], p: int) -> float:
    if not values_sorted:
        return math.nan
    if p <= 0:
        return float(values_sorted[0])
    if p >= 100:
        return float(values_sorted[-1])

    # Linear interpolation between closest ranks.
    pos = (p / 100.0) * (len(values_sorted) - 1)
    lo = int(math.floor(pos))
    hi = int(math.ceil(pos))
    if lo == hi:
        return float(values_sorted[lo])
    frac = pos - lo
    return float(values_sorted[lo] * (1.0 - frac) + values_sorted[hi] * frac)


def _percentiles(values: list[int], ps: list[int]) -> dict[str, float]:
    values_sorted = sorted(float(x) for x in values)
    return {f"p{p}": _percentile_sorted(values_sorted, p) for p in ps}


def compare_policies(case: CaseResult, a: str = "min", b: str = "max") -> str | None:
    """Which policy finished first for one case: ``a``, ``b``, ``tie`` or None."""

    runs = {r.policy: r for r in case.runs}
    if a not in runs or b not in runs or runs[a].stalled or runs[b].stalled:
        return None
    if runs[a].makespan < runs[b].makespan:
        return a
    if runs[b].makespan < runs[a].makespan:
        return b
    return "tie"


def aggregate_cases(cases: list[CaseResult]) -> dict[str, Any]:
    ok = [c for c in cases if not c.failed]

    makespans: dict[str, list[int]] = {}
    stalled_runs = 0
    for c in ok:
        for r in c.runs:
            if r.stalled:
                stalled_runs += 1
                continue
            makespans.setdefault(r.policy, []).append(r.makespan)

    wins = {"min": 0, "max": 0, "tie": 0}
    for c in ok:
        winner = compare_policies(c)
        if winner is not None:
            wins[winner] += 1

    return {
        "cases_requested": len(cases),
        "cases_ok": len(ok),
        "cases_failed": len(cases) - len(ok),
        "runs_stalled": stalled_runs,
        "makespan": {
            policy: _percentiles(values, [50, 90, 99])
            for policy, values in sorted(makespans.items())
        },
        "policy_wins": wins,
        "failures": [
            {"source": c.source, "reason": c.failure_reason}
            for c in cases
            if c.failed
        ],
    }
