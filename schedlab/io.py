from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Iterable, Iterator

from schedlab.types import CaseResult, TaskInstance

DEFAULT_PATTERN = "caso*.txt"


def iter_case_paths(
    inputs: Iterable[Path], *, pattern: str = DEFAULT_PATTERN
) -> Iterator[Path]:
    """Expand directories with ``pattern`` (sorted by name); files pass through."""

    for p in inputs:
        if p.is_dir():
            yield from sorted(c for c in p.glob(pattern) if c.is_file())
        else:
            yield p


def read_case_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


def write_summary_json(path: Path, summary: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(summary, indent=2, sort_keys=True), encoding="utf-8")


def write_runs_csv(path: Path, cases: list[CaseResult]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(
            [
                "source",
                "processors",
                "task_count",
                "skipped_lines",
                "policy",
                "makespan",
                "completed",
                "stalled",
                "failure_reason",
            ]
        )
        for c in cases:
            if c.failed:
                w.writerow(
                    [
                        c.source,
                        c.processors if c.processors is not None else "",
                        c.task_count,
                        c.skipped_lines,
                        "",
                        "",
                        "",
                        "",
                        c.failure_reason or "",
                    ]
                )
                continue
            for r in c.runs:
                w.writerow(
                    [
                        c.source,
                        r.processors,
                        r.total,
                        c.skipped_lines,
                        r.policy,
                        r.makespan,
                        r.completed,
                        int(r.stalled),
                        r.failure_reason or "",
                    ]
                )


def write_trace_csv(path: Path, trace: list[tuple[str, TaskInstance]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(
            ["source", "policy", "task_name", "processor", "start_time", "end_time"]
        )
        for source, t in trace:
            w.writerow(
                [source, t.policy, t.task_name, t.processor, t.start_time, t.end_time]
            )
