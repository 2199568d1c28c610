from __future__ import annotations

import argparse
import logging
from pathlib import Path

from schedlab.batch import BatchRequest, run_batch
from schedlab.io import (
    DEFAULT_PATTERN,
    iter_case_paths,
    write_runs_csv,
    write_summary_json,
    write_trace_csv,
)
from schedlab.log import configure_logging
from schedlab.metrics import aggregate_cases
from schedlab.model import ParseOptions
from schedlab.types import POLICIES, CaseResult

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="schedlab", description="List-scheduling makespan simulator"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sim = sub.add_parser("simulate", help="Simulate task graphs under MIN/MAX policies")
    sim.add_argument(
        "inputs",
        nargs="+",
        type=Path,
        help="Case files, or directories scanned with --pattern",
    )
    sim.add_argument("--pattern", default=DEFAULT_PATTERN)
    sim.add_argument(
        "--policy",
        action="append",
        choices=POLICIES,
        help="Policy to run (repeatable; default: min and max)",
    )
    sim.add_argument(
        "--parallel",
        action="store_true",
        help="Run the policies of a case on a thread pool",
    )
    sim.add_argument(
        "--strict",
        action="store_true",
        help="Reject malformed task lines instead of skipping them",
    )
    sim.add_argument("--out-summary", required=False, type=Path)
    sim.add_argument("--out-runs", required=False, type=Path)
    sim.add_argument("--out-trace", required=False, type=Path)
    sim.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return p


def format_case(case: CaseResult) -> list[str]:
    lines = [f"== {case.source}"]
    if case.failed:
        lines.append(f"failed: {case.failure_reason}")
        return lines
    lines.append(f"processors: {case.processors}")
    lines.append(f"tasks: {case.task_count}")
    for r in case.runs:
        suffix = " (stalled)" if r.stalled else ""
        lines.append(f"makespan {r.policy.upper()}: {r.makespan}{suffix}")
    return lines


def main(argv: list[str] | None = None) -> int:
    p = _build_parser()
    args = p.parse_args(argv)

    if args.cmd == "simulate":
        configure_logging(args.log_level)

        paths = list(iter_case_paths(args.inputs, pattern=args.pattern))
        if not paths:
            logger.error("no input cases found in %s", ", ".join(map(str, args.inputs)))
            return 2

        request = BatchRequest(
            policies=tuple(args.policy) if args.policy else POLICIES,
            parallel=args.parallel,
            want_trace=bool(args.out_trace),
            parse=ParseOptions(strict=args.strict),
        )
        outputs = run_batch(paths, request=request)

        for case in outputs.cases:
            print("\n".join(format_case(case)))

        if args.out_summary:
            write_summary_json(args.out_summary, aggregate_cases(outputs.cases))
        if args.out_runs:
            write_runs_csv(args.out_runs, outputs.cases)
        if args.out_trace:
            write_trace_csv(args.out_trace, outputs.trace)

        return 1 if outputs.failed else 0

    raise AssertionError(f"Unhandled command: {args.cmd}")
