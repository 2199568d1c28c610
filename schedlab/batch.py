from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from schedlab.executors import PolicyExecutor, default_executor
from schedlab.io import read_case_lines
from schedlab.model import CaseParseError, ParseOptions, parse_case
from schedlab.sim import simulate_policies
from schedlab.types import POLICIES, CaseResult, TaskInstance
from schedlab.validate import CaseValidationError, validate_case, validate_policies

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchRequest:
    policies: tuple[str, ...] = POLICIES
    parallel: bool = False
    want_trace: bool = False
    parse: ParseOptions = field(default_factory=ParseOptions)


@dataclass(frozen=True)
class BatchOutputs:
    cases: list[CaseResult]
    trace: list[tuple[str, TaskInstance]]

    @property
    def failed(self) -> list[CaseResult]:
        return [c for c in self.cases if c.failed]


def _failed_case(source: str, reason: str) -> CaseResult:
    return CaseResult(
        source=source,
        processors=None,
        task_count=0,
        skipped_lines=0,
        runs=(),
        failed=True,
        failure_reason=reason,
    )


def run_case(
    lines: list[str],
    *,
    source: str,
    request: BatchRequest,
    executor: PolicyExecutor | None = None,
) -> tuple[CaseResult, list[TaskInstance]]:
    """Parse, validate and simulate one source.

    Raises CaseParseError / CaseValidationError; containment is the caller's job.
    """

    case = parse_case(lines, source=source, options=request.parse)
    validate_case(processors=case.processors, graph=case.graph)

    runs, trace = simulate_policies(
        processors=case.processors,
        graph=case.graph,
        policies=request.policies,
        want_trace=request.want_trace,
        executor=executor,
    )
    result = CaseResult(
        source=source,
        processors=case.processors,
        task_count=len(case.graph),
        skipped_lines=len(case.skipped_lines),
        runs=tuple(runs),
        failed=False,
        failure_reason=None,
    )
    return result, trace


def run_source(
    path: Path,
    *,
    request: BatchRequest,
    executor: PolicyExecutor | None = None,
) -> tuple[CaseResult, list[TaskInstance]]:
    source = path.name
    try:
        lines = read_case_lines(path)
        return run_case(lines, source=source, request=request, executor=executor)
    except CaseParseError as e:
        logger.error("%s", e)
        return _failed_case(source, str(e)), []
    except CaseValidationError as e:
        logger.error("%s: %s", source, e)
        return _failed_case(source, str(e)), []
    except Exception as e:  # noqa: BLE001 - one bad source must not stop the batch
        logger.exception("unexpected error while processing %s", source)
        return _failed_case(source, f"{type(e).__name__}: {e}"), []


def run_batch(paths: Iterable[Path], *, request: BatchRequest) -> BatchOutputs:
    validate_policies(request.policies)
    executor = default_executor(parallel=request.parallel)

    cases: list[CaseResult] = []
    trace: list[tuple[str, TaskInstance]] = []
    for path in paths:
        logger.info("processing %s", path)
        case, case_trace = run_source(path, request=request, executor=executor)
        cases.append(case)
        trace.extend((case.source, t) for t in case_trace)
    return BatchOutputs(cases=cases, trace=trace)
