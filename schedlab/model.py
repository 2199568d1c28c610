from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable

logger = logging.getLogger(__name__)

_NODE_RE = re.compile(r"(\w+)_(\d+)", re.ASCII)
_NON_DIGIT_RE = re.compile(r"[^0-9]")


class CaseParseError(ValueError):
    def __init__(
        self, message: str, *, source: str | None = None, line: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.line = line

    def __str__(self) -> str:
        parts: list[str] = []
        if self.source:
            parts.append(self.source)
        if self.line is not None:
            parts.append(str(self.line))
        loc = ":".join(parts) if parts else "<input>"
        return f"{loc}: {self.message}"


@dataclass(frozen=True)
class ParseOptions:
    comment_marker: str = "#"
    edge_separator: str = "->"
    header_marker: str = "proc"
    strict: bool = False


@dataclass(frozen=True)
class TaskGraph:
    """Immutable task arena.

    Tasks are addressed by the integer id assigned when their name was first
    seen. ``successors[i]`` keeps one entry per edge line, so duplicated edges
    show up twice and ``in_degree[i]`` counts them twice.
    """

    names: tuple[str, ...]
    costs: tuple[int, ...]
    successors: tuple[tuple[int, ...], ...]
    in_degree: tuple[int, ...]
    ids: dict[str, int] = field(default_factory=dict, compare=False)

    def __len__(self) -> int:
        return len(self.names)

    def task_id(self, name: str) -> int:
        return self.ids[name]

    def cost_of(self, name: str) -> int:
        return self.costs[self.ids[name]]

    def successors_of(self, name: str) -> tuple[str, ...]:
        return tuple(self.names[s] for s in self.successors[self.ids[name]])

    @property
    def roots(self) -> tuple[str, ...]:
        return tuple(n for i, n in enumerate(self.names) if self.in_degree[i] == 0)

    @staticmethod
    def from_lines(
        lines: Iterable[str], *, options: ParseOptions | None = None
    ) -> "TaskGraph":
        builder = GraphBuilder(options=options)
        for line_no, line in enumerate(lines, start=1):
            builder.feed(line, line_no=line_no)
        return builder.build()


class GraphBuilder:
    """Accumulates task declarations and edges line by line."""

    def __init__(
        self, *, options: ParseOptions | None = None, source: str | None = None
    ) -> None:
        self.options = options or ParseOptions()
        self.source = source
        self.skipped_lines: list[int] = []
        self._ids: dict[str, int] = {}
        self._names: list[str] = []
        self._costs: list[int] = []
        self._successors: list[list[int]] = []
        self._in_degree: list[int] = []

    def _intern(self, name: str, cost: int) -> int:
        tid = self._ids.get(name)
        if tid is None:
            tid = len(self._names)
            self._ids[name] = tid
            self._names.append(name)
            self._costs.append(cost)
            self._successors.append([])
            self._in_degree.append(0)
        return tid

    def add_edge(self, pred: int, succ: int) -> None:
        self._successors[pred].append(succ)
        self._in_degree[succ] += 1

    def _skip(self, line_no: int | None, reason: str) -> None:
        if self.options.strict:
            raise CaseParseError(reason, source=self.source, line=line_no)
        logger.debug("skipping line %s of %s: %s", line_no, self.source, reason)
        if line_no is not None:
            self.skipped_lines.append(line_no)

    def feed(self, line: str, *, line_no: int | None = None) -> None:
        text = line.strip()
        if not text or text.startswith(self.options.comment_marker):
            return

        sides = text.split(self.options.edge_separator)
        # "A_3 ->" is a plain declaration, not a broken edge.
        while len(sides) > 1 and sides[-1] == "":
            sides.pop()
        pred_m = _NODE_RE.search(sides[0].strip())
        if pred_m is None:
            self._skip(line_no, f"no task reference in {sides[0].strip()!r}")
            return
        pred = self._intern(pred_m.group(1), int(pred_m.group(2)))

        if len(sides) > 1:
            succ_m = _NODE_RE.search(sides[1].strip())
            if succ_m is None:
                self._skip(line_no, f"no successor task reference in {text!r}")
                return
            succ = self._intern(succ_m.group(1), int(succ_m.group(2)))
            self.add_edge(pred, succ)

    def build(self) -> TaskGraph:
        return TaskGraph(
            names=tuple(self._names),
            costs=tuple(self._costs),
            successors=tuple(tuple(s) for s in self._successors),
            in_degree=tuple(self._in_degree),
            ids=dict(self._ids),
        )


@dataclass(frozen=True)
class ParsedCase:
    source: str
    processors: int
    graph: TaskGraph
    skipped_lines: tuple[int, ...] = ()


def find_processor_header(
    lines: list[str], *, marker: str = "proc"
) -> tuple[int, int] | None:
    """Return ``(processors, index)`` of the first header line, or None.

    A header is a line containing ``marker`` (case-insensitive) and at least
    one digit; every digit on the line is concatenated into the count.
    """

    for idx, raw in enumerate(lines):
        line = raw.strip()
        if not line or marker.lower() not in line.lower():
            continue
        digits = _NON_DIGIT_RE.sub("", line)
        if digits:
            return int(digits), idx
    return None


def parse_case(
    lines: list[str], *, source: str = "<input>", options: ParseOptions | None = None
) -> ParsedCase:
    opts = options or ParseOptions()
    header = find_processor_header(lines, marker=opts.header_marker)
    if header is None:
        raise CaseParseError(
            "processor declaration (e.g. '# Proc 5') not found", source=source
        )
    processors, header_idx = header

    builder = GraphBuilder(options=opts, source=source)
    for idx in range(header_idx + 1, len(lines)):
        builder.feed(lines[idx], line_no=idx + 1)
    graph = builder.build()

    if builder.skipped_lines:
        logger.debug(
            "%s: skipped %d malformed line(s)", source, len(builder.skipped_lines)
        )
    return ParsedCase(
        source=source,
        processors=processors,
        graph=graph,
        skipped_lines=tuple(builder.skipped_lines),
    )
