from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Iterator

import pytest

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(scope="session", autouse=True)
def _add_repo_root_to_syspath() -> None:
    """Make `schedlab` and `runner` importable when running from `tests/`."""

    root_str = str(ROOT)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


@pytest.fixture(autouse=True)
def _reset_schedlab_logger() -> Iterator[None]:
    """Drop handlers installed by the CLI so they never outlive a captured stream."""

    yield
    logger = logging.getLogger("schedlab")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def examples_dir() -> Path:
    return ROOT / "examples"


@pytest.fixture
def make_graph() -> Callable[..., object]:
    from schedlab.model import TaskGraph

    def _make(*lines: str) -> TaskGraph:
        return TaskGraph.from_lines(list(lines))

    return _make
