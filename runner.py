from __future__ import annotations

"""Repo-root convenience shim for simulating every case in a directory.

This keeps the most common local workflow short:

    python runner.py            # scans ./caso*.txt
    python runner.py examples/

It delegates to the canonical entry point:

    python -m schedlab simulate <dir>
"""

import sys


def main() -> int:
    """Simulate all ``caso*.txt`` files in the given directory (default: cwd).

    Extra arguments after the directory are forwarded to ``schedlab simulate``.
    """

    from schedlab.cli import main as cli_main

    args = sys.argv[1:]
    if not args or args[0].startswith("-"):
        args = [".", *args]

    return cli_main(["simulate", *args])


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
