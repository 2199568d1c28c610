"""List-scheduling simulator for task dependency graphs.

Parses ``NAME_COST -> NAME_COST`` dependency files and reports the makespan of
shortest-first (``min``) and longest-first (``max``) list scheduling on a fixed
pool of identical processors.

Run from source:

    python -m schedlab simulate caso001.txt
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
