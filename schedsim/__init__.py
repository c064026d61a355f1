"""
schedsim package.

Deterministic CPU and disk scheduling simulation with a command-line
front end for replaying and comparing algorithms.
"""

from .algorithms import ALGORITHMS, make_policy, run_algorithm
from .disk import DISK_ALGORITHMS, compare_disk, compute_path
from .engine import advance, compute_full_trace, initial_state, iter_states

__all__ = [
    "ALGORITHMS",
    "DISK_ALGORITHMS",
    "advance",
    "compare_disk",
    "compute_full_trace",
    "compute_path",
    "initial_state",
    "iter_states",
    "make_policy",
    "run_algorithm",
]
