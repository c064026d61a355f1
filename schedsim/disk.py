"""
Disk head scheduling.

All requests are present at t=0, so each algorithm is only an ordering rule
over the request list. FCFS and SSTF are written out directly; SCAN, C-SCAN,
LOOK and C-LOOK are the same sweep with different stopping and wraparound
settings:

=========  ====================  =================
Algorithm  stop_at_last_request  wrap
=========  ====================  =================
SCAN       no                    NONE
C-SCAN     no                    BOUNDARY
LOOK       yes                   NONE
C-LOOK     yes                   NEAREST_REQUEST
=========  ====================  =================

The seek count of every result is the sum of hop distances along its path,
including the hop from the start position and any circular jump.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Union

from .models import Direction, DiskResult, DiskStep, WrapMode

logger = logging.getLogger(__name__)


class _PathBuilder:
    def __init__(self, algorithm: str, start: int) -> None:
        self.algorithm = algorithm
        self.position = start
        self.steps: List[DiskStep] = [DiskStep(track=start, distance=0, kind="start")]

    def visit(self, track: int, kind: str = "serve") -> None:
        distance = abs(track - self.position)
        self.steps.append(DiskStep(track=track, distance=distance, kind=kind))
        logger.debug("%s: %s %d -> %d (+%d)", self.algorithm, kind, self.position, track, distance)
        self.position = track


def _coerce_direction(direction: Union[str, Direction]) -> Direction:
    try:
        return Direction(direction)
    except ValueError as exc:
        raise ValueError(f"Direction must be 'up' or 'down', got {direction!r}") from exc


def _tracks(requests: Iterable[int]) -> List[int]:
    return [int(r) for r in requests]


def fcfs_path(
    requests: Iterable[int],
    start: int,
    *,
    direction: Union[str, Direction] = Direction.UP,
    max_track: Optional[int] = None,
) -> DiskResult:
    """
    First-Come First-Serve: requests are served in the order given.
    """
    builder = _PathBuilder("FCFS", start)
    for track in _tracks(requests):
        builder.visit(track)
    return DiskResult(algorithm="FCFS", start=start, steps=builder.steps, max_track=max_track)


def sstf_path(
    requests: Iterable[int],
    start: int,
    *,
    direction: Union[str, Direction] = Direction.UP,
    max_track: Optional[int] = None,
) -> DiskResult:
    """
    Shortest Seek Time First.

    Greedily serves the unserved request nearest the head; among equal
    distances the one earliest in the request list wins.
    """
    remaining = _tracks(requests)
    builder = _PathBuilder("SSTF", start)

    while remaining:
        idx = min(range(len(remaining)), key=lambda i: abs(remaining[i] - builder.position))
        builder.visit(remaining.pop(idx))

    return DiskResult(algorithm="SSTF", start=start, steps=builder.steps, max_track=max_track)


def _short_of(position: int, boundary: int, direction: Direction) -> bool:
    if direction is Direction.UP:
        return position < boundary
    return position > boundary


def sweep(
    requests: Iterable[int],
    start: int,
    *,
    direction: Union[str, Direction],
    max_track: Optional[int],
    stop_at_last_request: bool,
    wrap: WrapMode,
    algorithm: str = "SWEEP",
) -> DiskResult:
    """
    Elevator-style sweep shared by SCAN, C-SCAN, LOOK and C-LOOK.

    The head first serves every request on the ``direction`` side of ``start``
    (a request equal to ``start`` counts as on that side). Unless
    ``stop_at_last_request`` is set it then travels on to the far boundary
    (``max_track`` going up, 0 going down). The requests behind the start are
    served afterwards:

    - ``WrapMode.NONE`` reverses and serves them on the way back;
    - ``WrapMode.BOUNDARY`` always jumps from the far boundary to the opposite
      one, then serves them in the original direction;
    - ``WrapMode.NEAREST_REQUEST`` jumps straight to the farthest-back request
      and serves them in the original direction, only when some remain.

    An empty request list produces an empty sweep: the path is just ``start``
    and no boundary is visited.
    """
    direction = _coerce_direction(direction)
    needs_boundary = not stop_at_last_request or wrap is WrapMode.BOUNDARY
    if needs_boundary and max_track is None:
        raise ValueError(f"{algorithm} needs an explicit max_track (use --max-track)")

    builder = _PathBuilder(algorithm, start)
    tracks = sorted(_tracks(requests))
    if not tracks:
        return DiskResult(algorithm=algorithm, start=start, steps=builder.steps, direction=direction, max_track=max_track)

    if direction is Direction.UP:
        leading = [t for t in tracks if t >= start]
        behind = [t for t in tracks if t < start]
        far_boundary, near_boundary = max_track, 0
        trailing = behind if wrap is not WrapMode.NONE else behind[::-1]
    else:
        leading = [t for t in reversed(tracks) if t <= start]
        behind = [t for t in tracks if t > start]
        far_boundary, near_boundary = 0, max_track
        trailing = behind[::-1] if wrap is not WrapMode.NONE else behind

    for track in leading:
        builder.visit(track)

    if not stop_at_last_request and _short_of(builder.position, far_boundary, direction):
        builder.visit(far_boundary, kind="boundary")

    if wrap is WrapMode.BOUNDARY:
        builder.visit(near_boundary, kind="wrap")

    for track in trailing:
        builder.visit(track)

    return DiskResult(algorithm=algorithm, start=start, steps=builder.steps, direction=direction, max_track=max_track)


def scan_path(
    requests: Iterable[int],
    start: int,
    *,
    direction: Union[str, Direction] = Direction.UP,
    max_track: Optional[int] = None,
) -> DiskResult:
    return sweep(
        requests,
        start,
        direction=direction,
        max_track=max_track,
        stop_at_last_request=False,
        wrap=WrapMode.NONE,
        algorithm="SCAN",
    )


def cscan_path(
    requests: Iterable[int],
    start: int,
    *,
    direction: Union[str, Direction] = Direction.UP,
    max_track: Optional[int] = None,
) -> DiskResult:
    return sweep(
        requests,
        start,
        direction=direction,
        max_track=max_track,
        stop_at_last_request=False,
        wrap=WrapMode.BOUNDARY,
        algorithm="C-SCAN",
    )


def look_path(
    requests: Iterable[int],
    start: int,
    *,
    direction: Union[str, Direction] = Direction.UP,
    max_track: Optional[int] = None,
) -> DiskResult:
    return sweep(
        requests,
        start,
        direction=direction,
        max_track=max_track,
        stop_at_last_request=True,
        wrap=WrapMode.NONE,
        algorithm="LOOK",
    )


def clook_path(
    requests: Iterable[int],
    start: int,
    *,
    direction: Union[str, Direction] = Direction.UP,
    max_track: Optional[int] = None,
) -> DiskResult:
    return sweep(
        requests,
        start,
        direction=direction,
        max_track=max_track,
        stop_at_last_request=True,
        wrap=WrapMode.NEAREST_REQUEST,
        algorithm="C-LOOK",
    )


DiskAlgorithm = Callable[..., DiskResult]

DISK_ALGORITHMS: Dict[str, DiskAlgorithm] = {
    "fcfs": fcfs_path,
    "sstf": sstf_path,
    "scan": scan_path,
    "cscan": cscan_path,
    "look": look_path,
    "clook": clook_path,
}


def compute_path(
    name: str,
    requests: Iterable[int],
    start: int,
    *,
    direction: Union[str, Direction] = Direction.UP,
    max_track: Optional[int] = None,
) -> DiskResult:
    """
    Dispatch to the requested disk algorithm.
    """
    key = name.lower().replace("-", "")
    if key not in DISK_ALGORITHMS:
        raise ValueError(f"Unknown disk algorithm '{name}'")
    return DISK_ALGORITHMS[key](requests, start, direction=direction, max_track=max_track)


def compare_disk(
    requests: Iterable[int],
    start: int,
    *,
    direction: Union[str, Direction] = Direction.UP,
    max_track: Optional[int] = None,
) -> Dict[str, DiskResult]:
    """
    Run all six disk algorithms against the same request list and start.
    """
    tracks = _tracks(requests)
    return {
        key: func(tracks, start, direction=direction, max_track=max_track)
        for key, func in DISK_ALGORITHMS.items()
    }
