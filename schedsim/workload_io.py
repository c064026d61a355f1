from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, List, Optional

from .models import Direction, DiskWorkload, Process


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a validated list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    validate_processes(processes)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _process_from_mapping(mapping) -> Process:
    try:
        # "pid" is accepted for workloads written for the older column name.
        name = mapping["name"] if "name" in mapping else mapping["pid"]
        name = str(name).strip()
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    priority_val = mapping.get("priority")
    try:
        priority = int(priority_val) if priority_val not in (None, "") else None
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid priority in process entry: {mapping!r}") from exc

    return Process(
        name=name,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )


def validate_processes(processes: Iterable[Process]) -> None:
    """
    Reject workloads the simulator cannot run meaningfully.

    Names must be non-empty and unique, arrival times non-negative, burst
    times positive and priorities (when given) non-negative.
    """
    seen = set()
    for p in processes:
        if not p.name:
            raise ValueError("Process name cannot be empty")
        if p.name in seen:
            raise ValueError(f"Process name must be unique: {p.name!r}")
        seen.add(p.name)
        if p.arrival_time < 0:
            raise ValueError(f"Process {p.name!r}: arrival time must be >= 0")
        if p.burst_time <= 0:
            raise ValueError(f"Process {p.name!r}: burst time must be > 0")
        if p.priority is not None and p.priority < 0:
            raise ValueError(f"Process {p.name!r}: priority must be >= 0")


def parse_track_requests(text: str, max_track: Optional[int] = None) -> List[int]:
    """
    Parse a comma-separated list of track numbers such as ``"98, 183, 37"``.

    Duplicates are kept. With ``max_track`` every track must lie in
    ``[0, max_track]``.
    """
    if not text or not text.strip():
        raise ValueError("Please enter track requests")

    tracks: List[int] = []
    for chunk in text.split(","):
        chunk = chunk.strip()
        try:
            track = int(chunk)
        except ValueError as exc:
            raise ValueError(f"Invalid track request: {chunk!r}") from exc
        tracks.append(track)

    if max_track is not None:
        check_tracks(tracks, max_track)
    return tracks


def check_tracks(tracks: Iterable[int], max_track: int) -> None:
    if max_track <= 0:
        raise ValueError(f"max_track must be positive, got {max_track}")
    for track in tracks:
        if not 0 <= track <= max_track:
            raise ValueError(f"Track {track} is outside [0, {max_track}]")


def load_disk_workload(path: str | Path) -> DiskWorkload:
    """
    Load a disk workload from JSON: ``{"requests": [...], "start": 53,
    "max_track": 199, "direction": "up"}``. ``requests`` may also be a
    comma-separated string.
    """
    path = Path(path)
    if path.suffix.lower() != ".json":
        raise ValueError(f"Unsupported disk workload format: {path.suffix.lower()} (use .json)")

    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError("JSON disk workload must be an object with 'requests' and 'start'")

    try:
        requests = raw["requests"]
        if isinstance(requests, str):
            requests = parse_track_requests(requests)
        else:
            requests = [int(r) for r in requests]
        start = int(raw["start"])
        max_track = int(raw["max_track"]) if raw.get("max_track") is not None else None
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid disk workload: {raw!r}") from exc

    direction = str(raw.get("direction", Direction.UP.value)).lower()
    if direction not in {d.value for d in Direction}:
        raise ValueError(f"Direction must be 'up' or 'down', got {direction!r}")

    if max_track is not None:
        check_tracks(requests, max_track)

    return DiskWorkload(requests=requests, start=start, max_track=max_track, direction=direction)
