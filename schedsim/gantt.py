from __future__ import annotations

from typing import Dict, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import DiskResult, GanttSegment, ScheduleResult


def render_gantt(segments: List[GanttSegment]) -> str:
    """
    Plain-text Gantt chart; idle intervals are drawn with dots.
    """
    if not segments:
        return "(no execution)"

    segments = sorted(segments, key=lambda s: (s.start_time, s.end_time))

    line = "|"
    labels = ""
    time_marks = str(segments[0].start_time)

    for seg in segments:
        width = max(1, seg.duration)
        line += ("." if seg.idle else "=") * width
        labels += ("" if seg.idle else seg.name[:width]).ljust(width)
        time_marks += f"{seg.end_time:>{max(3, width)}}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def build_rich_gantt(segments: List[GanttSegment]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not segments:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    segments = sorted(segments, key=lambda s: (s.start_time, s.end_time))

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    name_to_color: Dict[str, str] = {}

    def name_color(name: str) -> str:
        if name not in name_to_color:
            idx = len(name_to_color) % len(colors)
            name_to_color[name] = colors[idx]
        return name_to_color[name]

    timeline = Text()
    labels = Text()
    time_marks = str(segments[0].start_time)

    for seg in segments:
        width = max(1, seg.duration)
        if seg.idle:
            timeline.append("." * width, style="dim")
            labels.append(" " * width)
        else:
            timeline.append(" " * width, style=f"on {name_color(seg.name)}")
            labels.append(seg.name[:width].ljust(width), style="bold")
        time_marks += f"{seg.end_time:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks


def scale_track(track: int, max_track: int, width: int) -> int:
    """
    Column for ``track`` on a ``width``-wide axis. Positions outside
    ``[0, max_track]`` are clamped to the axis ends.
    """
    clamped = max(0, min(track, max_track))
    return round(clamped / max_track * (width - 1)) if max_track > 0 else 0


def build_disk_chart(result: DiskResult, max_track: int, width: int = 60) -> Panel:
    """
    Head movement chart: one row per visited position, marker placed on a
    scaled track axis.
    """
    table = Table.grid(padding=(0, 1))
    table.add_column(justify="right")
    table.add_column()
    table.add_column(justify="right")

    styles = {"start": "bold cyan", "serve": "bold green", "boundary": "yellow", "wrap": "magenta"}
    for step in result.steps:
        col = scale_track(step.track, max_track, width)
        axis = Text()
        axis.append("·" * col, style="dim")
        axis.append("●", style=styles.get(step.kind, "bold"))
        axis.append("·" * (width - col - 1), style="dim")
        table.add_row(str(step.track), axis, f"+{step.distance}")

    title = f"{result.algorithm} head path (0..{max_track})"
    return Panel.fit(table, title=title, subtitle=f"seek count {result.seek_count}")


def narrate_schedule(result: ScheduleResult) -> List[str]:
    """
    Step-by-step explanation of a CPU run, one line per recorded event.
    """
    lines: List[str] = []
    for ev in result.events:
        if ev.kind == "arrive":
            lines.append(f"t={ev.time}: {ev.name} arrives and {ev.detail}.")
        elif ev.kind == "dispatch":
            lines.append(f"t={ev.time}: {ev.name} is dispatched ({ev.detail}).")
        elif ev.kind == "preempt":
            lines.append(f"t={ev.time}: {ev.name} is preempted; {ev.detail}.")
        elif ev.kind == "rotate":
            lines.append(f"t={ev.time}: {ev.name} goes back to the queue tail ({ev.detail}).")
        elif ev.kind == "complete":
            lines.append(f"t={ev.time}: {ev.name} completes.")
        elif ev.kind == "idle":
            lines.append(f"t={ev.time}: CPU is idle, {ev.detail}.")
        else:
            lines.append(f"t={ev.time}: {ev.kind} {ev.name} {ev.detail}".rstrip())
    return lines


def narrate_disk(result: DiskResult) -> List[str]:
    lines: List[str] = []
    for step in result.steps:
        if step.kind == "start":
            lines.append(f"Head starts at track {step.track}.")
        elif step.kind == "boundary":
            lines.append(f"Head continues to the disk end at track {step.track} (+{step.distance}).")
        elif step.kind == "wrap":
            lines.append(f"Head jumps back to track {step.track} (+{step.distance}).")
        else:
            lines.append(f"Serve track {step.track} (+{step.distance}).")
    lines.append(f"Total seek count: {result.seek_count}.")
    return lines
