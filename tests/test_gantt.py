from rich.console import Console
from rich.panel import Panel

from schedsim.algorithms import schedule_fcfs, schedule_srtf
from schedsim.disk import cscan_path
from schedsim.gantt import (
    build_disk_chart,
    build_rich_gantt,
    narrate_disk,
    narrate_schedule,
    render_gantt,
    scale_track,
)
from schedsim.models import Process


def test_render_gantt_plain():
    res = schedule_fcfs([Process("P1", 1, 3), Process("P2", 1, 2)])
    text = render_gantt(res.timeline)
    lines = text.splitlines()
    assert lines[0] == "Gantt Chart:"
    assert lines[1] == "|.=====|"
    assert lines[2].startswith(" P1 P2")


def test_render_gantt_empty():
    assert render_gantt([]) == "(no execution)"


def test_build_rich_gantt_renders():
    res = schedule_srtf([Process("P1", 0, 8), Process("P2", 1, 4)])
    panel, marks = build_rich_gantt(res.timeline)
    assert isinstance(panel, Panel)
    assert marks.split() == ["0", "1", "5", "12"]

    console = Console(record=True, width=80)
    console.print(panel)
    assert "Gantt Chart" in console.export_text()


def test_scale_track_clamps():
    assert scale_track(0, 199, 60) == 0
    assert scale_track(199, 199, 60) == 59
    assert scale_track(500, 199, 60) == 59
    assert scale_track(-20, 199, 60) == 0


def test_disk_chart_and_narration():
    res = cscan_path([98, 37], 53, max_track=199)
    console = Console(record=True, width=100)
    console.print(build_disk_chart(res, 199))
    out = console.export_text()
    assert "C-SCAN" in out
    assert f"seek count {res.seek_count}" in out

    lines = narrate_disk(res)
    assert lines[0] == "Head starts at track 53."
    assert lines[2].startswith("Head continues to the disk end at track 199")
    assert lines[3].startswith("Head jumps back to track 0")
    assert lines[-1] == f"Total seek count: {res.seek_count}."


def test_narrate_schedule():
    res = schedule_srtf([Process("P1", 0, 8), Process("P2", 1, 4)])
    lines = narrate_schedule(res)
    assert lines[0] == "t=0: P1 arrives and joins the ready queue."
    assert "t=1: P1 is preempted; P2 takes the CPU." in lines
    assert lines[-1] == "t=12: P1 completes."
