from pathlib import Path

import pytest

from schedsim.models import Process
from schedsim.workload_io import (
    load_disk_workload,
    load_workload,
    parse_track_requests,
    validate_processes,
)


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"name":"A","arrival_time":0,"burst_time":3,"priority":1},'
                 '{"name":"B","arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[1].priority is None
    assert procs[1].arrival_time == 1


def test_load_json_accepts_pid_column(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival_time":0,"burst_time":3}]')
    assert load_workload(p)[0].name == "A"


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("name,arrival_time,burst_time,priority\nA,0,3,1\nB,1,2,\n")
    procs = load_workload(p)
    assert procs[0].name == "A"
    assert procs[0].priority == 1
    assert procs[1].priority is None


def test_unsupported_suffix(tmp_path: Path):
    p = tmp_path / "w.yaml"
    p.write_text("")
    with pytest.raises(ValueError, match="Unsupported"):
        load_workload(p)


def test_invalid_entry(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("name,arrival_time,burst_time\nA,zero,3\n")
    with pytest.raises(ValueError, match="Invalid process entry"):
        load_workload(p)


def test_duplicate_names_rejected_on_load(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("name,arrival_time,burst_time\nA,0,3\nA,1,2\n")
    with pytest.raises(ValueError, match="unique"):
        load_workload(p)


@pytest.mark.parametrize(
    "proc, message",
    [
        (Process("", 0, 1), "empty"),
        (Process("A", -1, 1), "arrival"),
        (Process("A", 0, 0), "burst"),
        (Process("A", 0, 2, -3), "priority"),
    ],
)
def test_validate_processes(proc, message):
    with pytest.raises(ValueError, match=message):
        validate_processes([proc])


def test_parse_track_requests():
    assert parse_track_requests("98, 183,37 ,37") == [98, 183, 37, 37]


@pytest.mark.parametrize("text", ["", "   ", "12,,4", "1,two"])
def test_parse_track_requests_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_track_requests(text)


def test_parse_track_requests_range():
    assert parse_track_requests("0,199", max_track=199) == [0, 199]
    with pytest.raises(ValueError, match="outside"):
        parse_track_requests("10,200", max_track=199)


def test_load_disk_workload(tmp_path: Path):
    p = tmp_path / "disk.json"
    p.write_text('{"requests": [98, 183, 37], "start": 53, "max_track": 199, "direction": "DOWN"}')
    wl = load_disk_workload(p)
    assert wl.requests == [98, 183, 37]
    assert wl.start == 53
    assert wl.max_track == 199
    assert wl.direction == "down"


def test_load_disk_workload_string_requests(tmp_path: Path):
    p = tmp_path / "disk.json"
    p.write_text('{"requests": "98,183,37", "start": 300}')
    wl = load_disk_workload(p)
    assert wl.requests == [98, 183, 37]
    # Start positions are not range-checked.
    assert wl.start == 300
    assert wl.max_track is None
    assert wl.direction == "up"


def test_load_disk_workload_errors(tmp_path: Path):
    p = tmp_path / "disk.json"
    p.write_text('{"start": 53}')
    with pytest.raises(ValueError, match="Invalid disk workload"):
        load_disk_workload(p)

    p.write_text('{"requests": [1], "start": 0, "direction": "left"}')
    with pytest.raises(ValueError, match="Direction"):
        load_disk_workload(p)
