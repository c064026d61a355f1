import json
from pathlib import Path

import pytest

from schedsim.cli import build_parser, main


@pytest.fixture
def cpu_workload(tmp_path: Path) -> Path:
    p = tmp_path / "cpu.json"
    p.write_text(
        json.dumps(
            [
                {"name": "P1", "arrival_time": 0, "burst_time": 8, "priority": 2},
                {"name": "P2", "arrival_time": 1, "burst_time": 4, "priority": 1},
            ]
        )
    )
    return p


@pytest.fixture
def disk_workload(tmp_path: Path) -> Path:
    p = tmp_path / "disk.json"
    p.write_text(json.dumps({"requests": [98, 183, 37, 122, 14, 124, 65, 67], "start": 53, "max_track": 199}))
    return p


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_run(cpu_workload, capsys):
    assert main(["run", "-a", "srtf", "-w", str(cpu_workload)]) == 0
    out = capsys.readouterr().out
    assert "Algorithm: SRTF" in out
    assert "Per-process metrics" in out


def test_run_step_and_explain(cpu_workload, capsys):
    assert main(["run", "-a", "rr", "-q", "2", "-w", str(cpu_workload), "--step", "--explain"]) == 0
    out = capsys.readouterr().out
    assert "Replaying Round Robin" in out
    assert "Step by step:" in out
    assert "Quantum: 2" in out


def test_run_step_prints_bracketed_names_verbatim(tmp_path, capsys):
    p = tmp_path / "odd.json"
    p.write_text(json.dumps([{"name": "[bold]", "arrival_time": 0, "burst_time": 2}]))
    assert main(["run", "-a", "fcfs", "-w", str(p), "--step"]) == 0
    out = capsys.readouterr().out
    assert "running=[bold]" in out
    assert "[bold]" in out.split("Per-process metrics")[1]


def test_run_rr_without_quantum_reports_error(cpu_workload, capsys):
    assert main(["run", "-a", "rr", "-w", str(cpu_workload)]) == 2
    assert "positive quantum" in capsys.readouterr().out


def test_compare(cpu_workload, capsys):
    assert main(["compare", "-w", str(cpu_workload)]) == 0
    out = capsys.readouterr().out
    assert "Algorithm comparison" in out


def test_disk_from_options(capsys):
    assert main(["disk", "-a", "fcfs", "-r", "98,183,37,122,14,124,65,67", "-s", "53"]) == 0
    out = capsys.readouterr().out
    assert "Total seek count: 640" in out


def test_disk_from_file_with_explain(disk_workload, capsys):
    assert main(["disk", "-a", "scan", "-w", str(disk_workload), "--explain"]) == 0
    out = capsys.readouterr().out
    assert "Total seek count: 331" in out
    assert "disk end at track 199" in out


def test_disk_scan_needs_max_track(capsys):
    assert main(["disk", "-a", "scan", "-r", "10,20", "-s", "5"]) == 2
    assert "max_track" in capsys.readouterr().out


def test_disk_needs_input(capsys):
    assert main(["disk", "-a", "look", "-s", "5"]) == 2
    assert "--requests" in capsys.readouterr().out


def test_disk_rejects_out_of_range_track(capsys):
    assert main(["disk", "-a", "fcfs", "-r", "10,500", "-s", "5", "-m", "199"]) == 2
    assert "outside" in capsys.readouterr().out


def test_disk_compare(disk_workload, capsys):
    assert main(["disk-compare", "-w", str(disk_workload)]) == 0
    out = capsys.readouterr().out
    assert "Disk algorithm comparison" in out
    for count in ("640", "236", "331", "382", "299", "322"):
        assert count in out
