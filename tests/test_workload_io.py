from pathlib import Path

import pytest

from schedsim.errors import InputValidationError
from schedsim.models import Process
from schedsim.workload_io import load_workload, parse_triple


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"arrival_time":0,"burst_time":3,"priority":1},'
                 '{"pid":1,"arrival_time":1,"burst_time":2,"priority":0}]')
    workload = load_workload(p)
    procs = workload.processes
    assert isinstance(procs[0], Process)
    assert procs[0].pid == 0
    assert procs[1].arrival_time == 1
    assert workload.quantum is None


def test_load_json_object_with_quantum(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"quantum": 4, "processes": [{"arrival_time":0,"burst_time":3,"priority":1}]}')
    workload = load_workload(p)
    assert workload.quantum == 4
    assert len(workload.processes) == 1


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("arrival_time,burst_time,priority\n0,3,1\n1,2,2\n")
    procs = load_workload(p).processes
    assert procs[0].pid == 0
    assert procs[1].priority == 2


def test_load_txt(tmp_path: Path):
    p = tmp_path / "w.txt"
    p.write_text("# arrival,burst,priority\n0,5,2\n\n1, 3, 1  # short job\n")
    procs = load_workload(p).processes
    assert [(q.arrival_time, q.burst_time, q.priority) for q in procs] == [(0, 5, 2), (1, 3, 1)]


def test_pid_must_match_position(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":3,"arrival_time":0,"burst_time":3,"priority":1}]')
    with pytest.raises(InputValidationError):
        load_workload(p)


def test_invalid_entries(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("arrival_time,burst_time,priority\n0,zero,1\n")
    with pytest.raises(InputValidationError):
        load_workload(p)

    p = tmp_path / "w.txt"
    p.write_text("0,0,1\n")
    with pytest.raises(InputValidationError):
        load_workload(p)


def test_unsupported_suffix(tmp_path: Path):
    p = tmp_path / "w.yaml"
    p.write_text("[]")
    with pytest.raises(InputValidationError):
        load_workload(p)


def test_fractional_numbers_are_rejected(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"arrival_time":0,"burst_time":2.9,"priority":1}]')
    with pytest.raises(InputValidationError):
        load_workload(p)

    p.write_text('{"quantum": 2.5, "processes": [{"arrival_time":0,"burst_time":3,"priority":1}]}')
    with pytest.raises(InputValidationError):
        load_workload(p)

    p.write_text('[{"arrival_time":0.0,"burst_time":3.0,"priority":1}]')
    assert load_workload(p).processes[0].burst_time == 3


def test_parse_triple():
    assert parse_triple(" 3, 6 ,1") == (3, 6, 1)
    with pytest.raises(InputValidationError):
        parse_triple("3,6")
