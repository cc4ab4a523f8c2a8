"""Tests for the YAML config and experiment harness."""

from __future__ import annotations

import pytest

from banksim.stations import make_stages
from experiments.run_experiments import apply_overrides, load_cfg, main, run_scenario
from experiments.scenarios import SCENARIOS


@pytest.fixture
def baseline():
    return load_cfg()


def test_baseline_yaml_matches_reference_bank(baseline):
    stages = make_stages(baseline)
    assert [[(s.sid, s.weight, s.service_duration, len(s.servers)) for s in stage] for stage in stages] == [
        [("A", 4, 3, 2)],
        [("B", 4, 10, 2), ("C", 6, 15, 3)],
    ]
    assert baseline["sim"]["tick_bound"] == 100


def test_apply_overrides_merges_nested_keys(baseline):
    new = apply_overrides(baseline, {"stations": {"C": {"server_count": 4}}})
    assert new["stations"]["C"] == {"weight": 6, "service_duration": 15, "server_count": 4}
    assert new["stations"]["B"] == baseline["stations"]["B"]
    # original left untouched
    assert baseline["stations"]["C"]["server_count"] == 3


def test_zero_arrival_scenario(baseline):
    sc = next(s for s in SCENARIOS if s["name"] == "zero_arrival")
    results = run_scenario(apply_overrides(baseline, sc["overrides"]), replications=2)
    assert [r["entered"] for r in results] == [0, 0]


def test_replications_use_consecutive_seeds(baseline):
    cfg = apply_overrides(baseline, {"sim": {"tick_bound": 20, "seed": 7}})
    results = run_scenario(cfg, replications=3)
    assert [r["seed"] for r in results] == [7, 8, 9]


def test_load_cfg_from_file(tmp_path):
    path = tmp_path / "bank.yaml"
    path.write_text(
        "sim: {tick_bound: 10}\n"
        "stations:\n"
        "  T: {weight: 1, service_duration: 2, server_count: 1}\n"
        "stages: [[T]]\n"
    )
    cfg = load_cfg(str(path))
    assert [[s.sid for s in stage] for stage in make_stages(cfg)] == [["T"]]


def test_main_prints_counts(capsys):
    assert main(["--scenario", "baseline", "--ticks", "30", "--replications", "1"]) == 0
    out = capsys.readouterr().out
    assert "Scenario: baseline" in out
    assert "tick_bound=30" in out
    assert "entered=" in out


def test_main_rejects_bad_tick_bound(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--scenario", "baseline", "--ticks", "0"])
    assert exc.value.code == 2


@pytest.mark.parametrize("value", ["0", "-1", "two"])
def test_main_rejects_bad_replications(capsys, value):
    with pytest.raises(SystemExit) as exc:
        main(["--scenario", "baseline", "--ticks", "5", "--replications", value])
    assert exc.value.code == 2
    assert "Scenario:" not in capsys.readouterr().out


def test_config_replications_used_when_flag_absent(capsys):
    assert main(["--scenario", "zero_arrival", "--ticks", "5"]) == 0
    out = capsys.readouterr().out
    assert "replications=3" in out
    assert out.count("entered=0") == 3


def test_main_writes_plot(tmp_path, capsys, monkeypatch):
    monkeypatch.setattr("experiments.run_experiments.ROOT", str(tmp_path))
    assert main(["--scenario", "zero_arrival", "--ticks", "10", "--replications", "1", "--plot"]) == 0
    assert (tmp_path / "experiments" / "output" / "zero_arrival_occupancy.png").exists()
