import json

import pytest

from benchmark import CollatzRunner
from cache import InvalidConfiguration
from collatz import StepLimitExceeded, compute_steps


def make_cfg(tmp_path, **overrides):
    cfg = {
        "benchmark": {"num_samples": 200, "min_value": 1, "max_value": 50, "random_seed": 42},
        "cache": {"policy": "LRU", "capacity": 8},
        "output": {"summary_json": str(tmp_path / "out" / "summary.json")},
    }
    for section, values in overrides.items():
        cfg[section].update(values)
    return cfg


def read_rows(path):
    with open(path) as f:
        return f.read().splitlines()


@pytest.mark.parametrize("policy", ["LRU", "RR", "NONE"])
def test_run_writes_correct_records(tmp_path, policy):
    out = tmp_path / "collatz_results.csv"
    runner = CollatzRunner(make_cfg(tmp_path, cache={"policy": policy}))
    summary, records = runner.run(str(out))

    lines = read_rows(out)
    assert lines[0] == "Number,Steps"
    assert len(lines) == 201
    assert len(records) == 200
    for line, (number, steps) in zip(lines[1:], records):
        assert line == f"{number},{steps}"
        assert 1 <= number <= 50
        assert steps == compute_steps(number)
    assert summary["total_samples"] == 200


def test_cache_accounting_matches_samples(tmp_path):
    runner = CollatzRunner(make_cfg(tmp_path))
    summary, _ = runner.run(str(tmp_path / "r.csv"))
    stats = runner.cache.stats()
    assert stats.lookups == 200
    assert stats.hits > 0
    assert summary["cache"]["hits"] == stats.hits
    assert summary["cache"]["occupancy"] == 8


def test_none_policy_performs_no_lookups(tmp_path):
    runner = CollatzRunner(make_cfg(tmp_path, cache={"policy": "NONE"}))
    summary, _ = runner.run(str(tmp_path / "r.csv"))
    assert runner.cache.stats().lookups == 0
    assert summary["cache"]["hit_rate"] is None
    assert len(runner.cache) == 0


def test_seed_reproduces_run(tmp_path):
    cfg = make_cfg(tmp_path, cache={"policy": "RR"})
    _, first = CollatzRunner(cfg).run(str(tmp_path / "a.csv"))
    _, second = CollatzRunner(cfg).run(str(tmp_path / "b.csv"))
    assert first == second


@pytest.mark.parametrize(
    "bench",
    [
        {"num_samples": 0},
        {"min_value": 0},
        {"max_value": -1},
        {"min_value": 10, "max_value": 10},
        {"min_value": 20, "max_value": 10},
    ],
)
def test_invalid_range(tmp_path, bench):
    with pytest.raises(InvalidConfiguration):
        CollatzRunner(make_cfg(tmp_path, benchmark=bench))


def test_invalid_cache_config(tmp_path):
    with pytest.raises(InvalidConfiguration):
        CollatzRunner(make_cfg(tmp_path, cache={"capacity": 0}))
    with pytest.raises(InvalidConfiguration):
        CollatzRunner(make_cfg(tmp_path, cache={"policy": "FIFO"}))


def test_step_limit_aborts_run(tmp_path):
    out = tmp_path / "r.csv"
    cfg = make_cfg(tmp_path, benchmark={"min_value": 2, "max_value": 50, "max_steps": 0})
    runner = CollatzRunner(cfg)
    with pytest.raises(StepLimitExceeded):
        runner.run(str(out))
    # only the header made it out before the abort
    assert read_rows(out) == ["Number,Steps"]


def test_save_results(tmp_path):
    cfg = make_cfg(tmp_path)
    runner = CollatzRunner(cfg)
    summary, _ = runner.run(str(tmp_path / "r.csv"))
    path = runner.save_results(summary, cfg["output"])
    with open(path) as f:
        saved = json.load(f)
    assert saved["total_samples"] == 200
    assert saved["cache"]["policy"] == "LRU"
