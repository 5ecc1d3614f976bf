import os

import pytest
import yaml

from portfolio_mc.experiment_manager import (
    build_parameters,
    discover_runs,
    execute,
    list_experiments,
    run_experiment_from_config,
)
from portfolio_mc.data_structures import SimulationParameters


def write_config(tmp_path, cfg, name="exp.yaml"):
    path = tmp_path / name
    with open(path, "w") as f:
        yaml.safe_dump(cfg, f)
    return str(path)


def test_build_parameters_defaults():
    params = build_parameters({})
    assert params == SimulationParameters()
    assert params.initial_amount == 100_000.0
    assert params.annual_return == 0.07
    assert params.volatility == 0.15
    assert params.years == 30
    assert params.num_simulations == 1000
    assert params.seed == 42


def test_build_parameters_from_config():
    cfg = {
        "name": "custom",
        "initial_amount": 50_000,
        "annual_return": 0.05,
        "volatility": 0.1,
        "years": 20,
        "simulations": 250,
        "seed": 7,
    }
    params = build_parameters(cfg)
    assert params.initial_amount == 50_000.0
    assert params.years == 20
    assert params.num_simulations == 250
    assert params.seed == 7


def test_build_parameters_seed_override_and_random():
    assert build_parameters({"seed": 7}, seed=99).seed == 99
    for _ in range(20):
        assert 0 <= build_parameters({"seed": "random"}).seed < 10_000


def test_build_parameters_warns_on_unknown_key(capsys):
    build_parameters({"contributions": 500})
    assert "[WARN] Unknown config key 'contributions'" in capsys.readouterr().out


def test_build_parameters_rejects_invalid():
    with pytest.raises(ValueError):
        build_parameters({"years": -3})


def test_execute_unknown_backend():
    with pytest.raises(ValueError, match="Unknown backend"):
        execute(SimulationParameters(num_simulations=2, years=1), backend="gpu")


def test_execute_streams():
    run = execute(SimulationParameters(num_simulations=4, years=2), streams=True)
    assert run.metadata["mode"] == "streams"


def test_run_experiment_from_config(tmp_path):
    cfg = {
        "name": "small",
        "initial_amount": 10_000,
        "years": 4,
        "simulations": 50,
        "seed": "random",
        "histogram_bins": 10,
    }
    config_file = write_config(tmp_path, cfg)
    root = str(tmp_path / "results")

    outdir = run_experiment_from_config(config_file, root=root)

    assert os.path.isdir(outdir)
    assert outdir.endswith("_small")
    assert os.path.exists(os.path.join(outdir, "summary.md"))
    assert os.path.exists(os.path.join(outdir, "dashboard.html"))

    with open(os.path.join(outdir, "config_used.yaml")) as f:
        used = yaml.safe_load(f)
    assert isinstance(used["seed"], int)
    assert used["simulations"] == 50

    assert discover_runs(root) == [os.path.basename(outdir)]


def test_run_experiment_without_dashboard(tmp_path):
    cfg = {"name": "nodash", "years": 2, "simulations": 5, "dashboard": False}
    outdir = run_experiment_from_config(write_config(tmp_path, cfg), root=str(tmp_path / "r"))
    assert not os.path.exists(os.path.join(outdir, "dashboard.html"))


def test_run_experiment_numba_backend(tmp_path):
    cfg = {"name": "jit", "years": 3, "simulations": 20, "backend": "numba"}
    outdir = run_experiment_from_config(write_config(tmp_path, cfg), root=str(tmp_path / "r"))
    text = open(os.path.join(outdir, "summary.md")).read()
    assert "numba backend" in text


def test_run_experiment_zero_simulations(tmp_path, capsys):
    cfg = {"name": "empty", "years": 3, "simulations": 0}
    run_experiment_from_config(write_config(tmp_path, cfg), root=str(tmp_path / "r"))
    assert "statistics are undefined" in capsys.readouterr().out


def test_list_experiments(tmp_path, capsys):
    root = tmp_path / "results"
    list_experiments(str(root))
    assert "(none)" in capsys.readouterr().out

    os.makedirs(root / "20250101_000000_a")
    list_experiments(str(root))
    assert "20250101_000000_a" in capsys.readouterr().out
