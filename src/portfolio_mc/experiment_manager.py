import os
import random
from datetime import datetime
from typing import Optional

import yaml

from .analysis import summarize
from .data_structures import SimulationParameters, SimulationRun
from .engine import BACKENDS, run_simulation, run_simulation_streams
from .plotting.dashboard_export import generate_dashboard
from .summary import REPORT_HISTOGRAM_BINS, expected_gain, generate_summary

KNOWN_KEYS = {
    "name",
    "initial_amount",
    "annual_return",
    "volatility",
    "years",
    "simulations",
    "seed",
    "backend",
    "streams",
    "workers",
    "histogram_bins",
    "dashboard",
}

DEFAULTS = SimulationParameters()


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------


def now_id() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def ensure_dir(path: str):
    if not os.path.exists(path):
        os.makedirs(path)


def discover_runs(root: str = "results"):
    if not os.path.exists(root):
        return []
    return sorted(d for d in os.listdir(root) if os.path.isdir(os.path.join(root, d)))


def new_seed() -> int:
    """Fresh seed in [0, 10000), the range of the interactive "New Seed" button."""
    return random.randrange(10_000)


def load_config(config_file: str) -> dict:
    with open(config_file, "r") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {config_file} must be a mapping, got {type(cfg).__name__}")
    return cfg


# ------------------------------------------------------------
# Parameter builder
# ------------------------------------------------------------


def build_parameters(cfg: dict, seed: Optional[int] = None) -> SimulationParameters:
    """
    Build SimulationParameters from a config mapping.

    `seed` overrides the config. A config seed of "random" draws a new one.
    """
    for key in cfg:
        if key not in KNOWN_KEYS:
            print(f"[WARN] Unknown config key '{key}' ignored.")

    if seed is None:
        seed = cfg.get("seed", DEFAULTS.seed)
        if seed == "random":
            seed = new_seed()

    return SimulationParameters(
        initial_amount=cfg.get("initial_amount", DEFAULTS.initial_amount),
        annual_return=cfg.get("annual_return", DEFAULTS.annual_return),
        volatility=cfg.get("volatility", DEFAULTS.volatility),
        years=cfg.get("years", DEFAULTS.years),
        num_simulations=cfg.get("simulations", DEFAULTS.num_simulations),
        seed=seed,
    )


def execute(
    params: SimulationParameters,
    backend: str = "python",
    streams: bool = False,
    workers: Optional[int] = 1,
) -> SimulationRun:
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend: {backend} (expected one of {BACKENDS})")
    if streams:
        if backend != "python":
            print("[WARN] Independent streams always use the python backend.")
        return run_simulation_streams(params, max_workers=workers)
    return run_simulation(params, backend=backend)


# ------------------------------------------------------------
# Run experiment defined by YAML config
# ------------------------------------------------------------


def run_experiment_from_config(
    config_file: str,
    root: str = "results",
    seed: Optional[int] = None,
) -> str:
    cfg = load_config(config_file)

    exp_name = cfg.get("name", "experiment")
    params = build_parameters(cfg, seed=seed)
    backend = cfg.get("backend", "python")
    streams = bool(cfg.get("streams", False))
    workers = cfg.get("workers", 1)
    bins = int(cfg.get("histogram_bins", REPORT_HISTOGRAM_BINS))

    rid = f"{now_id()}_{exp_name}"
    outdir = os.path.join(root, rid)
    ensure_dir(outdir)

    print("\n=== Running Experiment ===")
    print(f"Config: {config_file}")
    print(f"Run ID: {rid}")
    print(f"Simulations: {params.num_simulations}")
    print(f"Years: {params.years}")
    print(f"Seed: {params.seed}")
    print(f"Backend: {backend}{' (independent streams)' if streams else ''}")
    print()

    run = execute(params, backend=backend, streams=streams, workers=workers)

    stats = summarize(run, params)
    if run.num_simulations == 0:
        print("[WARN] No simulations were run; statistics are undefined.")
    else:
        print(f"Median final value: {stats.median:,.0f}")
        print(f"Expected gain: {expected_gain(stats, params) * 100:.1f}%")
        print(f"Probability of loss: {stats.prob_loss * 100:.1f}%")

    summary_path = generate_summary(params, run, outdir, bin_count=bins)
    print(f"Summary report → {summary_path}")

    if cfg.get("dashboard", True):
        dashboard_path = generate_dashboard(params, run, outdir, bin_count=bins)
        print(f"Interactive dashboard → {dashboard_path}")

    # Record the seed actually used.
    used = dict(cfg)
    used["seed"] = params.seed
    with open(os.path.join(outdir, "config_used.yaml"), "w") as f:
        yaml.safe_dump(used, f)

    print("Done.")
    return outdir


# ------------------------------------------------------------
# List all runs
# ------------------------------------------------------------


def list_experiments(root: str = "results"):
    runs = discover_runs(root)
    print("\n=== Available Experiment Runs ===")
    if not runs:
        print("(none)")
        return
    for r in runs:
        print(" -", r)
