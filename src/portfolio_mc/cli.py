import argparse

from .analysis import summarize
from .data_structures import SimulationParameters
from .engine import BACKENDS
from .experiment_manager import (
    DEFAULTS,
    execute,
    list_experiments,
    new_seed,
    run_experiment_from_config,
)
from .summary import markdown_table, outcome_table, parameter_table


def main(argv=None):
    parser = argparse.ArgumentParser(description="portfolio-mc Monte Carlo projections")
    sub = parser.add_subparsers(dest="cmd")

    # ------------------------------------------------------------------
    # run
    # ------------------------------------------------------------------
    p_run = sub.add_parser("run", help="Run an experiment from a YAML config")
    p_run.add_argument("config", type=str, help="Path to .yaml config file")
    p_run.add_argument("--root", type=str, default="results", help="Output root")
    seed_grp = p_run.add_mutually_exclusive_group()
    seed_grp.add_argument("--seed", type=int, default=None, help="Override the config seed")
    seed_grp.add_argument(
        "--new-seed", action="store_true", help="Draw a fresh random seed"
    )

    # ------------------------------------------------------------------
    # simulate
    # ------------------------------------------------------------------
    p_sim = sub.add_parser("simulate", help="Run once and print the outcome table")
    p_sim.add_argument("--initial-amount", type=float, default=DEFAULTS.initial_amount)
    p_sim.add_argument("--annual-return", type=float, default=DEFAULTS.annual_return)
    p_sim.add_argument("--volatility", type=float, default=DEFAULTS.volatility)
    p_sim.add_argument("--years", type=int, default=DEFAULTS.years)
    p_sim.add_argument("--simulations", type=int, default=DEFAULTS.num_simulations)
    p_sim.add_argument("--seed", type=int, default=DEFAULTS.seed)
    p_sim.add_argument("--backend", choices=BACKENDS, default="python")
    p_sim.add_argument(
        "--streams", action="store_true", help="Use independent per-simulation streams"
    )
    p_sim.add_argument("--workers", type=int, default=1)

    # ------------------------------------------------------------------
    # list
    # ------------------------------------------------------------------
    p_list = sub.add_parser("list", help="List previous experiment runs")
    p_list.add_argument("--root", type=str, default="results", help="Output root")

    args = parser.parse_args(argv)

    if args.cmd == "run":
        seed = new_seed() if args.new_seed else args.seed
        run_experiment_from_config(args.config, root=args.root, seed=seed)

    elif args.cmd == "simulate":
        try:
            params = SimulationParameters(
                initial_amount=args.initial_amount,
                annual_return=args.annual_return,
                volatility=args.volatility,
                years=args.years,
                num_simulations=args.simulations,
                seed=args.seed,
            )
        except ValueError as e:
            parser.error(str(e))

        run = execute(params, backend=args.backend, streams=args.streams, workers=args.workers)
        print("\n".join(markdown_table(parameter_table(params))))
        print()
        print("\n".join(markdown_table(outcome_table(summarize(run, params), params))))

    elif args.cmd == "list":
        list_experiments(args.root)

    else:
        parser.print_help()


if __name__ == "__main__":
    main()
