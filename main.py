# main.py
import argparse
import copy
import json
import logging
import os
import sys

from benchmark import CollatzRunner
from cache import InvalidConfiguration
from collatz import StepLimitExceeded
from visualize import plot_hit_miss_rate, plot_steps_distribution

DEFAULT_CONFIG = {
    "benchmark": {"random_seed": None},
    "cache": {},
    "output": {
        "results_csv": "collatz_results.csv",
        "summary_json": "results/summary.json",
        "steps_plot": "results/steps_distribution.png",
        "hitmiss_plot": "results/hit_miss_rate.png",
    },
}


def load_config(path="config.json"):
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if not os.path.exists(path):
        logging.debug(f"No config file at {path}, using defaults")
        return cfg
    with open(path, "r") as f:
        loaded = json.load(f)
    for section, values in loaded.items():
        cfg.setdefault(section, {}).update(values)
    return cfg


class _ArgumentParser(argparse.ArgumentParser):
    # bad arguments are configuration errors: exit 1 like the rest
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_args(argv=None):
    parser = _ArgumentParser(
        description="Collatz step counts for random samples, memoized in a fixed-size cache."
    )
    parser.add_argument("n", type=int, metavar="N", help="number of samples")
    parser.add_argument("min_value", type=int, metavar="MIN")
    parser.add_argument("max_value", type=int, metavar="MAX")
    parser.add_argument("policy", metavar="POLICY", help="cache policy: LRU, RR or NONE")
    parser.add_argument("capacity", type=int, metavar="CAPACITY", help="cache size in entries")
    parser.add_argument("--config", default="config.json")
    parser.add_argument("--output", default=None, help="results CSV path")
    parser.add_argument("--no-plots", action="store_true")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - [%(name)s] - %(levelname)s - %(message)s',
    )

    cfg = load_config(args.config)
    cfg["benchmark"].update(
        num_samples=args.n, min_value=args.min_value, max_value=args.max_value
    )
    cfg["cache"].update(policy=args.policy, capacity=args.capacity)
    out_cfg = cfg["output"]
    results_csv = args.output or out_cfg.get("results_csv", "collatz_results.csv")

    try:
        runner = CollatzRunner(cfg)
        print(f"Running Collatz on {args.n} numbers between {args.min_value} and {args.max_value}...")
        summary, records = runner.run(results_csv)
    except InvalidConfiguration as e:
        print(str(e), file=sys.stderr)
        return 1
    except StepLimitExceeded as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error opening file for output: {e}", file=sys.stderr)
        return 1

    stats = runner.cache.stats()
    if runner.cache.enabled:
        print(f"Cache Hits: {stats.hits}")
        print(f"Cache Misses: {stats.misses}")
        if stats.hit_rate is not None:
            print(f"Cache Hit Rate: {100.0 * stats.hit_rate:.2f}%")

    try:
        summary_path = runner.save_results(summary, out_cfg)
        logging.info(f"Summary saved to {summary_path}")
        if not args.no_plots:
            steps_plot = out_cfg.get("steps_plot", "results/steps_distribution.png")
            plot_steps_distribution(records, steps_plot)
            if runner.cache.enabled and stats.hit_rate is not None:
                plot_hit_miss_rate(stats.hit_rate, out_cfg.get("hitmiss_plot", "results/hit_miss_rate.png"))
            print(f"Plots saved in {os.path.dirname(steps_plot) or '.'}/")
    except OSError as e:
        print(f"Error writing results: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
