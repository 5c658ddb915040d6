#!/usr/bin/env python3
"""
Breach Scenario Benchmark.

Replays every pre-defined breach scenario on a simulated clock and
reports how quickly the engine responds and recovers.  Supports multiple
seeds for variance reporting (mean +/- std).

Usage:
    python experiments/run_breach_scenarios.py
    python experiments/run_breach_scenarios.py --seeds 42 123 456
    python experiments/run_breach_scenarios.py --ticks 80 --verbose
    python experiments/run_breach_scenarios.py --plot-dir results/
"""

import sys
import os
import argparse
import logging

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from validation.breach_twin import build_twin
from validation.scenarios import all_scenarios
from validation.metrics import (
    first_tick_at_or_above,
    first_auto_alert_tick,
    recovery_tick,
    summarize_runs,
)
from visualization.plots import create_scenario_history

METRICS = [
    "peak_bari",
    "first_elevated_tick",
    "first_auto_alert_tick",
    "auto_alerts",
    "recovery_ticks",
]


def run_scenarios(seed: int = 42, num_ticks: int = None, quiet: bool = False,
                  plot_dir: str = None):
    """Run all scenarios once and return one row per scenario.

    With *plot_dir*, each run's BARI history is also written there as an
    interactive HTML figure.
    """
    rows = []
    if not quiet:
        print(f"\n{'='*78}")
        print(f"  SEED {seed}")
        print(f"{'='*78}")
        print(f"  {'Scenario':<10} {'Peak BARI':>10} {'Elevated@':>10} "
              f"{'Alert@':>8} {'Alerts':>7} {'Recovery':>9}  Description")
        print(f"  {'-'*10} {'-'*10} {'-'*10} {'-'*8} {'-'*7} {'-'*9}  {'-'*20}")

    for sc in all_scenarios():
        twin = build_twin(sc)
        result = twin.run(num_ticks or sc["num_ticks"], seed=seed)

        row = {
            "scenario": sc["name"],
            "peak_bari": result.peak_bari,
            "first_elevated_tick": first_tick_at_or_above(result.classification_history, "ELEVATED"),
            "first_auto_alert_tick": first_auto_alert_tick(result.auto_alert_ticks),
            "auto_alerts": result.total_auto_alerts,
            "recovery_ticks": recovery_tick(result.classification_history, result.breach_end_tick),
        }
        rows.append(row)

        if plot_dir:
            watch = sc["watch_positions"][0] if sc["watch_positions"] else None
            fig = create_scenario_history(result, watch_position=watch)
            fig.write_html(os.path.join(plot_dir, f"scenario_{sc['name']}_seed{seed}.html"))

        if not quiet:
            def fmt(v):
                return str(v) if v is not None else "—"
            print(
                f"  {sc['name']:<10} {row['peak_bari']:>10.2f} "
                f"{fmt(row['first_elevated_tick']):>10} "
                f"{fmt(row['first_auto_alert_tick']):>8} "
                f"{row['auto_alerts']:>7} "
                f"{fmt(row['recovery_ticks']):>9}  {sc['description']}"
            )
    return rows


def print_multi_seed_summary(rows_by_seed: dict):
    """Print mean +/- std of each metric per scenario across seeds."""
    print(f"\n\n{'='*78}")
    print("MULTI-SEED SUMMARY: mean +/- std across seeds (ticks are 500 ms)")
    print(f"{'='*78}")

    scenarios = sorted({r["scenario"] for rows in rows_by_seed.values() for r in rows})
    for name in scenarios:
        sc_rows = [r for rows in rows_by_seed.values() for r in rows if r["scenario"] == name]
        summary = summarize_runs(sc_rows, METRICS)
        print(f"\n  --- Scenario {name} ---")
        for metric in METRICS:
            s = summary[metric]
            print(f"  {metric:<24} {s['mean']:>8.2f} ± {s['std']:>6.2f}")


def main():
    parser = argparse.ArgumentParser(description="Breach Scenario Benchmark")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (single-seed mode)")
    parser.add_argument("--seeds", type=int, nargs="+", default=None,
                        help="Multiple seeds for variance reporting (e.g., --seeds 42 123 456)")
    parser.add_argument("--ticks", type=int, default=None,
                        help="Override the per-scenario run length (must cover every scripted event)")
    parser.add_argument("--quiet", action="store_true", help="Suppress per-scenario output")
    parser.add_argument("--verbose", action="store_true", help="Log engine events")
    parser.add_argument("--plot-dir", default=None,
                        help="Write one HTML history figure per scenario run to this directory")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.plot_dir:
        os.makedirs(args.plot_dir, exist_ok=True)

    seeds = args.seeds or [args.seed]
    print("Breach Scenario Benchmark")
    print(f"Seeds: {seeds}, Ticks: {args.ticks or 'per scenario'}")

    rows_by_seed = {
        seed: run_scenarios(seed=seed, num_ticks=args.ticks, quiet=args.quiet,
                            plot_dir=args.plot_dir)
        for seed in seeds
    }
    if len(seeds) > 1:
        print_multi_seed_summary(rows_by_seed)

    total = sum(len(rows) for rows in rows_by_seed.values())
    print(f"\nTotal: {total} scenario runs completed.")


if __name__ == "__main__":
    main()
