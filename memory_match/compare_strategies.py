#!/usr/bin/env python3
"""
Compare the automated strategies on one preset.

Run with ``python -m memory_match.compare_strategies``.
"""

import argparse
import time

from memory_match.presets import StrategyType, list_presets
from memory_match.simulator import Simulator


def compare_strategies(preset: str = "standard", num_runs: int = 100, seed: int = 0):
    """Run the same seeded games with every strategy and compare results."""
    sim = Simulator()

    print("=" * 70)
    print(f"STRATEGY COMPARISON - {preset} ({num_runs} games each)")
    print("=" * 70)

    results = {}

    for strategy in StrategyType:
        print(f"\nTesting: {strategy.value}...", end=" ", flush=True)

        start_time = time.time()
        batch = sim.run_batch(preset, runs=num_runs, seed=seed, strategy_override=strategy)
        elapsed = time.time() - start_time

        results[strategy.value] = {**batch.to_dict(), "time": elapsed}
        print(f"Done ({elapsed:.1f}s)")

    # Print results table
    print("\n" + "=" * 70)
    print("RESULTS")
    print("=" * 70)
    print(f"{'Strategy':<14} {'Win %':>8} {'Busts':>7} {'Avg Score':>11} {'Avg Moves':>10} {'Avg $':>8}")
    print("-" * 70)

    for name, stats in results.items():
        print(f"{name:<14} {stats['win_rate']:>7.1f}% {stats['busts']:>7} {stats['avg_score']:>11,.0f} "
              f"{stats['avg_moves']:>10.1f} {stats['avg_currency']:>8.1f}")

    # Score distribution for best strategy
    best = max(results.keys(), key=lambda k: results[k]["avg_score"])
    print(f"\n{best} - Score Distribution:")
    dist = results[best]["score_distribution"]
    for bucket in sorted(dist.keys()):
        pct = dist[bucket] / num_runs * 100
        bar = "█" * int(pct / 2)
        print(f"  {bucket:>6,}+: {dist[bucket]:>3} ({pct:>5.1f}%) {bar}")

    return results


def detailed_single_run(preset: str, strategy_name: str, seed: int):
    """Play one game with every turn printed."""
    strategy = StrategyType(strategy_name)

    print("=" * 70)
    print(f"DETAILED GAME - {preset}, {strategy.value} strategy, seed {seed}")
    print("=" * 70)

    summary = Simulator().run(preset, seed=seed, verbose=True, strategy_override=strategy)
    print(summary)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Compare memory game strategies")
    parser.add_argument("--preset", default="standard", choices=list_presets(), help="Preset to play")
    parser.add_argument("--runs", type=int, default=100, help="Number of games per strategy")
    parser.add_argument("--seed", type=int, default=0, help="First seed of the batch")
    parser.add_argument("--detailed", type=str, choices=[s.value for s in StrategyType],
                        help="Play a single detailed game with this strategy")

    args = parser.parse_args()

    if args.detailed:
        detailed_single_run(args.preset, args.detailed, args.seed)
    else:
        compare_strategies(args.preset, num_runs=args.runs, seed=args.seed)
