#!/usr/bin/env python3
"""
Demo script for the memory game engine.
Walks through dealing, scoring, Double Down, High Roller and a Monte Carlo batch.

Run with ``python -m memory_match.demo``.
"""

import argparse

from memory_match.engine.deck import build_deck
from memory_match.engine.game import (
    activate_double_down, apply_final_bonuses, build_initial_state, flip_card,
)
from memory_match.engine.high_roller import CircuitStage, apply_bad_beat
from memory_match.engine.modes import GameMode
from memory_match.engine.scoring import ScoringConfig, calculate_match_score, combo_bonus
from memory_match.simulator import Simulator


def _pairs(state) -> dict:
    """Card ids grouped by face, for playing a board on purpose."""
    by_face = {}
    for card in state.cards:
        by_face.setdefault(card.face, []).append(card.id)
    return by_face


def demo_deal(seed: int):
    """Show a seeded deal."""
    print("=" * 60)
    print("DEAL DEMO")
    print("=" * 60)

    cards = build_deck(6, seed=seed)
    print(f"\nSeed {seed}, 6 pairs:")
    print("  " + " ".join(str(c) for c in cards))
    print(f"  Same seed again is identical: {cards == build_deck(6, seed=seed)}")


def demo_scoring():
    """Demonstrate per-match scoring with a growing combo."""
    print("\n" + "=" * 60)
    print("SCORING DEMO")
    print("=" * 60)

    config = ScoringConfig()
    score = 0
    for combo in range(4):
        bonus = combo_bonus(combo, config)
        score = calculate_match_score(score, False, config.base_match_points, bonus, False).final_score
        print(f"  Match with combo {combo}: +{config.base_match_points} base +{bonus} combo -> {score}")


def demo_perfect_game(seed: int):
    """Clear a board without a single miss and show the final breakdown."""
    print("\n" + "=" * 60)
    print("PERFECT GAME DEMO")
    print("=" * 60)

    state = build_initial_state(6, seed=seed)
    for first, second in _pairs(state).values():
        state, _ = flip_card(state, first)
        state, event = flip_card(state, second)
        print(f"  {state.card(first)} {state.card(second)}: {event.name}, "
              f"score {state.score}, {state.match_comment}")

    state = apply_final_bonuses(state, elapsed_time_seconds=20)
    b = state.score_breakdown
    print(f"\n  Match points: {b.match_points}")
    print(f"  Time bonus:   {b.time_bonus}")
    print(f"  Move bonus:   {b.move_bonus}")
    print(f"  TOTAL:        {b.total_score}")
    print(f"  Currency:     {b.earned_currency}")


def demo_double_down(seed: int):
    """Arm Double Down on a heater, then miss."""
    print("\n" + "=" * 60)
    print("DOUBLE DOWN DEMO")
    print("=" * 60)

    state = build_initial_state(8, seed=seed)
    pairs = list(_pairs(state).values())
    for first, second in pairs[:3]:
        state, _ = flip_card(state, first)
        state, _ = flip_card(state, second)

    print(f"  Combo {state.combo_multiplier}, score {state.score}, can double down: {state.can_double_down}")
    state = activate_double_down(state)

    a, b = pairs[3][0], pairs[4][0]
    state, _ = flip_card(state, a)
    state, event = flip_card(state, b)
    print(f"  Missed while doubled: {event.name}, score {state.score}, busted {state.is_busted}")


def demo_high_roller(seed: int):
    """Show the pot growing and a bad beat burning it."""
    print("\n" + "=" * 60)
    print("HIGH ROLLER DEMO")
    print("=" * 60)

    for stage in CircuitStage:
        beat = apply_bad_beat(1000, 0, stage)
        print(f"  {stage.name:<13} {stage.pair_count:>2} pairs, pot x{stage.pot_growth_multiplier}, "
              f"a miss turns a 1000 pot into {beat.current_pot}")

    state = build_initial_state(6, mode=GameMode.HIGH_ROLLER, seed=seed, wager=100)
    first, second = next(iter(_pairs(state).values()))
    state, _ = flip_card(state, first)
    state, event = flip_card(state, second)
    print(f"\n  Wager 100, first match: {event.name}, pot {state.current_pot}, bank {state.banked_score}")


def demo_monte_carlo(seed: int):
    """Run a batch and a circuit."""
    print("\n" + "=" * 60)
    print("MONTE CARLO SIMULATION (100 games)")
    print("=" * 60)

    sim = Simulator()
    print(sim.run_batch("standard", runs=100, seed=seed))
    print(sim.run_circuit(seed=seed))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Memory game engine demo")
    parser.add_argument("--seed", type=int, default=7, help="Seed for every demo")
    args = parser.parse_args()

    demo_deal(args.seed)
    demo_scoring()
    demo_perfect_game(args.seed)
    demo_double_down(args.seed)
    demo_high_roller(args.seed)
    demo_monte_carlo(args.seed)

    print("\n" + "=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)
