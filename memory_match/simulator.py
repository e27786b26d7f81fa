"""
Main API for memory game simulation.
Plays whole games with automated strategies to check scoring balance.
"""

import logging
import random
from dataclasses import dataclass, field, replace
from typing import Optional, Union

from .engine.deck import face_up_unmatched
from .engine.game import GameDomainEvent, build_initial_state
from .engine.high_roller import CircuitStage, next_circuit_stage
from .engine.modes import GameMode
from .engine.scoring import ScoreBreakdown, load_scoring_config
from .engine.strategy import ForgetfulStrategy, GamblerStrategy, PerfectMemoryStrategy, RandomStrategy
from .presets import PRESETS, Preset, StrategyType, get_preset, list_presets
from .session import GameSession

logger = logging.getLogger(__name__)

SECONDS_PER_FLIP = 1
MAX_FLIPS = 10_000
SCORE_BUCKET = 1000


@dataclass
class GameSummary:
    """Summary of a simulated game."""
    preset_used: str
    mode: str
    difficulty: str
    pair_count: int
    seed: int
    won: bool
    busted: bool
    timed_out: bool
    score: int
    moves: int
    seconds: int
    max_combo: int
    double_downs: int
    banked_score: int = 0
    mutators: list[str] = field(default_factory=list)
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)

    @property
    def earned_currency(self) -> int:
        return self.breakdown.earned_currency

    def __str__(self):
        if self.won:
            result = "CLEARED"
        elif self.busted:
            result = "BUSTED"
        elif self.timed_out:
            result = "OUT OF TIME"
        else:
            result = "UNFINISHED"
        lines = [
            f"{'='*50}",
            f"  {result} - {self.mode} {self.pair_count} pairs ({self.difficulty})",
            f"{'='*50}",
            f"  Score: {self.score:,}",
            f"  Moves: {self.moves}",
            f"  Seconds: {self.seconds}",
            f"  Best combo: {self.max_combo}",
            f"  Double Downs: {self.double_downs}",
        ]
        if self.mutators:
            lines.append(f"  Mutators: {', '.join(self.mutators)}")
        if self.mode == GameMode.HIGH_ROLLER.name:
            lines.append(f"  Banked: {self.banked_score:,}")
        if self.won:
            b = self.breakdown
            lines.append(f"  Breakdown: match {b.match_points:,} + time {b.time_bonus:,} "
                         f"+ moves {b.move_bonus:,} + DD {b.double_down_bonus:,}")
            lines.append(f"  Currency earned: {b.earned_currency:,}")
        lines.append(f"{'='*50}")
        return "\n".join(lines)

    def to_dict(self):
        return {
            "preset_used": self.preset_used,
            "mode": self.mode,
            "difficulty": self.difficulty,
            "pair_count": self.pair_count,
            "seed": self.seed,
            "won": self.won,
            "busted": self.busted,
            "timed_out": self.timed_out,
            "score": self.score,
            "moves": self.moves,
            "seconds": self.seconds,
            "max_combo": self.max_combo,
            "double_downs": self.double_downs,
            "banked_score": self.banked_score,
            "mutators": self.mutators,
            "earned_currency": self.earned_currency,
        }


@dataclass
class BatchResult:
    """Results from multiple simulated games."""
    runs: int
    wins: int
    win_rate: float
    busts: int
    avg_score: float
    max_score: int
    avg_moves: float
    avg_seconds: float
    avg_currency: float
    score_distribution: dict[int, int]
    preset_used: str

    def __str__(self):
        lines = [
            f"{'='*50}",
            f"  BATCH RESULTS ({self.runs} games)",
            f"  Preset: {self.preset_used}",
            f"{'='*50}",
            f"  Win rate: {self.wins}/{self.runs} ({self.win_rate:.1f}%)",
            f"  Busts: {self.busts}",
            f"  Avg score: {self.avg_score:,.0f}",
            f"  Max score: {self.max_score:,}",
            f"  Avg moves: {self.avg_moves:.1f}",
            f"  Avg seconds: {self.avg_seconds:.1f}",
            f"  Avg currency: {self.avg_currency:.1f}",
            "",
            "  Score distribution:",
        ]

        for bucket in sorted(self.score_distribution.keys()):
            count = self.score_distribution[bucket]
            pct = count / self.runs * 100
            bar = "█" * int(pct / 2)
            lines.append(f"    {bucket:>6,}+: {count:>3} ({pct:>5.1f}%) {bar}")

        lines.append(f"{'='*50}")
        return "\n".join(lines)

    def to_dict(self):
        return {
            "runs": self.runs,
            "wins": self.wins,
            "win_rate": self.win_rate,
            "busts": self.busts,
            "avg_score": self.avg_score,
            "max_score": self.max_score,
            "avg_moves": self.avg_moves,
            "avg_seconds": self.avg_seconds,
            "avg_currency": self.avg_currency,
            "score_distribution": self.score_distribution,
            "preset_used": self.preset_used,
        }


@dataclass
class CircuitResult:
    """A High Roller circuit played stage by stage."""
    stages: list[GameSummary]
    completed: bool

    @property
    def final_bank(self) -> int:
        return self.stages[-1].banked_score if self.stages else 0

    def __str__(self):
        lines = [f"{'='*50}", "  HIGH ROLLER CIRCUIT", f"{'='*50}"]
        for stage, summary in zip(CircuitStage, self.stages):
            status = "cleared" if summary.won else "out"
            lines.append(f"  {stage.name:<13} {status:<8} bank {summary.banked_score:>7,}")
        lines.append(f"  {'Completed' if self.completed else 'Eliminated'} with {self.final_bank:,} banked")
        lines.append(f"{'='*50}")
        return "\n".join(lines)


class Simulator:
    """
    Main simulator class.

    Usage:
        sim = Simulator()
        result = sim.run("daily", seed=42)
        print(result)

        # Or run many:
        batch = sim.run_batch("standard", runs=100)
        print(batch)
    """

    def __init__(self, config_path: str = None):
        """Initialize simulator with the scoring config file (or defaults)."""
        self.base_config = load_scoring_config(config_path)

    def _get_strategy(self, strategy_type: StrategyType, rng: random.Random):
        """Get strategy instance from type."""
        strategies = {
            StrategyType.RANDOM: RandomStrategy,
            StrategyType.PERFECT: PerfectMemoryStrategy,
            StrategyType.FORGETFUL: ForgetfulStrategy,
            StrategyType.GAMBLER: GamblerStrategy,
        }
        return strategies.get(strategy_type, ForgetfulStrategy)(rng=rng)

    def get_available_presets(self) -> list[dict]:
        """Get list of available presets with info."""
        return [
            {
                "id": key,
                "name": p.name,
                "description": p.description,
                "mode": p.mode.name,
                "pairs": p.pair_count,
                "strategy": p.strategy.value,
            }
            for key, p in PRESETS.items()
        ]

    def _resolve(self, preset: Union[str, Preset]) -> tuple[Preset, str]:
        if isinstance(preset, str):
            p = get_preset(preset)
            if p is None:
                raise ValueError(f"Unknown preset: {preset}. Available: {list_presets()}")
            return p, preset
        return preset, preset.name

    def run(self, preset: Union[str, Preset] = "standard",
            seed: Optional[int] = None,
            verbose: bool = False,
            strategy_override: Optional[StrategyType] = None,
            banked_score: int = 0) -> GameSummary:
        """
        Play a single game to the end.

        Args:
            preset: Preset name (string) or Preset object
            seed: Seed for the deal and the strategy; the same seed replays the same game
            verbose: Print each turn
            strategy_override: StrategyType to override preset's default strategy
            banked_score: High Roller bank carried in from a previous stage

        Returns:
            GameSummary with results
        """
        p, preset_name = self._resolve(preset)
        if seed is None:
            seed = random.randrange(2 ** 32)

        config = self.base_config.with_overrides(p.config_overrides)
        strategy = self._get_strategy(strategy_override or p.strategy, random.Random(seed + 1))

        pair_count = p.pair_count
        if p.mode == GameMode.HIGH_ROLLER:
            pair_count = (p.circuit_stage or CircuitStage.QUALIFIER).pair_count

        state = build_initial_state(
            pair_count,
            config=config,
            mode=p.mode,
            difficulty=p.difficulty,
            seed=seed,
            circuit_stage=p.circuit_stage,
            banked_score=banked_score,
            wager=p.wager,
        )
        session = GameSession(state)
        strategy.new_game()

        max_combo = 0
        double_downs = 0
        flips = 0

        while not session.state.is_game_over and flips < MAX_FLIPS:
            if not face_up_unmatched(session.state.cards) and strategy.wants_double_down(session.state):
                if session.double_down():
                    double_downs += 1
                    if verbose:
                        print(f"  Move {session.state.moves}: Double Down at combo {session.state.combo_multiplier}")

            card_id = strategy.select_card(session.state)
            event = session.flip(card_id)
            flips += 1
            strategy.observe(session.state)
            max_combo = max(max_combo, session.state.combo_multiplier)

            if verbose and event not in (None, GameDomainEvent.CARD_FLIPPED):
                comment = session.state.match_comment
                print(f"  Move {session.state.moves}: {event.name} score={session.state.score:,}"
                      + (f" - {comment}" if comment else ""))

            if session.pending_mismatch:
                dry_moves = session.state.moves_since_last_match
                session.process_mismatch()
                if dry_moves and session.state.moves_since_last_match == 0:
                    # Mirage moved the cards; old sightings are worthless
                    strategy.forget()

            session.tick(SECONDS_PER_FLIP)

        final = session.state
        if flips >= MAX_FLIPS:
            logger.warning("Game %s (seed %d) stopped after %d flips", preset_name, seed, flips)

        return GameSummary(
            preset_used=preset_name,
            mode=final.mode.name,
            difficulty=final.difficulty.name,
            pair_count=final.pair_count,
            seed=seed,
            won=final.is_game_won,
            busted=final.is_busted,
            timed_out=final.is_game_over and not final.is_game_won and not final.is_busted,
            score=final.score,
            moves=final.moves,
            seconds=session.seconds,
            max_combo=max_combo,
            double_downs=double_downs,
            banked_score=final.banked_score,
            mutators=sorted(m.name for m in final.active_mutators),
            breakdown=final.score_breakdown,
        )

    def run_batch(self, preset: Union[str, Preset] = "standard",
                  runs: int = 100, seed: Optional[int] = None,
                  verbose: bool = False,
                  strategy_override: Optional[StrategyType] = None) -> BatchResult:
        """
        Run multiple simulations and aggregate results.

        Args:
            preset: Preset name or Preset object
            runs: Number of games
            seed: First seed; game i uses seed + i
            verbose: Print progress
            strategy_override: StrategyType to override preset's default strategy

        Returns:
            BatchResult with aggregated stats
        """
        _, preset_name = self._resolve(preset)

        wins = 0
        busts = 0
        total_score = 0
        max_score = 0
        total_moves = 0
        total_seconds = 0
        total_currency = 0
        score_distribution = {}

        for i in range(runs):
            if verbose and (i + 1) % 10 == 0:
                print(f"  Game {i + 1}/{runs}...")

            game_seed = seed + i if seed is not None else None
            summary = self.run(preset, seed=game_seed, strategy_override=strategy_override)

            if summary.won:
                wins += 1
            if summary.busted:
                busts += 1
            total_score += summary.score
            max_score = max(max_score, summary.score)
            total_moves += summary.moves
            total_seconds += summary.seconds
            total_currency += summary.earned_currency

            bucket = summary.score // SCORE_BUCKET * SCORE_BUCKET
            score_distribution[bucket] = score_distribution.get(bucket, 0) + 1

        return BatchResult(
            runs=runs,
            wins=wins,
            win_rate=wins / runs * 100,
            busts=busts,
            avg_score=total_score / runs,
            max_score=max_score,
            avg_moves=total_moves / runs,
            avg_seconds=total_seconds / runs,
            avg_currency=total_currency / runs,
            score_distribution=score_distribution,
            preset_used=preset_name,
        )

    def run_circuit(self, preset: Union[str, Preset] = "high_roller",
                    seed: Optional[int] = None, verbose: bool = False,
                    strategy_override: Optional[StrategyType] = None) -> CircuitResult:
        """Play the High Roller stages in order, carrying the bank forward until a stage is lost."""
        p, _ = self._resolve(preset)
        if seed is None:
            seed = random.randrange(2 ** 32)

        stages = []
        stage = CircuitStage.QUALIFIER
        bank = 0
        while stage is not None:
            stage_preset = replace(
                p,
                mode=GameMode.HIGH_ROLLER,
                circuit_stage=stage,
                pair_count=stage.pair_count,
                # The buy-in only opens the circuit
                wager=p.wager if stage == CircuitStage.QUALIFIER else 0,
            )
            summary = self.run(stage_preset, seed=seed + stage.stage_id, verbose=verbose,
                               strategy_override=strategy_override, banked_score=bank)
            stages.append(summary)
            if verbose:
                print(f"{stage.name}: {'cleared' if summary.won else 'out'}, bank {summary.banked_score:,}")
            if not summary.won:
                return CircuitResult(stages=stages, completed=False)
            bank = summary.banked_score
            stage = next_circuit_stage(stage)

        return CircuitResult(stages=stages, completed=True)


# Convenience functions
def run(preset: str = "standard", seed: Optional[int] = None, verbose: bool = False) -> GameSummary:
    """Quick run with default simulator."""
    sim = Simulator()
    return sim.run(preset, seed=seed, verbose=verbose)


def run_batch(preset: str = "standard", runs: int = 100, seed: Optional[int] = None,
              verbose: bool = False) -> BatchResult:
    """Quick batch run with default simulator."""
    sim = Simulator()
    return sim.run_batch(preset, runs, seed=seed, verbose=verbose)
