"""
Scoring engine for the memory game.
Calculates per-match points, Double Down payouts and end-of-game bonuses.
"""

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

from .modes import DifficultyType, GameMode

logger = logging.getLogger(__name__)

TIME_ATTACK_BONUS_MULTIPLIER = 10
CURRENCY_SCORE_DIVISOR = 100


@dataclass(frozen=True)
class ScoringConfig:
    """
    Tunable point values and thresholds.

    Match points = base_match_points + combo_bonus_points × combo²,
    where combo is the streak length before the match.
    """
    base_match_points: int = 100
    combo_bonus_points: int = 50
    time_bonus_per_pair: int = 50       # Per pair, before the time penalty
    time_penalty_per_second: int = 1
    move_bonus_multiplier: int = 10000  # Dominant term: pairs / moves × this
    heat_mode_threshold: int = 3        # Combo needed to unlock Double Down
    double_down_penalty: int = 500
    high_roller_threshold: int = 1
    the_nuts_threshold: int = 6         # Combo that auto-banks the High Roller pot
    daily_challenge_bonus: int = 500    # Flat currency for clearing a Daily Challenge
    time_attack_mismatch_penalty: int = 2

    def __post_init__(self):
        if self.base_match_points <= 0:
            raise ValueError("base_match_points must be positive")
        if self.heat_mode_threshold <= 0:
            raise ValueError("heat_mode_threshold must be positive")
        if self.the_nuts_threshold < self.high_roller_threshold:
            raise ValueError("the_nuts_threshold must be >= high_roller_threshold")

    @classmethod
    def from_dict(cls, data: dict) -> "ScoringConfig":
        """Build a config from a dict, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected a dict of scoring values, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def with_overrides(self, overrides: dict) -> "ScoringConfig":
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in overrides.items() if k in known})


@dataclass(frozen=True)
class ScoreBreakdown:
    """Itemized final score, filled in when a game is won."""
    match_points: int = 0
    combo_bonus: int = 0
    double_down_bonus: int = 0
    time_bonus: int = 0
    move_bonus: int = 0
    daily_challenge_bonus: int = 0
    earned_currency: int = 0
    total_score: int = 0


@dataclass(frozen=True)
class MatchScoreResult:
    final_score: int
    dd_bonus: int


def combo_bonus(combo_multiplier: int, config: ScoringConfig) -> int:
    """Combo bonus for a match made while on a streak of ``combo_multiplier``."""
    return config.combo_bonus_points * combo_multiplier * combo_multiplier


def calculate_match_score(current_score: int, is_double_down_active: bool,
                          match_base_points: int, match_combo_bonus: int,
                          is_won: bool) -> MatchScoreResult:
    """
    Add one match to the running score.

    Double Down doubles the match increment and reports the extra half as
    ``dd_bonus``. If the doubled match also clears the board, the whole
    running total is doubled instead.
    """
    match_points = match_base_points + match_combo_bonus

    if is_won and is_double_down_active:
        total_without_bonus = current_score + match_points
        final_score = total_without_bonus * 2
        return MatchScoreResult(final_score=final_score,
                                dd_bonus=final_score - total_without_bonus)

    if is_double_down_active:
        return MatchScoreResult(final_score=current_score + match_points * 2,
                                dd_bonus=match_points)

    return MatchScoreResult(final_score=current_score + match_points, dd_bonus=0)


def calculate_time_bonus(mode: GameMode, pair_count: int, elapsed_time_seconds: int,
                         config: ScoringConfig) -> int:
    """
    Time bonus for a won game.

    In Time Attack the caller passes the remaining countdown, which is paid
    out per second. Other modes start from a per-pair allowance and lose
    points for every second taken.
    """
    if mode == GameMode.TIME_ATTACK:
        return int(elapsed_time_seconds * TIME_ATTACK_BONUS_MULTIPLIER)
    allowance = pair_count * config.time_bonus_per_pair
    return max(0, int(allowance - elapsed_time_seconds * config.time_penalty_per_second))


def calculate_move_bonus(pair_count: int, moves: int, config: ScoringConfig) -> int:
    """Move efficiency bonus; a perfect game (moves == pairs) earns the full multiplier."""
    if moves <= 0:
        return 0
    return round(pair_count / moves * config.move_bonus_multiplier)


def calculate_earned_currency(total_score: int, difficulty: DifficultyType, mode: GameMode,
                              config: ScoringConfig) -> tuple[int, int]:
    """Return (earned_currency, daily_challenge_bonus) for a final score."""
    base = total_score // CURRENCY_SCORE_DIVISOR
    earned = int(base * difficulty.currency_multiplier)
    daily_bonus = config.daily_challenge_bonus if mode == GameMode.DAILY_CHALLENGE else 0
    return earned + daily_bonus, daily_bonus


def apply_final_bonuses(state, elapsed_time_seconds: int):
    """
    Apply time, move and currency bonuses to a won game.

    Returns ``state`` unchanged unless ``state.is_game_won``, and unchanged
    again once the bonuses have been folded into ``state.score``.
    """
    if not state.is_game_won:
        return state
    if state.score_breakdown != ScoreBreakdown() and state.score_breakdown.total_score == state.score:
        return state

    config = state.config
    time_bonus = calculate_time_bonus(state.mode, state.pair_count, elapsed_time_seconds, config)
    move_bonus = calculate_move_bonus(state.pair_count, state.moves, config)

    dd_bonus = state.total_double_down_bonus
    match_points = state.score - dd_bonus
    total_score = match_points + time_bonus + move_bonus + dd_bonus

    earned_currency, daily_bonus = calculate_earned_currency(
        total_score, state.difficulty, state.mode, config
    )

    breakdown = ScoreBreakdown(
        match_points=match_points,
        combo_bonus=state.total_combo_bonus,
        double_down_bonus=dd_bonus,
        time_bonus=time_bonus,
        move_bonus=move_bonus,
        daily_challenge_bonus=daily_bonus,
        earned_currency=earned_currency,
        total_score=total_score,
    )
    logger.debug("Final score %d (time %d, moves %d, currency %d)",
                 total_score, time_bonus, move_bonus, earned_currency)

    return replace(state, score=total_score, score_breakdown=breakdown)


def load_scoring_config(path: Optional[str] = None) -> ScoringConfig:
    """Load scoring overrides from JSON, falling back to defaults."""
    data_path = Path(path) if path else Path(__file__).parent.parent / "data" / "scoring_config.json"
    try:
        with open(data_path) as f:
            return ScoringConfig.from_dict(json.load(f))
    except FileNotFoundError:
        logger.debug("No scoring config at %s, using defaults", data_path)
        return ScoringConfig()
