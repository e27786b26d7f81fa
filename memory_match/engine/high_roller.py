"""
High Roller circuit rules.
Matches grow an at-risk pot; streaks and board clears bank it, mismatches burn it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Optional

from .scoring import ScoringConfig

logger = logging.getLogger(__name__)


class CircuitStage(Enum):
    """The three rounds of the circuit, played in order."""
    QUALIFIER = 1
    SEMI_FINAL = 2
    GRAND_FINALE = 3

    @property
    def stage_id(self) -> int:
        return self.value

    @property
    def pair_count(self) -> int:
        return STAGE_RULES[self].pair_count

    @property
    def bust_penalty(self) -> float:
        return STAGE_RULES[self].bust_penalty

    @property
    def pot_growth_multiplier(self) -> int:
        return STAGE_RULES[self].pot_growth_multiplier

    @classmethod
    def from_id(cls, stage_id: int) -> "CircuitStage":
        for stage in cls:
            if stage.stage_id == stage_id:
                return stage
        return cls.QUALIFIER


@dataclass(frozen=True)
class StageRules:
    pair_count: int
    bust_penalty: float         # Fraction of the pot lost on a mismatch
    pot_growth_multiplier: int


STAGE_RULES = {
    CircuitStage.QUALIFIER: StageRules(pair_count=6, bust_penalty=0.2, pot_growth_multiplier=2),
    CircuitStage.SEMI_FINAL: StageRules(pair_count=10, bust_penalty=0.3, pot_growth_multiplier=3),
    CircuitStage.GRAND_FINALE: StageRules(pair_count=12, bust_penalty=0.5, pot_growth_multiplier=5),
}


@dataclass(frozen=True)
class PotResult:
    """Pot and bank after a High Roller match."""
    current_pot: int
    banked_score: int
    points_added: int
    is_nuts_banking: bool


@dataclass(frozen=True)
class BadBeatResult:
    current_pot: int
    is_busted: bool


def grow_pot(current_pot: int, banked_score: int, match_points: int, combo_after_match: int,
             is_won: bool, stage: CircuitStage, config: ScoringConfig) -> PotResult:
    """
    Add a match to the pot and bank it when the streak reaches The Nuts
    or the board is cleared.
    """
    points_added = match_points * stage.pot_growth_multiplier
    pot = current_pot + points_added
    is_nuts_banking = combo_after_match >= config.the_nuts_threshold

    if is_nuts_banking or is_won:
        if pot:
            logger.debug("Banking pot of %d (nuts=%s, won=%s)", pot, is_nuts_banking, is_won)
        return PotResult(current_pot=0, banked_score=banked_score + pot,
                         points_added=points_added, is_nuts_banking=is_nuts_banking)

    return PotResult(current_pot=pot, banked_score=banked_score,
                     points_added=points_added, is_nuts_banking=False)


def apply_bad_beat(current_pot: int, banked_score: int, stage: CircuitStage) -> BadBeatResult:
    """Burn ``stage.bust_penalty`` of the pot; an empty pot and bank is a bust."""
    kept = 1 - Fraction(str(stage.bust_penalty))
    pot = max(0, int(current_pot * kept))
    return BadBeatResult(current_pot=pot, is_busted=pot == 0 and banked_score == 0)


def next_circuit_stage(stage: CircuitStage) -> Optional[CircuitStage]:
    """The stage that follows ``stage``, or None after the Grand Finale."""
    order = list(CircuitStage)
    index = order.index(stage)
    if index + 1 < len(order):
        return order[index + 1]
    return None
