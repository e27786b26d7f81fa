"""
Daily Challenge mutators.
Rule modifiers that the session applies on top of the base transitions.
"""

import random
from dataclasses import replace
from enum import Enum
from typing import Optional

from .deck import reindex


class DailyChallengeMutator(Enum):
    BLACKOUT = "blackout"   # Peek and mismatch reveal last half as long
    MIRAGE = "mirage"       # Unmatched cards reshuffle after a dry spell


BLACKOUT_CHANCE = 0.50
MIRAGE_CHANCE = 0.40
MIRAGE_MOVE_INTERVAL = 5


def select_mutators(rng: random.Random) -> frozenset:
    """Pick the mutators for a Daily Challenge; at least one is always active."""
    mutators = set()
    if rng.random() < BLACKOUT_CHANCE:
        mutators.add(DailyChallengeMutator.BLACKOUT)
    if rng.random() < MIRAGE_CHANCE:
        mutators.add(DailyChallengeMutator.MIRAGE)
    if not mutators:
        mutators.add(DailyChallengeMutator.BLACKOUT)
    return frozenset(mutators)


def reveal_duration_ms(base_ms: int, active_mutators) -> int:
    """Scale a peek or mismatch reveal duration for Blackout."""
    if DailyChallengeMutator.BLACKOUT in active_mutators:
        return base_ms // 2
    return base_ms


def should_shuffle(state) -> bool:
    """True when Mirage is active and the player has gone dry for the full interval."""
    return (DailyChallengeMutator.MIRAGE in state.active_mutators
            and state.moves_since_last_match == MIRAGE_MOVE_INTERVAL)


def shuffle_remaining_cards(state, rng: Optional[random.Random] = None):
    """
    Shuffle the unmatched cards and re-index the board.

    Matched cards keep their relative order at the front of the board;
    shuffled cards come back face-down with errors cleared.
    """
    if rng is None:
        rng = random.Random(_derived_seed(state))

    matched = [c for c in state.cards if c.is_matched]
    unmatched = [replace(c, is_face_up=False, is_error=False)
                 for c in state.cards if not c.is_matched]
    rng.shuffle(unmatched)

    return replace(state, cards=reindex(matched + unmatched), moves_since_last_match=0)


def _derived_seed(state) -> int:
    # Same game, same move count: same reshuffle
    return (state.seed or 0) * 1_000_003 + state.moves
