"""
Game state and flip/match transitions for the memory game.

Every transition takes a MemoryGameState and returns a new one; nothing is
mutated in place.
"""

import logging
import random
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Optional

from .comments import MatchComment, generate_match_comment
from .deck import CardState, deal_cards, face_up_unmatched, unmatched_pair_count
from .high_roller import CircuitStage, apply_bad_beat, grow_pot
from .modes import DifficultyType, GameMode
from .mutators import select_mutators, shuffle_remaining_cards
from .scoring import (
    ScoreBreakdown, ScoringConfig, apply_final_bonuses, calculate_match_score, combo_bonus,
)

logger = logging.getLogger(__name__)

MIN_PAIRS_FOR_DOUBLE_DOWN = 3

__all__ = [
    "GameDomainEvent", "MemoryGameState", "MIN_PAIRS_FOR_DOUBLE_DOWN",
    "build_initial_state", "flip_card", "reset_error_cards", "activate_double_down",
    "apply_final_bonuses", "shuffle_remaining_cards",
]


class GameDomainEvent(Enum):
    """Outcome of a transition that the caller may want to react to."""
    CARD_FLIPPED = auto()
    MATCH_SUCCESS = auto()
    MATCH_FAILURE = auto()
    GAME_WON = auto()
    GAME_OVER = auto()
    THE_NUTS_ACHIEVED = auto()


@dataclass(frozen=True)
class MemoryGameState:
    """
    Full state of one game.

    High Roller games keep their at-risk points in ``current_pot`` and their
    safe points in ``banked_score``; ``score`` mirrors the bank in that mode.
    """
    cards: tuple = ()
    pair_count: int = 8
    mode: GameMode = GameMode.STANDARD
    difficulty: DifficultyType = DifficultyType.CASUAL
    moves: int = 0
    score: int = 0
    combo_multiplier: int = 0
    moves_since_last_match: int = 0
    is_double_down_active: bool = False
    is_busted: bool = False
    is_game_won: bool = False
    is_game_over: bool = False
    current_pot: int = 0
    banked_score: int = 0
    current_wager: int = 0
    circuit_stage: CircuitStage = CircuitStage.QUALIFIER
    active_mutators: frozenset = frozenset()
    seed: Optional[int] = None
    config: ScoringConfig = field(default_factory=ScoringConfig)
    score_breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)
    last_matched_ids: tuple = ()
    total_base_points: int = 0
    total_combo_bonus: int = 0
    total_double_down_bonus: int = 0
    # Display only; not persisted and ignored by equality
    match_comment: Optional[MatchComment] = field(default=None, compare=False)

    def __post_init__(self):
        if self.pair_count <= 0:
            raise ValueError(f"pair_count must be positive, got {self.pair_count}")
        if self.moves < 0:
            raise ValueError(f"moves must be non-negative, got {self.moves}")
        if self.combo_multiplier < 0:
            raise ValueError(f"combo_multiplier must be non-negative, got {self.combo_multiplier}")

        # Accept lists/sets from callers, store immutable containers
        if not isinstance(self.cards, tuple):
            object.__setattr__(self, "cards", tuple(self.cards))
        if not isinstance(self.last_matched_ids, tuple):
            object.__setattr__(self, "last_matched_ids", tuple(self.last_matched_ids))
        if not isinstance(self.active_mutators, frozenset):
            object.__setattr__(self, "active_mutators", frozenset(self.active_mutators))

    @property
    def matches_found(self) -> int:
        return sum(1 for c in self.cards if c.is_matched) // 2

    @property
    def unmatched_pairs(self) -> int:
        return unmatched_pair_count(self.cards)

    @property
    def is_heat_mode(self) -> bool:
        return self.combo_multiplier >= self.config.heat_mode_threshold

    @property
    def can_double_down(self) -> bool:
        return (not self.is_game_over
                and not self.is_double_down_active
                and self.is_heat_mode
                and self.unmatched_pairs >= MIN_PAIRS_FOR_DOUBLE_DOWN)

    def card(self, card_id: int) -> Optional[CardState]:
        return next((c for c in self.cards if c.id == card_id), None)


def build_initial_state(pair_count: int, config: Optional[ScoringConfig] = None,
                        mode: GameMode = GameMode.STANDARD,
                        difficulty: DifficultyType = DifficultyType.CASUAL,
                        seed: Optional[int] = None,
                        circuit_stage: Optional[CircuitStage] = None,
                        banked_score: int = 0, wager: int = 0) -> MemoryGameState:
    """
    Deal a new game.

    The same seed always deals the same board and, for Daily Challenges, the
    same mutators. Without a seed one is drawn and stored on the state so the
    game can be shared or replayed. High Roller rounds may carry a bank from
    the previous stage and open the pot with a buy-in ``wager``.
    """
    if seed is None:
        seed = random.randrange(2 ** 63)
    rng = random.Random(seed)

    cards = deal_cards(pair_count, rng)
    mutators = select_mutators(rng) if mode == GameMode.DAILY_CHALLENGE else frozenset()

    state = MemoryGameState(
        cards=cards,
        pair_count=pair_count,
        mode=mode,
        difficulty=difficulty,
        active_mutators=mutators,
        seed=seed,
        config=config or ScoringConfig(),
    )

    if mode == GameMode.HIGH_ROLLER:
        state = replace(
            state,
            circuit_stage=circuit_stage or CircuitStage.QUALIFIER,
            banked_score=banked_score,
            score=banked_score,
            current_pot=wager,
            current_wager=wager,
        )

    logger.debug("New %s game: %d pairs, seed %d", mode.name, pair_count, seed)
    return state


def flip_card(state: MemoryGameState, card_id: int) -> tuple[MemoryGameState, Optional[GameDomainEvent]]:
    """
    Flip one card face-up and resolve the turn if it is the second card.

    Flips after game over, on unknown/face-up/matched cards, or while two
    cards are still showing are no-ops returning ``(state, None)``.
    """
    if state.is_game_over:
        return state, None

    target = state.card(card_id)
    if target is None or target.is_face_up or target.is_matched:
        return state, None

    showing = face_up_unmatched(state.cards)
    if len(showing) >= 2:
        return state, None

    cards = tuple(replace(c, is_face_up=True) if c.id == card_id else c for c in state.cards)
    flipped = replace(
        state,
        cards=cards,
        # A new turn clears the previous match highlight
        last_matched_ids=() if not showing else state.last_matched_ids,
    )

    active = face_up_unmatched(cards)
    if len(active) == 1:
        return flipped, GameDomainEvent.CARD_FLIPPED

    first, second = active
    if first.matches(second):
        return _handle_match(flipped, first, second)
    return _handle_mismatch(flipped, first, second)


def _mark(cards, ids, **flags) -> tuple:
    return tuple(replace(c, **flags) if c.id in ids else c for c in cards)


def _turn_rng(state: MemoryGameState, moves: int) -> random.Random:
    return random.Random((state.seed or 0) * 7919 + moves)


def _handle_match(state: MemoryGameState, first: CardState, second: CardState):
    config = state.config
    cards = _mark(state.cards, (first.id, second.id), is_matched=True, is_face_up=True)
    is_won = all(c.is_matched for c in cards)
    moves = state.moves + 1
    combo_after = state.combo_multiplier + 1

    base_points = config.base_match_points
    bonus_points = combo_bonus(state.combo_multiplier, config)

    comment = generate_match_comment(
        moves,
        sum(1 for c in cards if c.is_matched) // 2,
        state.pair_count,
        state.combo_multiplier,
        config,
        _turn_rng(state, moves),
        is_double_down_active=state.is_double_down_active,
    )

    common = dict(
        cards=cards,
        moves=moves,
        combo_multiplier=combo_after,
        moves_since_last_match=0,
        is_double_down_active=False,
        is_game_won=is_won,
        is_game_over=is_won,
        total_base_points=state.total_base_points + base_points,
        total_combo_bonus=state.total_combo_bonus + bonus_points,
        last_matched_ids=(first.id, second.id),
        match_comment=comment,
    )

    if state.mode == GameMode.HIGH_ROLLER:
        return _handle_high_roller_match(state, base_points + bonus_points, combo_after, is_won, common)

    result = calculate_match_score(
        current_score=state.score,
        is_double_down_active=state.is_double_down_active,
        match_base_points=base_points,
        match_combo_bonus=bonus_points,
        is_won=is_won,
    )
    new_state = replace(
        state,
        score=result.final_score,
        total_double_down_bonus=state.total_double_down_bonus + result.dd_bonus,
        **common,
    )
    return new_state, GameDomainEvent.GAME_WON if is_won else GameDomainEvent.MATCH_SUCCESS


def _handle_high_roller_match(state: MemoryGameState, match_points: int, combo_after: int,
                              is_won: bool, common: dict):
    # Double Down doubles what goes into the pot; the pot is still at risk
    if state.is_double_down_active:
        match_points *= 2

    pot = grow_pot(
        current_pot=state.current_pot,
        banked_score=state.banked_score,
        match_points=match_points,
        combo_after_match=combo_after,
        is_won=is_won,
        stage=state.circuit_stage,
        config=state.config,
    )
    new_state = replace(
        state,
        current_pot=pot.current_pot,
        banked_score=pot.banked_score,
        score=pot.banked_score,
        **common,
    )

    if is_won:
        return new_state, GameDomainEvent.GAME_WON
    if pot.is_nuts_banking:
        return new_state, GameDomainEvent.THE_NUTS_ACHIEVED
    return new_state, GameDomainEvent.MATCH_SUCCESS


def _handle_mismatch(state: MemoryGameState, first: CardState, second: CardState):
    cards = _mark(state.cards, (first.id, second.id), is_error=True)
    moves = state.moves + 1

    if state.is_double_down_active:
        logger.debug("Double Down lost on move %d", moves)
        return replace(
            state,
            cards=cards,
            moves=moves,
            score=0,
            combo_multiplier=0,
            moves_since_last_match=state.moves_since_last_match + 1,
            is_double_down_active=False,
            is_busted=True,
            is_game_won=False,
            is_game_over=True,
            last_matched_ids=(),
            match_comment=None,
        ), GameDomainEvent.GAME_OVER

    new_state = replace(
        state,
        cards=cards,
        moves=moves,
        combo_multiplier=0,
        moves_since_last_match=state.moves_since_last_match + 1,
        last_matched_ids=(),
        match_comment=None,
    )

    if state.mode == GameMode.HIGH_ROLLER:
        beat = apply_bad_beat(state.current_pot, state.banked_score, state.circuit_stage)
        new_state = replace(new_state, current_pot=beat.current_pot)
        if beat.is_busted:
            logger.debug("Busted on move %d", moves)
            return replace(new_state, is_busted=True, is_game_over=True), GameDomainEvent.GAME_OVER

    return new_state, GameDomainEvent.MATCH_FAILURE


def reset_error_cards(state: MemoryGameState) -> MemoryGameState:
    """Turn mismatched cards back face-down."""
    if not any(c.is_error for c in state.cards):
        return state
    cards = tuple(replace(c, is_face_up=False, is_error=False) if c.is_error else c
                  for c in state.cards)
    return replace(state, cards=cards)


def activate_double_down(state: MemoryGameState) -> MemoryGameState:
    """Arm Double Down if the streak and remaining board allow it."""
    if not state.can_double_down:
        return state
    logger.debug("Double Down armed at combo %d", state.combo_multiplier)
    return replace(state, is_double_down_active=True)
