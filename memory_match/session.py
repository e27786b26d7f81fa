"""
Game session orchestration.

A GameSession drives one game: it keeps the clock, forwards flips to the
engine, applies Time Attack clock changes, Mirage reshuffles and final
bonuses, and hands every new state to an optional save callback. It owns no
scoring rules and runs no threads; the caller feeds it ticks and serializes
calls.
"""

import logging
from dataclasses import replace
from typing import Callable, Optional

from .engine.game import (
    GameDomainEvent, MemoryGameState, activate_double_down, apply_final_bonuses,
    build_initial_state, flip_card, reset_error_cards,
)
from .engine.modes import GameMode
from .engine.mutators import reveal_duration_ms, should_shuffle, shuffle_remaining_cards
from .engine.serialization import SavedGame
from .engine.time_attack import (
    LOW_TIME_WARNING_THRESHOLD, calculate_initial_time, calculate_time_gain,
)

logger = logging.getLogger(__name__)

MISMATCH_DELAY_MS = 1000
PEEK_DURATION_MS = 3000

SaveCallback = Callable[[MemoryGameState, int], None]


class GameSession:
    """
    Drives a single game.

    ``seconds`` counts up in most modes and down in Time Attack, where it
    is the remaining time.
    """

    def __init__(self, state: MemoryGameState, seconds: Optional[int] = None,
                 on_save: Optional[SaveCallback] = None):
        if seconds is None:
            seconds = calculate_initial_time(state.pair_count) if state.mode == GameMode.TIME_ATTACK else 0
        self.state = state
        self.seconds = seconds
        self.on_save = on_save
        self.pending_mismatch = bool(any(c.is_error for c in state.cards))
        self._save()

    @classmethod
    def new_game(cls, pair_count: int, on_save: Optional[SaveCallback] = None, **kwargs) -> "GameSession":
        """Start a fresh game; keyword arguments go to ``build_initial_state``."""
        return cls(build_initial_state(pair_count, **kwargs), on_save=on_save)

    @classmethod
    def resume(cls, saved: SavedGame, on_save: Optional[SaveCallback] = None) -> "GameSession":
        return cls(saved.game_state, seconds=saved.elapsed_time_seconds, on_save=on_save)

    @property
    def is_time_attack(self) -> bool:
        return self.state.mode == GameMode.TIME_ATTACK

    @property
    def is_low_on_time(self) -> bool:
        return self.is_time_attack and 0 < self.seconds <= LOW_TIME_WARNING_THRESHOLD

    @property
    def peek_duration_ms(self) -> int:
        """How long the whole board is shown before play starts."""
        return reveal_duration_ms(PEEK_DURATION_MS, self.state.active_mutators)

    @property
    def mismatch_delay_ms(self) -> int:
        """How long a mismatched pair stays visible before ``process_mismatch``."""
        return reveal_duration_ms(MISMATCH_DELAY_MS, self.state.active_mutators)

    def peek_view(self) -> MemoryGameState:
        """The board with every unmatched card showing; for display only."""
        cards = tuple(c if c.is_matched else replace(c, is_face_up=True) for c in self.state.cards)
        return replace(self.state, cards=cards)

    def tick(self, seconds: int = 1) -> Optional[GameDomainEvent]:
        """Advance the clock. Returns GAME_OVER if a Time Attack countdown runs out."""
        if self.state.is_game_over:
            return None

        if self.is_time_attack:
            self.seconds = max(0, self.seconds - seconds)
            if self.seconds == 0:
                return self._time_out()
        else:
            self.seconds += seconds

        self._save()
        return None

    def flip(self, card_id: int) -> Optional[GameDomainEvent]:
        """Forward a flip to the engine; misuse is ignored and returns None."""
        if self.pending_mismatch:
            return None

        new_state, event = flip_card(self.state, card_id)
        if event is None:
            return None

        if event in (GameDomainEvent.MATCH_SUCCESS, GameDomainEvent.THE_NUTS_ACHIEVED):
            if self.is_time_attack:
                self.seconds += calculate_time_gain(new_state.combo_multiplier)
        elif event == GameDomainEvent.MATCH_FAILURE:
            self.pending_mismatch = True
        elif event == GameDomainEvent.GAME_WON:
            new_state = apply_final_bonuses(new_state, self.seconds)
            logger.info("Game won: score %d in %d moves", new_state.score, new_state.moves)
        elif event == GameDomainEvent.GAME_OVER:
            logger.info("Game over: busted=%s after %d moves", new_state.is_busted, new_state.moves)

        self.state = new_state
        self._save()
        return event

    def process_mismatch(self) -> Optional[GameDomainEvent]:
        """
        Resolve a shown mismatch after ``mismatch_delay_ms``.

        Applies the Time Attack penalty, turns the pair face-down and runs the
        Mirage reshuffle when it is due.
        """
        if not self.pending_mismatch:
            return None
        self.pending_mismatch = False

        if self.is_time_attack:
            self.seconds = max(0, self.seconds - self.state.config.time_attack_mismatch_penalty)
            if self.seconds == 0:
                return self._time_out()

        state = reset_error_cards(self.state)
        if should_shuffle(state):
            logger.debug("Mirage reshuffle after %d dry moves", state.moves_since_last_match)
            state = shuffle_remaining_cards(state)

        self.state = state
        self._save()
        return None

    def double_down(self) -> bool:
        """Try to arm Double Down; returns whether it took."""
        new_state = activate_double_down(self.state)
        if new_state is self.state:
            return False
        self.state = new_state
        self._save()
        return True

    def _time_out(self) -> GameDomainEvent:
        logger.info("Time ran out after %d moves", self.state.moves)
        self.pending_mismatch = False
        self.state = replace(self.state, is_game_over=True, is_game_won=False, score=0)
        self._save()
        return GameDomainEvent.GAME_OVER

    def _save(self) -> None:
        if self.on_save is not None:
            self.on_save(self.state, self.seconds)
