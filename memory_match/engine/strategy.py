"""
Automated players for memory game simulation.
"""

import random
from typing import Optional

from .deck import face_up_unmatched


class RandomStrategy:
    """
    Flips hidden cards at random and remembers nothing.
    Baseline for how much memory is worth.
    """

    name = "Random"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def new_game(self) -> None:
        """Reset anything carried over from a previous game."""

    def observe(self, state) -> None:
        """Look at the board after a transition."""

    def forget(self) -> None:
        """Drop memories that no longer point at the right cards (e.g. after a reshuffle)."""

    def wants_double_down(self, state) -> bool:
        return False

    def _hidden_ids(self, state) -> list[int]:
        return [c.id for c in state.cards if not c.is_face_up and not c.is_matched]

    def select_card(self, state) -> int:
        return self.rng.choice(self._hidden_ids(state))


class PerfectMemoryStrategy(RandomStrategy):
    """
    Remembers every card it has seen.
    Completes known pairs first, otherwise explores unseen cards.
    """

    name = "Perfect Memory"

    def __init__(self, rng: Optional[random.Random] = None):
        super().__init__(rng)
        self.seen: dict = {}  # card id -> (suit, rank)

    def new_game(self) -> None:
        self.seen = {}

    def forget(self) -> None:
        self.seen = {}

    def _remember(self, card) -> None:
        self.seen[card.id] = card.face

    def observe(self, state) -> None:
        for card in state.cards:
            if card.is_matched:
                self.seen.pop(card.id, None)
            elif card.is_face_up:
                self._remember(card)

    def _known_partner(self, card_id: int, face, hidden: set) -> Optional[int]:
        for other_id, other_face in self.seen.items():
            if other_id != card_id and other_face == face and other_id in hidden:
                return other_id
        return None

    def select_card(self, state) -> int:
        hidden = set(self._hidden_ids(state))
        showing = face_up_unmatched(state.cards)

        if len(showing) == 1:
            first = showing[0]
            partner = self._known_partner(first.id, first.face, hidden)
            if partner is not None:
                return partner
        else:
            # Open with a pair we already know about
            for card_id, face in self.seen.items():
                if card_id in hidden and self._known_partner(card_id, face, hidden) is not None:
                    return card_id

        unseen = sorted(hidden - set(self.seen))
        if unseen:
            return self.rng.choice(unseen)
        return self.rng.choice(sorted(hidden))


class ForgetfulStrategy(PerfectMemoryStrategy):
    """Like PerfectMemoryStrategy, but each glimpse is only remembered with ``recall`` probability."""

    name = "Forgetful"

    def __init__(self, recall: float = 0.6, rng: Optional[random.Random] = None):
        super().__init__(rng)
        self.recall = recall

    def _remember(self, card) -> None:
        if card.id in self.seen or self.rng.random() < self.recall:
            self.seen[card.id] = card.face


class GamblerStrategy(PerfectMemoryStrategy):
    """Perfect memory, and takes Double Down every time it is offered."""

    name = "Gambler"

    def wants_double_down(self, state) -> bool:
        return state.can_double_down
