"""
Deck model for the memory game.
Handles card identity, pair selection and seeded shuffling.
"""

import random
from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union


class Suit(Enum):
    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"
    SPADES = "♠"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def is_red(self) -> bool:
        return self in (Suit.HEARTS, Suit.DIAMONDS)


class Rank(Enum):
    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    @property
    def symbol(self) -> str:
        return self.value


# Each pair consumes two of the 52 slots on the table
MAX_PAIR_COUNT = 26


@dataclass(frozen=True)
class CardState:
    id: int
    suit: Suit
    rank: Rank
    is_face_up: bool = False
    is_matched: bool = False
    is_error: bool = False

    @property
    def face(self) -> tuple[Suit, Rank]:
        """The (suit, rank) identity shared by both cards of a pair."""
        return (self.suit, self.rank)

    def matches(self, other: "CardState") -> bool:
        return self.face == other.face

    def __str__(self) -> str:
        base = f"{self.rank.symbol}{self.suit.symbol}"
        if self.is_matched:
            return f"[{base}]"
        if self.is_error:
            return f"!{base}!"
        if self.is_face_up:
            return base
        return "##"


def all_faces() -> list[tuple[Suit, Rank]]:
    """Every (suit, rank) combination in a standard 52-card deck."""
    return [(suit, rank) for suit in Suit for rank in Rank]


def deal_cards(pair_count: int, rng: random.Random) -> tuple[CardState, ...]:
    """
    Deal a shuffled board of ``pair_count`` pairs using ``rng``.

    Draws distinct faces, duplicates each into two face-down cards, shuffles
    the whole board and assigns ids by position.
    """
    if pair_count <= 0:
        raise ValueError(f"pair_count must be positive, got {pair_count}")
    if pair_count > MAX_PAIR_COUNT:
        raise ValueError(f"pair_count must be at most {MAX_PAIR_COUNT}, got {pair_count}")

    faces = all_faces()
    rng.shuffle(faces)

    cards = []
    for suit, rank in faces[:pair_count]:
        cards.append(CardState(id=0, suit=suit, rank=rank))
        cards.append(CardState(id=0, suit=suit, rank=rank))
    rng.shuffle(cards)

    return reindex(cards)


def build_deck(pair_count: int, seed: Optional[Union[int, str]] = None) -> tuple[CardState, ...]:
    """Build a deck; identical (pair_count, seed) always yields the same cards."""
    return deal_cards(pair_count, random.Random(seed))


def reindex(cards) -> tuple[CardState, ...]:
    """Assign ids 0..n-1 in list order."""
    return tuple(replace(card, id=index) for index, card in enumerate(cards))


def face_up_unmatched(cards) -> list[CardState]:
    """Cards currently revealed for the turn being played."""
    return [c for c in cards if c.is_face_up and not c.is_matched]


def unmatched_pair_count(cards) -> int:
    return sum(1 for c in cards if not c.is_matched) // 2


def is_well_formed(cards, pair_count: int) -> bool:
    """Check the board holds exactly ``pair_count`` pairs with ids 0..2n-1."""
    if len(cards) != 2 * pair_count:
        return False
    if sorted(c.id for c in cards) != list(range(2 * pair_count)):
        return False
    counts = Counter(c.face for c in cards)
    return len(counts) == pair_count and all(n == 2 for n in counts.values())
