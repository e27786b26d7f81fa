"""Board builders shared by the tests."""

from memory_match.engine.deck import CardState, all_faces
from memory_match.engine.game import MemoryGameState, flip_card


def paired_board(pair_count: int) -> tuple:
    """An unshuffled board: cards 2k and 2k+1 are pair k."""
    cards = []
    for index, (suit, rank) in enumerate(all_faces()[:pair_count]):
        cards.append(CardState(id=2 * index, suit=suit, rank=rank))
        cards.append(CardState(id=2 * index + 1, suit=suit, rank=rank))
    return tuple(cards)


def make_state(pair_count: int = 4, **kwargs) -> MemoryGameState:
    kwargs.setdefault("seed", 1)
    return MemoryGameState(cards=paired_board(pair_count), pair_count=pair_count, **kwargs)


def match_pair(state, pair_index: int):
    """Flip both cards of pair ``pair_index``; returns (state, event) of the second flip."""
    state, _ = flip_card(state, 2 * pair_index)
    return flip_card(state, 2 * pair_index + 1)


def miss(state, first_pair: int = 0, second_pair: int = 1):
    """Flip one card from each of two different pairs."""
    state, _ = flip_card(state, 2 * first_pair)
    return flip_card(state, 2 * second_pair)
