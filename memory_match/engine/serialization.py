"""
JSON encoding for game states.
Enums are written by name; fields missing from older records take their defaults.
"""

import json
from dataclasses import asdict, dataclass, fields

from .deck import CardState, Rank, Suit
from .game import MemoryGameState
from .high_roller import CircuitStage
from .modes import DifficultyType, GameMode
from .mutators import DailyChallengeMutator
from .scoring import ScoreBreakdown, ScoringConfig

TRANSIENT_FIELDS = {"match_comment"}


def _breakdown_from_dict(data) -> ScoreBreakdown:
    if not isinstance(data, dict):
        raise ValueError(f"Expected a score breakdown dict, got {type(data).__name__}")
    known = {f.name for f in fields(ScoreBreakdown)}
    return ScoreBreakdown(**{k: v for k, v in data.items() if k in known})


def card_to_dict(card: CardState) -> dict:
    return {
        "id": card.id,
        "suit": card.suit.name,
        "rank": card.rank.name,
        "is_face_up": card.is_face_up,
        "is_matched": card.is_matched,
        "is_error": card.is_error,
    }


def card_from_dict(data: dict) -> CardState:
    return CardState(
        id=data["id"],
        suit=Suit[data["suit"]],
        rank=Rank[data["rank"]],
        is_face_up=data.get("is_face_up", False),
        is_matched=data.get("is_matched", False),
        is_error=data.get("is_error", False),
    )


_ENCODERS = {
    "cards": lambda cards: [card_to_dict(c) for c in cards],
    "mode": lambda mode: mode.name,
    "difficulty": lambda difficulty: difficulty.name,
    "circuit_stage": lambda stage: stage.name,
    "active_mutators": lambda mutators: sorted(m.name for m in mutators),
    "config": asdict,
    "score_breakdown": asdict,
    "last_matched_ids": list,
}

_DECODERS = {
    "cards": lambda items: tuple(card_from_dict(c) for c in items),
    "mode": lambda name: GameMode[name],
    "difficulty": lambda name: DifficultyType[name],
    "circuit_stage": lambda name: CircuitStage[name],
    "active_mutators": lambda names: frozenset(DailyChallengeMutator[n] for n in names),
    "config": ScoringConfig.from_dict,
    "score_breakdown": _breakdown_from_dict,
    "last_matched_ids": tuple,
}


def state_to_dict(state: MemoryGameState) -> dict:
    """Encode a state as a JSON-ready dict."""
    data = {}
    for f in fields(state):
        if f.name in TRANSIENT_FIELDS:
            continue
        value = getattr(state, f.name)
        encode = _ENCODERS.get(f.name)
        data[f.name] = encode(value) if encode else value
    return data


def state_from_dict(data: dict) -> MemoryGameState:
    """Decode a state written by ``state_to_dict``."""
    kwargs = {}
    for f in fields(MemoryGameState):
        if f.name in TRANSIENT_FIELDS or f.name not in data:
            continue
        decode = _DECODERS.get(f.name)
        kwargs[f.name] = decode(data[f.name]) if decode else data[f.name]
    return MemoryGameState(**kwargs)


@dataclass(frozen=True)
class SavedGame:
    """A game in progress plus the clock reading when it was saved."""
    game_state: MemoryGameState
    elapsed_time_seconds: int

    def to_dict(self) -> dict:
        return {
            "game_state": state_to_dict(self.game_state),
            "elapsed_time_seconds": self.elapsed_time_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SavedGame":
        return cls(
            game_state=state_from_dict(data["game_state"]),
            elapsed_time_seconds=data.get("elapsed_time_seconds", 0),
        )


def dumps(state: MemoryGameState, **kwargs) -> str:
    return json.dumps(state_to_dict(state), **kwargs)


def loads(text: str) -> MemoryGameState:
    return state_from_dict(json.loads(text))
