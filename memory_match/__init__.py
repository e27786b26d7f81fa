"""
Memory Match Game Engine
"""

from .engine.deck import CardState, Rank, Suit, build_deck
from .engine.game import GameDomainEvent, MemoryGameState, build_initial_state, flip_card
from .engine.modes import DifficultyType, GameMode
from .engine.scoring import ScoreBreakdown, ScoringConfig
from .session import GameSession

__version__ = "0.1.0"
