"""
Memory game rules engine components.
"""

from .deck import Suit, Rank, CardState, build_deck, MAX_PAIR_COUNT
from .modes import GameMode, DifficultyType
from .scoring import ScoringConfig, ScoreBreakdown, MatchScoreResult, calculate_match_score, load_scoring_config
from .high_roller import CircuitStage, next_circuit_stage
from .mutators import DailyChallengeMutator, shuffle_remaining_cards
from .game import (
    GameDomainEvent, MemoryGameState, build_initial_state, flip_card, reset_error_cards,
    activate_double_down, apply_final_bonuses,
)
from .serialization import SavedGame, state_to_dict, state_from_dict
