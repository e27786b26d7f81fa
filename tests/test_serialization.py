import json

from memory_match.engine.game import build_initial_state, flip_card
from memory_match.engine.high_roller import CircuitStage
from memory_match.engine.modes import DifficultyType, GameMode
from memory_match.engine.mutators import DailyChallengeMutator
from memory_match.engine.scoring import ScoringConfig
from memory_match.engine.serialization import (
    SavedGame, card_from_dict, card_to_dict, dumps, loads, state_from_dict, state_to_dict,
)

from helpers import make_state, match_pair, miss


class TestStateRoundTrip:
    def test_game_in_progress(self):
        state, _ = match_pair(make_state(6, combo_multiplier=2), 0)
        state, _ = miss(state, 1, 2)
        assert state_from_dict(state_to_dict(state)) == state

    def test_daily_challenge(self):
        state = build_initial_state(8, mode=GameMode.DAILY_CHALLENGE, difficulty=DifficultyType.SHARK, seed=99)
        state, _ = flip_card(state, 3)
        restored = loads(dumps(state))
        assert restored == state
        assert isinstance(restored.active_mutators, frozenset)

    def test_high_roller(self):
        state = build_initial_state(10, mode=GameMode.HIGH_ROLLER, seed=5,
                                    circuit_stage=CircuitStage.SEMI_FINAL, banked_score=400, wager=25)
        assert state_from_dict(state_to_dict(state)) == state

    def test_custom_config(self):
        state = make_state(config=ScoringConfig(base_match_points=20, heat_mode_threshold=2))
        assert state_from_dict(state_to_dict(state)).config == state.config


class TestEncoding:
    def test_enums_by_name(self):
        state = make_state(mode=GameMode.DAILY_CHALLENGE,
                           active_mutators={DailyChallengeMutator.MIRAGE, DailyChallengeMutator.BLACKOUT})
        data = state_to_dict(state)
        assert data["mode"] == "DAILY_CHALLENGE"
        assert data["difficulty"] == "CASUAL"
        assert data["circuit_stage"] == "QUALIFIER"
        assert data["active_mutators"] == ["BLACKOUT", "MIRAGE"]
        json.dumps(data)

    def test_comment_not_persisted(self):
        state, _ = match_pair(make_state(), 0)
        assert "match_comment" not in state_to_dict(state)
        assert state_from_dict(state_to_dict(state)).match_comment is None

    def test_card(self):
        state, _ = flip_card(make_state(), 1)
        card = state.card(1)
        data = card_to_dict(card)
        assert data["suit"] == card.suit.name
        assert card_from_dict(data) == card


class TestMissingKeys:
    def test_missing_fields_take_defaults(self):
        data = state_to_dict(make_state(current_wager=10, total_double_down_bonus=40))
        del data["current_wager"]
        del data["total_double_down_bonus"]
        del data["score_breakdown"]
        state = state_from_dict(data)
        assert state.current_wager == 0
        assert state.total_double_down_bonus == 0
        assert state.score_breakdown.total_score == 0

    def test_card_flags_default_to_false(self):
        card = card_from_dict({"id": 3, "suit": "CLUBS", "rank": "QUEEN"})
        assert not card.is_face_up and not card.is_matched and not card.is_error

    def test_unknown_breakdown_keys_ignored(self):
        data = state_to_dict(make_state())
        data["score_breakdown"]["legacy_bonus"] = 12
        assert state_from_dict(data).score_breakdown.total_score == 0


class TestSavedGame:
    def test_round_trip(self):
        saved = SavedGame(make_state(), elapsed_time_seconds=42)
        assert SavedGame.from_dict(json.loads(json.dumps(saved.to_dict()))) == saved

    def test_missing_elapsed_time(self):
        data = SavedGame(make_state(), 42).to_dict()
        del data["elapsed_time_seconds"]
        assert SavedGame.from_dict(data).elapsed_time_seconds == 0
