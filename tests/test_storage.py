import json
import logging

import pytest

from memory_match.engine.modes import GameMode
from memory_match.storage import GameStateStore, GameStats, GameStatsStore

from helpers import make_state, match_pair


class TestGameStateStore:
    def test_save_and_load(self, tmp_path):
        store = GameStateStore(tmp_path / "saves" / "game.json")
        state, _ = match_pair(make_state(6), 0)

        result = store.save(state, 17)
        assert result.ok

        saved = store.load()
        assert saved.game_state == state
        assert saved.elapsed_time_seconds == 17

    def test_load_without_file(self, tmp_path):
        assert GameStateStore(tmp_path / "game.json").load() is None

    def test_corrupt_file_is_logged_and_ignored(self, tmp_path, caplog):
        path = tmp_path / "game.json"
        path.write_text("{not json")
        with caplog.at_level(logging.ERROR):
            assert GameStateStore(path).load() is None
        assert "Error loading game state" in caplog.text

    @pytest.mark.parametrize("field_name", ["config", "score_breakdown"])
    def test_null_nested_record_is_ignored(self, tmp_path, caplog, field_name):
        path = tmp_path / "game.json"
        GameStateStore(path).save(make_state(), 4)
        data = json.loads(path.read_text())
        data["game_state"][field_name] = None
        path.write_text(json.dumps(data))

        with caplog.at_level(logging.ERROR):
            assert GameStateStore(path).load() is None
        assert "Error loading game state" in caplog.text

    def test_save_failure_is_reported(self, tmp_path, caplog):
        store = GameStateStore(tmp_path)  # a directory, not a file
        with caplog.at_level(logging.ERROR):
            result = store.save(make_state(), 0)
        assert not result.ok
        assert result.error
        assert "Error saving game state" in caplog.text

    def test_clear(self, tmp_path):
        store = GameStateStore(tmp_path / "game.json")
        store.save(make_state(), 3)
        assert store.clear().ok
        assert store.load() is None
        assert store.clear().ok

    def test_session_callback(self, tmp_path):
        store = GameStateStore(tmp_path / "game.json")
        store.on_save(make_state(), 5)
        assert store.load().elapsed_time_seconds == 5

        store.on_save(make_state(is_game_over=True), 6)
        assert store.load() is None


class TestGameStatsStore:
    def test_best_score_and_time(self, tmp_path):
        store = GameStatsStore(tmp_path / "stats.json")
        assert store.get_stats(8) is None

        store.record_result(8, 1200, 60, 12, GameMode.STANDARD)
        store.record_result(8, 900, 45, 10, GameMode.STANDARD)
        result = store.record_result(8, 1000, 80, 14, GameMode.STANDARD)

        assert result.ok
        assert store.get_stats(8) == GameStats(8, best_score=1200, best_time_seconds=45)
        assert result.value == store.get_stats(8)
        assert store.get_stats(10) is None

    def test_leaderboard_order_and_cap(self, tmp_path):
        store = GameStatsStore(tmp_path / "stats.json", leaderboard_size=3)
        for score, seconds in [(500, 30), (900, 50), (700, 20), (900, 40), (100, 10)]:
            store.record_result(6, score, seconds, 8, GameMode.TIME_ATTACK)

        board = store.get_leaderboard(6, GameMode.TIME_ATTACK)
        assert [(e.score, e.time_seconds) for e in board] == [(900, 40), (900, 50), (700, 20)]

    def test_leaderboards_are_per_mode_and_size(self, tmp_path):
        store = GameStatsStore(tmp_path / "stats.json")
        store.record_result(6, 500, 30, 8, GameMode.TIME_ATTACK)
        store.record_result(6, 800, 30, 8, GameMode.STANDARD)
        store.record_result(8, 300, 30, 8, GameMode.TIME_ATTACK)

        assert [e.score for e in store.get_leaderboard(6, GameMode.TIME_ATTACK)] == [500]
        assert [e.score for e in store.get_leaderboard(6, GameMode.STANDARD)] == [800]
        assert store.get_leaderboard(10, GameMode.TIME_ATTACK) == []

    def test_record_state(self, tmp_path):
        store = GameStatsStore(tmp_path / "stats.json")
        state = make_state(4, score=2500, moves=6, mode=GameMode.DAILY_CHALLENGE)
        assert store.record_state(state, 40).ok
        entry = store.get_leaderboard(4, GameMode.DAILY_CHALLENGE)[0]
        assert entry.moves == 6
        assert entry.time_seconds == 40

    def test_corrupt_file(self, tmp_path, caplog):
        path = tmp_path / "stats.json"
        path.write_text("[[[")
        store = GameStatsStore(path)
        with caplog.at_level(logging.ERROR):
            assert store.get_stats(8) is None
            assert store.get_leaderboard(8) == []
            assert not store.record_result(8, 100, 10, 4, GameMode.STANDARD).ok
        assert "Error recording result" in caplog.text

    def test_entries_without_game_mode(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text(json.dumps({
            "stats": {"6": {"pair_count": 6, "best_score": 700, "best_time_seconds": 25}},
            "leaderboard": [{"pair_count": 6, "score": 700, "time_seconds": 25, "moves": 9}],
        }))
        store = GameStatsStore(path)

        board = store.get_leaderboard(6)
        assert [(e.score, e.game_mode) for e in board] == [(700, "TIME_ATTACK")]

        assert store.record_result(6, 800, 30, 8, GameMode.TIME_ATTACK).ok
        assert [e.score for e in store.get_leaderboard(6)] == [800, 700]

    def test_malformed_stats_record(self, tmp_path, caplog):
        path = tmp_path / "stats.json"
        path.write_text(json.dumps({"stats": {"8": {"best_score": 100}}, "leaderboard": [[1, 2]]}))
        store = GameStatsStore(path)
        with caplog.at_level(logging.ERROR):
            assert store.get_stats(8) is None
            assert store.get_leaderboard(8) == []
        assert "Error fetching stats" in caplog.text
        assert "Error fetching leaderboard" in caplog.text
