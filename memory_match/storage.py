"""
JSON file stores for the saved game and per-difficulty stats.
Failures are logged and reported through StoreResult; nothing here raises on I/O errors.
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .engine.game import MemoryGameState
from .engine.modes import GameMode
from .engine.serialization import SavedGame

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 10


@dataclass(frozen=True)
class StoreResult:
    """Outcome of a store operation."""
    ok: bool
    value: Any = None
    error: Optional[str] = None


def _write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(data, f, indent=2)


def _read_json(path: Path):
    with open(path) as f:
        return json.load(f)


class GameStateStore:
    """Keeps the single in-progress game on disk."""

    def __init__(self, path):
        self.path = Path(path)

    def save(self, state: MemoryGameState, elapsed_time_seconds: int) -> StoreResult:
        try:
            _write_json(self.path, SavedGame(state, elapsed_time_seconds).to_dict())
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving game state to %s: %s", self.path, e)
            return StoreResult(False, error=str(e))
        return StoreResult(True)

    def load(self) -> Optional[SavedGame]:
        """The saved game, or None if there is none or it cannot be read."""
        if not self.path.exists():
            return None
        try:
            return SavedGame.from_dict(_read_json(self.path))
        except (OSError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error("Error loading game state from %s: %s", self.path, e)
            return None

    def clear(self) -> StoreResult:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Error clearing game state at %s: %s", self.path, e)
            return StoreResult(False, error=str(e))
        return StoreResult(True)

    def on_save(self, state: MemoryGameState, seconds: int) -> None:
        """Session callback: persist games in progress, drop finished ones."""
        if state.is_game_over:
            self.clear()
        else:
            self.save(state, seconds)


@dataclass(frozen=True)
class GameStats:
    pair_count: int
    best_score: int = 0
    best_time_seconds: int = 0


@dataclass(frozen=True)
class LeaderboardEntry:
    pair_count: int
    score: int
    time_seconds: int
    moves: int
    game_mode: str = GameMode.TIME_ATTACK.name
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))


def _entry_from_dict(data: dict) -> LeaderboardEntry:
    if not isinstance(data, dict):
        raise ValueError(f"Unexpected leaderboard entry: {data!r}")
    # Entries recorded before per-mode boards have no game_mode
    known = {f.name for f in fields(LeaderboardEntry)}
    return LeaderboardEntry(**{k: v for k, v in data.items() if k in known})


class GameStatsStore:
    """
    Best score and best time per pair count, plus a leaderboard per
    pair count and mode holding the top ``LEADERBOARD_SIZE`` entries.

    File layout::

        {"stats": {"8": {...}}, "leaderboard": [{...}, ...]}
    """

    def __init__(self, path, leaderboard_size: int = LEADERBOARD_SIZE):
        self.path = Path(path)
        self.leaderboard_size = leaderboard_size

    def _load(self) -> dict:
        if not self.path.exists():
            return {"stats": {}, "leaderboard": []}
        data = _read_json(self.path)
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected stats file layout in {self.path}")
        data.setdefault("stats", {})
        data.setdefault("leaderboard", [])
        return data

    def get_stats(self, pair_count: int) -> Optional[GameStats]:
        try:
            raw = self._load()["stats"].get(str(pair_count))
            return GameStats(**raw) if raw else None
        except (OSError, KeyError, TypeError, ValueError) as e:
            logger.error("Error fetching stats for %d pairs: %s", pair_count, e)
            return None

    def get_leaderboard(self, pair_count: int, mode: GameMode = GameMode.TIME_ATTACK) -> list[LeaderboardEntry]:
        try:
            entries = [_entry_from_dict(e) for e in self._load()["leaderboard"]]
        except (OSError, KeyError, TypeError, ValueError) as e:
            logger.error("Error fetching leaderboard for %d pairs, %s: %s", pair_count, mode.name, e)
            return []
        ranked = [e for e in entries if e.pair_count == pair_count and e.game_mode == mode.name]
        ranked.sort(key=lambda e: (-e.score, e.time_seconds))
        return ranked[:self.leaderboard_size]

    def record_result(self, pair_count: int, score: int, time_seconds: int, moves: int,
                      mode: GameMode) -> StoreResult:
        """Fold a finished game into the best stats and the leaderboard."""
        try:
            data = self._load()
            current = data["stats"].get(str(pair_count))
            best_score = score
            best_time = time_seconds
            if current:
                best_score = max(score, current["best_score"])
                if current["best_time_seconds"] and current["best_time_seconds"] <= time_seconds:
                    best_time = current["best_time_seconds"]
            stats = GameStats(pair_count, best_score, best_time)
            data["stats"][str(pair_count)] = asdict(stats)

            entry = LeaderboardEntry(pair_count, score, time_seconds, moves, game_mode=mode.name)
            entries = [asdict(_entry_from_dict(e)) for e in data["leaderboard"]]
            data["leaderboard"] = self._trim(entries + [asdict(entry)])

            _write_json(self.path, data)
        except (OSError, KeyError, TypeError, ValueError) as e:
            logger.error("Error recording result for %d pairs: %s", pair_count, e)
            return StoreResult(False, error=str(e))

        logger.info("Recorded %s result for %d pairs: %d points", mode.name, pair_count, score)
        return StoreResult(True, value=stats)

    def record_state(self, state: MemoryGameState, time_seconds: int) -> StoreResult:
        return self.record_result(state.pair_count, state.score, time_seconds, state.moves, state.mode)

    def _trim(self, entries: list) -> list:
        # Keep only the top entries of each (pair_count, mode) board
        kept = []
        boards: dict = {}
        for e in sorted(entries, key=lambda e: (-e["score"], e["time_seconds"])):
            key = (e["pair_count"], e["game_mode"])
            if boards.get(key, 0) < self.leaderboard_size:
                boards[key] = boards.get(key, 0) + 1
                kept.append(e)
        return kept
