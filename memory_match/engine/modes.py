"""
Game modes and difficulty tiers.
"""

from enum import Enum, auto


class GameMode(Enum):
    STANDARD = auto()
    TIME_ATTACK = auto()
    DAILY_CHALLENGE = auto()
    HIGH_ROLLER = auto()


class DifficultyType(Enum):
    TOURIST = 0.25
    CASUAL = 1.0
    MASTER = 2.5
    SHARK = 5.0

    @property
    def currency_multiplier(self) -> float:
        """Scale applied to score/100 when converting a win into currency."""
        return self.value
