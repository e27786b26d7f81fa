"""
Preset configurations for memory game simulation.
Allows easy setup of different modes, difficulties and playstyles.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .engine.high_roller import CircuitStage
from .engine.modes import DifficultyType, GameMode


class StrategyType(Enum):
    RANDOM = "random"
    PERFECT = "perfect"
    FORGETFUL = "forgetful"
    GAMBLER = "gambler"


@dataclass(frozen=True)
class DifficultyLevel:
    name: str
    pairs: int


DIFFICULTY_LEVELS = [
    DifficultyLevel("Toddler", 6),
    DifficultyLevel("Casual", 8),
    DifficultyLevel("Master", 10),
    DifficultyLevel("Shark", 12),
    DifficultyLevel("Grandmaster", 14),
    DifficultyLevel("Elephant", 16),
]


@dataclass
class Preset:
    """A complete preset configuration for a game."""
    name: str
    description: str
    mode: GameMode = GameMode.STANDARD
    difficulty: DifficultyType = DifficultyType.CASUAL
    pair_count: int = 8
    strategy: StrategyType = StrategyType.FORGETFUL
    config_overrides: dict = field(default_factory=dict)  # ScoringConfig field -> value
    circuit_stage: Optional[CircuitStage] = None
    wager: int = 0


# Built-in presets
PRESETS = {
    "standard": Preset(
        name="Standard",
        description="Casual 8-pair game with no modifiers",
    ),

    "tourist": Preset(
        name="Tourist",
        description="Small board, low currency payout",
        difficulty=DifficultyType.TOURIST,
        pair_count=6,
    ),

    "shark": Preset(
        name="Shark",
        description="Large board at the top currency multiplier",
        difficulty=DifficultyType.SHARK,
        pair_count=12,
        strategy=StrategyType.PERFECT,
    ),

    "time_attack": Preset(
        name="Time Attack",
        description="Race the countdown; matches add time, misses cost it",
        mode=GameMode.TIME_ATTACK,
        pair_count=8,
    ),

    "daily": Preset(
        name="Daily Challenge",
        description="Seeded board with Blackout and/or Mirage",
        mode=GameMode.DAILY_CHALLENGE,
        pair_count=8,
    ),

    "high_roller": Preset(
        name="High Roller",
        description="Qualifier stage; points sit in a pot until banked",
        mode=GameMode.HIGH_ROLLER,
        difficulty=DifficultyType.MASTER,
        pair_count=CircuitStage.QUALIFIER.pair_count,
        circuit_stage=CircuitStage.QUALIFIER,
        wager=100,
    ),

    "gambler": Preset(
        name="Gambler",
        description="Perfect memory that takes every Double Down",
        pair_count=12,
        strategy=StrategyType.GAMBLER,
    ),

    "hot_streak": Preset(
        name="Hot Streak",
        description="Heat mode after two matches and doubled combo bonus",
        strategy=StrategyType.GAMBLER,
        config_overrides={"heat_mode_threshold": 2, "combo_bonus_points": 100},
    ),

    "goldfish": Preset(
        name="Goldfish",
        description="No memory at all; the baseline",
        strategy=StrategyType.RANDOM,
    ),
}


def get_preset(name: str) -> Optional[Preset]:
    """Get a preset by name."""
    return PRESETS.get(name.lower().replace(" ", "_"))


def list_presets() -> list[str]:
    """List all available preset names."""
    return list(PRESETS.keys())


def get_preset_info(name: str) -> Optional[dict]:
    """Get info about a preset."""
    preset = get_preset(name)
    if preset:
        return {
            "name": preset.name,
            "description": preset.description,
            "mode": preset.mode.name,
            "difficulty": preset.difficulty.name,
            "pairs": preset.pair_count,
            "strategy": preset.strategy.value,
        }
    return None
