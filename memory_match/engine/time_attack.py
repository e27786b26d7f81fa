"""
Time Attack clock rules.
"""

INITIAL_TIMES = {6: 25, 8: 35, 10: 45, 12: 55}
TIME_PER_PAIR_FALLBACK = 4
BASE_TIME_GAIN = 3
COMBO_TIME_BONUS_MULTIPLIER = 2
LOW_TIME_WARNING_THRESHOLD = 5


def calculate_initial_time(pair_count: int) -> int:
    """Starting countdown in seconds for a board of ``pair_count`` pairs."""
    return INITIAL_TIMES.get(pair_count, pair_count * TIME_PER_PAIR_FALLBACK)


def calculate_time_gain(combo_multiplier: int) -> int:
    """Seconds added after a match; ``combo_multiplier`` is the streak including it."""
    return BASE_TIME_GAIN + max(0, combo_multiplier - 1) * COMBO_TIME_BONUS_MULTIPLIER
