"""
Match commentary.
Picks a flavor line after each match; random picks use the supplied generator.
"""

import random
from dataclasses import dataclass

from .scoring import ScoringConfig

POT_ODDS_DIVISOR = 3
MOVES_PER_MATCH_THRESHOLD = 2

COMMENT_TEXT = {
    "perfect": "Perfect!",
    "one_more": "One more to go!",
    "river_magic": "River magic!",
    "ship_it": "Ship it!",
    "stacking_chips": "Stacking chips!",
    "all_in": "All in and it paid!",
    "first_match": "First match!",
    "pocket_aces": "Pocket aces!",
    "the_nuts": "The nuts! {0} in a row!",
    "high_roller": "High roller! {0} in a row!",
    "royal_flush": "Royal flush! {0} straight!",
    "incredible": "Incredible! {0} streak!",
    "heater_active": "You're on a heater!",
    "pot_odds": "The pot odds are in your favor.",
    "halfway": "Halfway there!",
    "photographic": "Photographic memory!",
    "reading_tells": "Reading tells!",
    "eagle_eyes": "Eagle eyes!",
    "great_find": "Great find!",
    "you_got_it": "You got it!",
    "boom": "Boom!",
    "sharp": "Sharp!",
    "on_a_roll": "On a roll!",
    "full_house": "Full house!",
    "bad_beat": "Dodged a bad beat!",
    "flopped_a_set": "Flopped a set!",
    "smooth_call": "Smooth call.",
    "poker_face": "Poker face.",
    "grinding": "Grinding it out.",
    "check_mate": "Check, mate.",
    "no_bluff": "No bluff!",
}

GENERIC_COMMENTS = [
    "great_find", "you_got_it", "boom", "sharp", "on_a_roll", "full_house",
    "bad_beat", "flopped_a_set", "smooth_call", "poker_face", "grinding",
    "check_mate", "no_bluff",
]


@dataclass(frozen=True)
class MatchComment:
    key: str
    args: tuple = ()

    @property
    def text(self) -> str:
        return COMMENT_TEXT.get(self.key, self.key).format(*self.args)

    def __str__(self) -> str:
        return self.text


def generate_match_comment(moves: int, matches_found: int, total_pairs: int, combo: int,
                           config: ScoringConfig, rng: random.Random,
                           is_double_down_active: bool = False) -> MatchComment:
    """Choose a comment for a match; ``combo`` is the streak before the match."""
    if matches_found == total_pairs:
        return MatchComment("perfect")

    if matches_found == total_pairs - 1:
        return MatchComment(rng.choice(["one_more", "river_magic"]))

    if is_double_down_active:
        return MatchComment(rng.choice(["ship_it", "stacking_chips", "all_in"]))

    if matches_found == 1:
        return MatchComment(rng.choice(["first_match", "pocket_aces"]))

    if combo >= config.the_nuts_threshold:
        return MatchComment("the_nuts", (combo,))

    # Only real streaks count as high rolling
    if combo >= config.high_roller_threshold and combo > 1:
        return MatchComment(rng.choice(["high_roller", "royal_flush", "incredible"]), (combo,))

    if combo == config.heat_mode_threshold - 1:
        return MatchComment("heater_active")

    if matches_found == total_pairs // POT_ODDS_DIVISOR:
        return MatchComment("pot_odds")

    if matches_found == total_pairs // 2:
        return MatchComment("halfway")

    if moves <= matches_found * MOVES_PER_MATCH_THRESHOLD:
        return MatchComment(rng.choice(["photographic", "reading_tells", "eagle_eyes"]))

    return MatchComment(rng.choice(GENERIC_COMMENTS))
