import random

import pytest

from memory_match.engine.comments import GENERIC_COMMENTS, MatchComment, generate_match_comment
from memory_match.engine.scoring import ScoringConfig


def comment(moves=10, matches_found=5, total_pairs=12, combo=0, config=None, seed=0, **kwargs):
    return generate_match_comment(moves, matches_found, total_pairs, combo,
                                  config or ScoringConfig(), random.Random(seed), **kwargs)


class TestGenerateMatchComment:
    def test_perfect(self):
        assert comment(matches_found=12).key == "perfect"

    def test_one_more(self):
        assert comment(matches_found=11).key in {"one_more", "river_magic"}

    def test_double_down(self):
        assert comment(is_double_down_active=True).key in {"ship_it", "stacking_chips", "all_in"}

    def test_first_match(self):
        assert comment(matches_found=1, moves=1).key in {"first_match", "pocket_aces"}

    def test_the_nuts(self):
        c = comment(matches_found=7, combo=6)
        assert c.key == "the_nuts"
        assert c.text == "The nuts! 6 in a row!"

    def test_high_roller_streak(self):
        c = comment(matches_found=4, combo=2)
        assert c.key in {"high_roller", "royal_flush", "incredible"}
        assert "2" in str(c)

    def test_heater(self):
        config = ScoringConfig(high_roller_threshold=5)
        assert comment(matches_found=7, combo=2, config=config).key == "heater_active"

    def test_pot_odds(self):
        assert comment(matches_found=4).key == "pot_odds"

    def test_halfway(self):
        assert comment(matches_found=6).key == "halfway"

    def test_photographic(self):
        assert comment(moves=10, matches_found=5).key in {"photographic", "reading_tells", "eagle_eyes"}

    def test_generic(self):
        assert comment(moves=11, matches_found=5).key in GENERIC_COMMENTS

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_same_generator_same_comment(self, seed):
        assert comment(moves=20, seed=seed) == comment(moves=20, seed=seed)


def test_unknown_key_renders_itself():
    assert MatchComment("mystery").text == "mystery"
