from memory_match.engine.game import GameDomainEvent
from memory_match.engine.modes import GameMode
from memory_match.engine.mutators import DailyChallengeMutator
from memory_match.engine.serialization import SavedGame
from memory_match.session import MISMATCH_DELAY_MS, PEEK_DURATION_MS, GameSession

from helpers import make_state


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, state, seconds):
        self.calls.append((state, seconds))


def play_pair(session, pair_index):
    session.flip(2 * pair_index)
    return session.flip(2 * pair_index + 1)


def play_miss(session, first_pair=0, second_pair=1):
    session.flip(2 * first_pair)
    return session.flip(2 * second_pair)


class TestClock:
    def test_standard_counts_up(self):
        session = GameSession(make_state(8))
        assert session.seconds == 0
        session.tick()
        session.tick(4)
        assert session.seconds == 5

    def test_time_attack_counts_down(self):
        session = GameSession(make_state(8, mode=GameMode.TIME_ATTACK))
        assert session.seconds == 35
        session.tick(10)
        assert session.seconds == 25

    def test_time_attack_timeout(self):
        recorder = Recorder()
        session = GameSession(make_state(8, mode=GameMode.TIME_ATTACK, score=400), seconds=2,
                              on_save=recorder)
        assert session.tick() is None
        assert session.is_low_on_time
        assert session.tick() == GameDomainEvent.GAME_OVER
        assert session.state.is_game_over
        assert not session.state.is_game_won
        assert session.state.score == 0
        assert recorder.calls[-1] == (session.state, 0)

    def test_tick_after_game_over(self):
        session = GameSession(make_state(is_game_over=True), seconds=7)
        assert session.tick() is None
        assert session.seconds == 7


class TestFlip:
    def test_match_adds_time_in_time_attack(self):
        session = GameSession(make_state(8, mode=GameMode.TIME_ATTACK))
        assert play_pair(session, 0) == GameDomainEvent.MATCH_SUCCESS
        assert session.seconds == 38
        assert play_pair(session, 1) == GameDomainEvent.MATCH_SUCCESS
        assert session.seconds == 43

    def test_mismatch_waits_for_processing(self):
        session = GameSession(make_state(4))
        assert play_miss(session) == GameDomainEvent.MATCH_FAILURE
        assert session.pending_mismatch
        assert session.flip(4) is None

        session.process_mismatch()
        assert not session.pending_mismatch
        assert not any(c.is_face_up for c in session.state.cards)
        assert session.flip(4) == GameDomainEvent.CARD_FLIPPED

    def test_time_attack_mismatch_penalty(self):
        session = GameSession(make_state(8, mode=GameMode.TIME_ATTACK))
        play_miss(session)
        session.process_mismatch()
        assert session.seconds == 33

    def test_mismatch_penalty_can_time_out(self):
        session = GameSession(make_state(8, mode=GameMode.TIME_ATTACK), seconds=2)
        play_miss(session)
        assert session.process_mismatch() == GameDomainEvent.GAME_OVER
        assert session.state.is_game_over
        assert session.state.score == 0

    def test_process_mismatch_without_pending_is_noop(self):
        session = GameSession(make_state(4))
        state = session.state
        assert session.process_mismatch() is None
        assert session.state is state

    def test_win_applies_final_bonuses(self):
        session = GameSession(make_state(1))
        assert play_pair(session, 0) == GameDomainEvent.GAME_WON
        breakdown = session.state.score_breakdown
        assert breakdown.time_bonus == 50
        assert breakdown.move_bonus == 10000
        assert breakdown.total_score == 10150
        assert session.state.score == 10150

    def test_ignored_flip_returns_none(self):
        session = GameSession(make_state(4))
        session.flip(0)
        assert session.flip(0) is None


class TestMirageAndBlackout:
    def test_mirage_reshuffles_after_dry_spell(self):
        state = make_state(6, mode=GameMode.DAILY_CHALLENGE,
                           active_mutators={DailyChallengeMutator.MIRAGE}, moves_since_last_match=4)
        session = GameSession(state)
        play_miss(session)
        assert session.state.moves_since_last_match == 5
        session.process_mismatch()
        assert session.state.moves_since_last_match == 0
        assert not any(c.is_face_up or c.is_error for c in session.state.cards)

    def test_no_reshuffle_without_mirage(self):
        state = make_state(6, moves_since_last_match=4)
        session = GameSession(state)
        play_miss(session)
        session.process_mismatch()
        assert session.state.moves_since_last_match == 5

    def test_blackout_durations(self):
        session = GameSession(make_state(active_mutators={DailyChallengeMutator.BLACKOUT}))
        assert session.peek_duration_ms == PEEK_DURATION_MS // 2
        assert session.mismatch_delay_ms == MISMATCH_DELAY_MS // 2

    def test_normal_durations(self):
        session = GameSession(make_state())
        assert session.mismatch_delay_ms == MISMATCH_DELAY_MS

    def test_peek_view_is_display_only(self):
        session = GameSession(make_state())
        view = session.peek_view()
        assert all(c.is_face_up for c in view.cards)
        assert not any(c.is_face_up for c in session.state.cards)


class TestDoubleDownAndSaving:
    def test_double_down(self):
        session = GameSession(make_state(8, combo_multiplier=3))
        assert session.double_down()
        assert session.state.is_double_down_active
        assert not session.double_down()

    def test_double_down_refused(self):
        session = GameSession(make_state(8))
        assert not session.double_down()

    def test_on_save_called_after_each_change(self):
        recorder = Recorder()
        session = GameSession(make_state(4), on_save=recorder)
        session.flip(0)
        session.tick()
        assert len(recorder.calls) == 3
        assert recorder.calls[-1] == (session.state, 1)

    def test_resume(self):
        saved = SavedGame(make_state(8, mode=GameMode.TIME_ATTACK, moves=3), elapsed_time_seconds=12)
        session = GameSession.resume(saved)
        assert session.seconds == 12
        assert session.state.moves == 3

    def test_new_game(self):
        session = GameSession.new_game(6, seed=4, mode=GameMode.TIME_ATTACK)
        assert session.state.pair_count == 6
        assert session.seconds == 25
