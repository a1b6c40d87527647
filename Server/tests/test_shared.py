import random
import threading

import pytest

from wordleplus.config import TestingConfig
from wordleplus.errors import AuthorizationError, StateError
from wordleplus.models.game import DRAW
from wordleplus.services.dictionary import LocalDictionary
from wordleplus.services.game_service import GameService
from wordleplus.services.room_registry import RoomRegistry

from conftest import TEST_WORDS

BOARD_MISSES = ['crane', 'table', 'sweet', 'wrong', 'world', 'about']


class LockCheckingDictionary:
    """Notes whether the service lock was free each time secrets were drawn."""

    def __init__(self, words):
        self.inner = LocalDictionary(words, rng=random.Random(3))
        self.service = None
        self.lock_free = []

    def is_valid_word(self, word):
        return self.inner.is_valid_word(word)

    def random_words(self, count):
        other = threading.Thread(target=self.service.room_count)
        other.start()
        other.join(timeout=1)
        self.lock_free.append(not other.is_alive())
        return self.inner.random_words(count)


@pytest.fixture()
def shared_room(service):
    room = service.create_room('a', 'Alice', 'shared')
    service.join_room('b', 'Bob', room.id)
    return room


@pytest.fixture()
def live_shared(service, shared_room):
    shared_room.state.queue = ['GRAPE', 'TABLE']
    service.start_shared('a', shared_room.id)
    return shared_room


def test_new_room_has_a_prefilled_queue(shared_room, dictionary):
    queue = shared_room.state.queue
    assert len(queue) == 10
    assert all(dictionary.is_valid_word(word) for word in queue)


class TestStart:
    def test_only_host_starts(self, service, shared_room):
        with pytest.raises(AuthorizationError, match="Only host can start the round"):
            service.start_shared('b', shared_room.id)

    def test_needs_two_active_players(self, service):
        room = service.create_room('a', 'Alice', 'shared')
        with pytest.raises(StateError, match="Need exactly two players"):
            service.start_shared('a', room.id)

    def test_disconnected_player_does_not_count(self, service, shared_room):
        service.disconnect('b')
        with pytest.raises(StateError, match="Need exactly two players"):
            service.start_shared('a', shared_room.id)

    def test_start_pops_the_queue(self, service, live_shared):
        state = live_shared.state
        assert state.started
        assert state.secret == 'GRAPE'
        assert state.queue == ['TABLE']
        assert state.turn == 'a'
        assert state.guesses == []

    def test_empty_queue_is_refilled(self, service, shared_room):
        shared_room.state.queue = []
        service.start_shared('a', shared_room.id)
        assert shared_room.state.secret
        assert len(shared_room.state.queue) == 2

    def test_cannot_start_twice(self, service, live_shared):
        with pytest.raises(StateError, match="Round already in progress"):
            service.start_shared('a', live_shared.id)


class TestTurns:
    def test_turns_alternate(self, service, live_shared):
        room = live_shared
        service.make_guess('a', room.id, 'crane')
        assert room.state.turn == 'b'
        service.make_guess('b', room.id, 'table')
        assert room.state.turn == 'a'
        assert [g.author for g in room.state.guesses] == ['a', 'b']

    def test_out_of_turn_guess_is_rejected(self, service, live_shared):
        with pytest.raises(StateError, match="Not your turn"):
            service.make_guess('b', live_shared.id, 'crane')
        assert live_shared.state.guesses == []

    def test_guess_before_start(self, service, shared_room):
        with pytest.raises(StateError, match="Game not started"):
            service.make_guess('a', shared_room.id, 'crane')

    def test_match_wins(self, service, live_shared):
        room = live_shared
        room.players['a'].streak = 2
        service.make_guess('a', room.id, 'crane')
        service.make_guess('b', room.id, 'grape')

        state = room.state
        assert state.winner == 'b'
        assert not state.started
        assert state.turn is None
        assert state.last_revealed_word == 'GRAPE'
        assert state.secret is None
        assert room.players['b'].wins == 1
        assert room.players['a'].streak == 0

    def test_full_board_is_a_draw_without_stat_changes(self, service, live_shared):
        room = live_shared
        room.players['a'].streak = 2
        words = ['crane', 'table', 'sweet', 'wrong', 'world', 'about']
        for i, word in enumerate(words):
            service.make_guess('ab'[i % 2], room.id, word)

        assert room.state.winner == DRAW
        assert len(room.state.guesses) == 6
        assert room.state.last_revealed_word == 'GRAPE'
        assert room.players['a'].streak == 2
        assert room.players['a'].wins == 0
        assert room.players['b'].wins == 0

    def test_next_round_uses_the_next_queued_word(self, service, live_shared):
        room = live_shared
        service.make_guess('a', room.id, 'grape')
        service.start_shared('a', room.id)
        assert room.state.secret == 'TABLE'
        assert room.state.winner is None
        assert room.state.last_revealed_word is None
        assert room.round_number == 2


class TestDisconnects:
    def test_turn_holder_disconnect_passes_turn(self, service, live_shared):
        service.disconnect('a')
        assert live_shared.state.turn == 'b'

    def test_guesser_keeps_turn_when_partner_is_away(self, service, live_shared):
        room = live_shared
        service.disconnect('b')
        service.make_guess('a', room.id, 'crane')
        assert room.state.turn == 'a'

    def test_resume_rewrites_turn_and_authors(self, service, live_shared):
        room = live_shared
        service.make_guess('a', room.id, 'crane')
        service.disconnect('b')
        assert room.state.turn == 'a'

        service.make_guess('a', room.id, 'table')
        service.resume('a2', room.id, 'a')
        assert room.state.turn == 'a2'
        assert [g.author for g in room.state.guesses] == ['a2', 'a2']
        assert room.host_id == 'a2'

    def test_removal_mid_round_resets(self, service, live_shared):
        room = live_shared
        service.make_guess('a', room.id, 'crane')
        service.leave_room('b', room.id)
        assert not room.state.started
        assert room.state.guesses == []
        assert room.state.secret is None


class TestSharedProjection:
    def test_secret_never_sent_while_live(self, service, live_shared, broadcasts):
        room = live_shared
        service.make_guess('a', room.id, 'crane')
        service.publish(room)
        shared = broadcasts.last(room.id)['shared']
        assert shared['hasSecret'] is True
        assert shared['lastRevealedWord'] is None
        assert shared['turn'] == 'b'
        assert shared['maxGuesses'] == 6
        assert shared['guesses'][0]['by'] == 'a'
        assert shared['guesses'][0]['pattern'] == ['absent', 'correct', 'correct', 'absent', 'correct']
        assert 'GRAPE' not in str(broadcasts.last(room.id))


class TestPlayAgain:
    def test_replay_request_clears_the_finished_board(self, service, live_shared):
        room = live_shared
        for i, word in enumerate(BOARD_MISSES):
            service.make_guess('ab'[i % 2], room.id, word)
        assert room.state.winner == DRAW

        service.duel_play_again('b', room.id)
        state = room.state
        assert not state.started
        assert state.guesses == []
        assert state.winner is None
        assert state.last_revealed_word is None
        assert state.queue == ['TABLE']

        service.start_shared('a', room.id)
        assert state.secret == 'TABLE'

    def test_replay_rejected_mid_round(self, service, live_shared):
        with pytest.raises(StateError, match="Round still in progress"):
            service.duel_play_again('a', live_shared.id)
        assert live_shared.state.started

    def test_replay_requires_membership(self, service, shared_room):
        with pytest.raises(AuthorizationError, match="Not in room"):
            service.duel_play_again('zz', shared_room.id)


class TestSecretDrawing:
    def test_secrets_are_drawn_without_holding_the_lock(self, scheduler):
        dictionary = LockCheckingDictionary(TEST_WORDS)
        service = GameService(RoomRegistry(), dictionary, scheduler, config=TestingConfig)
        dictionary.service = service

        room = service.create_room('a', 'Alice', 'shared')
        service.join_room('b', 'Bob', room.id)
        room.state.queue = []
        service.start_shared('a', room.id)

        assert room.state.started
        assert dictionary.lock_free == [True, True]

    def test_no_words_available(self, scheduler):
        service = GameService(RoomRegistry(), LocalDictionary([]), scheduler, config=TestingConfig)
        room = service.create_room('a', 'Alice', 'shared')
        service.join_room('b', 'Bob', room.id)
        assert room.state.queue == []

        with pytest.raises(StateError, match="No secret available"):
            service.start_shared('a', room.id)
        assert not room.state.started
