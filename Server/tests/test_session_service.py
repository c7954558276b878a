"""Tests for SessionService validation, rounds and room lifecycle."""
import threading

import pytest

from slovo.exceptions import (
    InvalidCharsetError, InvalidLengthError, InvalidPayloadError, NoWordAvailableError,
    NotInDictionaryError, PlayerNotInRoomError, RoomFullError, RoomIdRequiredError,
    RoomNotFoundError, RoundNotStartedError
)
from slovo.services.session_service import SessionService


def _room_with_round(service, secret='молоко', room_id='r1'):
    service.create_room(room_id, 'c1', 'Ann', language='ru', word_length=6)
    service.join_room(room_id, 'c2', 'Bob')
    service.start_round(room_id, secret)


class TestCreateRoom:
    def test_requires_room_id(self, service, registry):
        with pytest.raises(RoomIdRequiredError):
            service.create_room('', 'c1', 'Ann')
        with pytest.raises(RoomIdRequiredError):
            service.create_room('   ', 'c1', 'Ann')
        assert len(registry) == 0

    def test_creates_room_and_broadcasts_snapshot(self, service, publisher):
        snapshot = service.create_room('r1', 'c1', 'Ann', language='ru', word_length=6)
        assert snapshot['players'] == [{'id': 'c1', 'name': 'Ann', 'score': 0}]
        assert publisher.names() == ['roomUpdate']
        assert publisher.members['r1'] == {'c1'}

    def test_uses_defaults(self, service):
        snapshot = service.create_room('r1', 'c1', 'Ann')
        assert snapshot['language'] == 'ru'
        assert snapshot['wordLength'] == 6
        assert snapshot['mode'] == 'positional'

    def test_recreating_existing_room_does_not_reset_it(self, service, registry):
        _room_with_round(service)
        snapshot = service.create_room('r1', 'c3', 'Cid', language='en', word_length=5)

        room = registry.get('r1')
        assert snapshot['wordLength'] == 6
        assert room.secret_word == 'молоко'
        assert [p['name'] for p in snapshot['players']] == ['Ann', 'Bob', 'Cid']

    def test_rejects_bad_settings(self, service, registry):
        with pytest.raises(InvalidPayloadError):
            service.create_room('r1', 'c1', 'Ann', language='xx')
        with pytest.raises(InvalidPayloadError):
            service.create_room('r1', 'c1', 'Ann', word_length=1)
        with pytest.raises(InvalidPayloadError):
            service.create_room('r1', 'c1', 'Ann', mode='hangman')
        assert len(registry) == 0


class TestJoinRoom:
    def test_missing_room_fails_without_mutation(self, service, registry, publisher):
        with pytest.raises(RoomNotFoundError):
            service.join_room('ghost', 'c1', 'Ann')
        assert len(registry) == 0
        assert publisher.events == []

    def test_room_is_full_at_five(self, service, registry):
        service.create_room('r1', 'c1', 'P1')
        for i in range(2, 6):
            service.join_room('r1', f'c{i}', f'P{i}')

        with pytest.raises(RoomFullError):
            service.join_room('r1', 'c6', 'P6')
        assert len(registry.get('r1').players) == 5

    def test_join_broadcasts_to_room(self, service, publisher):
        service.create_room('r1', 'c1', 'Ann')
        publisher.clear()
        service.join_room('r1', 'c2', 'Bob')
        assert publisher.names('r1') == ['roomUpdate']
        assert len(publisher.last('roomUpdate')['players']) == 2


class TestStartRound:
    def test_explicit_word(self, service, registry, publisher):
        service.create_room('r1', 'c1', 'Ann', language='ru', word_length=6)
        payload = service.start_round('r1', 'МОЛОКО')
        assert payload == {'wordLength': 6, 'roundNumber': 1}
        assert registry.get('r1').secret_word == 'молоко'
        assert publisher.last('roundStarted') == {'wordLength': 6, 'roundNumber': 1}
        assert 'молоко' not in str(publisher.events)

    def test_random_word(self, service, registry):
        service.create_room('r1', 'c1', 'Ann', language='ru', word_length=6)
        service.start_round('r1')
        assert registry.get('r1').secret_word in {'яблоко', 'молоко', 'сердце', 'легкий'}

    def test_no_word_available(self, service, registry):
        service.create_room('r1', 'c1', 'Ann', language='ru', word_length=9)
        with pytest.raises(NoWordAvailableError):
            service.start_round('r1')
        assert registry.get('r1').secret_word is None

    def test_explicit_word_is_validated(self, service):
        service.create_room('r1', 'c1', 'Ann', language='ru', word_length=6)
        with pytest.raises(InvalidLengthError):
            service.start_round('r1', 'слово')
        with pytest.raises(InvalidCharsetError):
            service.start_round('r1', 'apples')
        with pytest.raises(NotInDictionaryError):
            service.start_round('r1', 'абвгде')

    def test_unknown_room(self, service):
        with pytest.raises(RoomNotFoundError):
            service.start_round('ghost')

    def test_restart_discards_previous_round(self, service, registry):
        _room_with_round(service)
        service.submit_guess('r1', 'c1', 'яблоко')
        service.start_round('r1', 'сердце')

        room = registry.get('r1')
        assert room.guess_history == []
        assert room.secret_word == 'сердце'
        assert room.round_number == 2


class TestSubmitGuess:
    def test_round_not_started(self, service):
        service.create_room('r1', 'c1', 'Ann')
        with pytest.raises(RoundNotStartedError):
            service.submit_guess('r1', 'c1', 'молоко')

    def test_unknown_room(self, service):
        with pytest.raises(RoomNotFoundError):
            service.submit_guess('ghost', 'c1', 'молоко')

    def test_player_must_be_in_room(self, service):
        _room_with_round(service)
        with pytest.raises(PlayerNotInRoomError):
            service.submit_guess('r1', 'stranger', 'яблоко')

    def test_wrong_length_rejected_without_history(self, service, registry, publisher):
        _room_with_round(service)
        publisher.clear()
        with pytest.raises(InvalidLengthError):
            service.submit_guess('r1', 'c1', 'слово')
        assert registry.get('r1').guess_history == []
        assert publisher.events == []

    def test_charset_rejected(self, service, registry):
        _room_with_round(service)
        with pytest.raises(InvalidCharsetError):
            service.submit_guess('r1', 'c1', 'milk12')
        assert registry.get('r1').guess_history == []

    def test_guess_is_scored_and_broadcast(self, service, registry, publisher):
        _room_with_round(service)
        publisher.clear()
        result = service.submit_guess('r1', 'c2', 'Колмоо')

        assert result == {
            'win': False,
            'feedback': ['present', 'exact', 'exact', 'present', 'present', 'exact'],
        }
        assert publisher.names('r1') == ['guessResult']
        assert publisher.last('guessResult') == {
            'playerId': 'c2',
            'playerName': 'Bob',
            'guessText': 'колмоо',
            'feedback': result['feedback'],
        }
        assert len(registry.get('r1').guess_history) == 1

    def test_winning_guess_ends_round(self, service, registry, publisher):
        service.create_room('r1', 'c1', 'Ann', language='en', word_length=5)
        service.start_round('r1', 'apple')
        publisher.clear()

        result = service.submit_guess('r1', 'c1', 'apple')
        assert result['win'] is True
        assert result['feedback'] == ['exact'] * 5
        assert publisher.names('r1') == ['guessResult', 'roundOver', 'roomUpdate']
        assert publisher.last('roundOver') == {'winner': 'Ann', 'winnerId': 'c1', 'secretWord': 'apple'}
        assert publisher.last('roomUpdate')['players'][0]['score'] == 1
        assert publisher.last('roomUpdate')['status'] == 'round_over'

        with pytest.raises(RoundNotStartedError):
            service.submit_guess('r1', 'c1', 'crane')
        assert len(registry.get('r1').guess_history) == 1

    def test_new_round_after_round_over(self, service):
        service.create_room('r1', 'c1', 'Ann', language='en', word_length=5)
        service.start_round('r1', 'apple')
        service.submit_guess('r1', 'c1', 'apple')

        assert service.start_round('r1', 'lemon')['roundNumber'] == 2
        assert service.submit_guess('r1', 'c1', 'lemon')['win'] is True

    def test_letter_variant_folding(self, service):
        _room_with_round(service, secret='лёгкий')
        assert service.submit_guess('r1', 'c1', 'ЛЕГКИЙ')['win'] is True

    def test_bulls_and_cows_room(self, service, publisher):
        service.create_room('r1', 'c1', 'Ann', language='ru', word_length=6, mode='bulls_and_cows')
        service.start_round('r1', 'молоко')

        assert service.submit_guess('r1', 'c1', 'колмоо') == {
            'win': False, 'feedback': {'bulls': 3, 'cows': 3}
        }
        assert service.submit_guess('r1', 'c1', 'молоко')['win'] is True
        assert publisher.last('roundOver')['secretWord'] == 'молоко'

    def test_dictionary_check_for_enabled_mode(self, registry, word_source, publisher):
        strict = SessionService(
            registry, word_source, publisher, dictionary_check_modes=['positional']
        )
        _room_with_round(strict)
        with pytest.raises(NotInDictionaryError):
            strict.submit_guess('r1', 'c1', 'абвгде')
        assert strict.submit_guess('r1', 'c1', 'яблоко')['win'] is False

    def test_history(self, service):
        _room_with_round(service)
        service.submit_guess('r1', 'c1', 'яблоко')
        service.submit_guess('r1', 'c2', 'сердце')
        assert [g['playerName'] for g in service.guess_history('r1')] == ['Ann', 'Bob']


class TestLeaveRoom:
    def test_disconnect_leaves_every_room(self, service, registry, publisher):
        service.create_room('r1', 'c1', 'Ann')
        service.create_room('r2', 'c1', 'Ann')
        service.join_room('r2', 'c2', 'Bob')
        publisher.clear()

        assert sorted(service.leave_room('c1')) == ['r1', 'r2']
        assert registry.get('r1').is_empty
        assert [p['name'] for p in registry.get('r2').snapshot()['players']] == ['Bob']
        assert 'c1' not in publisher.members['r2']
        assert registry.has_pending_cleanup('r1')
        assert not registry.has_pending_cleanup('r2')

    def test_room_gone_after_cleanup_delay(self, service, runner):
        service.create_room('r1', 'c1', 'Ann')
        service.leave_room('c1')
        runner.run_all()

        with pytest.raises(RoomNotFoundError):
            service.join_room('r1', 'c1', 'Ann')

    def test_rejoin_within_delay_keeps_session(self, service, registry, runner):
        _room_with_round(service)
        service.leave_room('c1')
        service.leave_room('c2')
        assert registry.has_pending_cleanup('r1')

        service.join_room('r1', 'c3', 'Ann again')
        runner.run_all()

        room = registry.get('r1')
        assert room is not None
        assert room.secret_word == 'молоко'
        assert service.submit_guess('r1', 'c3', 'молоко')['win'] is True

    def test_explicit_leave_requires_membership(self, service):
        service.create_room('r1', 'c1', 'Ann')
        with pytest.raises(PlayerNotInRoomError):
            service.leave_room('c2', 'r1')
        with pytest.raises(RoomNotFoundError):
            service.leave_room('c1', 'ghost')
        assert service.leave_room('c1', 'r1') == ['r1']

    def test_create_after_cleanup_starts_fresh(self, service, registry, runner):
        _room_with_round(service)
        service.leave_room('c1')
        service.leave_room('c2')
        runner.run_all()

        snapshot = service.create_room('r1', 'c1', 'Ann', language='en', word_length=5)
        assert snapshot['wordLength'] == 5
        assert registry.get('r1').secret_word is None


class TestConcurrency:
    def test_concurrent_guesses_broadcast_in_history_order(self, service, registry, publisher):
        service.create_room('r1', 'p0', 'P0', language='en', word_length=5)
        for i in range(1, 5):
            service.join_room('r1', f'p{i}', f'P{i}')
        service.start_round('r1', 'lemon')
        publisher.clear()
        barrier = threading.Barrier(5)

        def player(connection_id):
            barrier.wait()
            for guess in ('apple', 'crane', 'paper') * 4:
                service.submit_guess('r1', connection_id, guess)

        threads = [threading.Thread(target=player, args=(f'p{i}',)) for i in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        history = [(g.connection_id, g.guess_text) for g in registry.get('r1').guess_history]
        broadcast = [
            (payload['playerId'], payload['guessText'])
            for _, event, payload in publisher.events if event == 'guessResult'
        ]
        assert len(history) == 60
        assert broadcast == history

    def test_join_leave_storm_never_exceeds_capacity(self, service, registry, publisher):
        service.create_room('r1', 'host', 'Host')
        barrier = threading.Barrier(10)
        failures = []

        def visitor(connection_id):
            barrier.wait()
            for _ in range(20):
                try:
                    service.join_room('r1', connection_id, connection_id)
                except RoomFullError:
                    continue
                except Exception as e:
                    failures.append(e)
                    return
                service.leave_room(connection_id, 'r1')

        threads = [threading.Thread(target=visitor, args=(f'v{i}',)) for i in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert failures == []
        sizes = [len(payload['players']) for _, event, payload in publisher.events if event == 'roomUpdate']
        assert max(sizes) <= 5
        assert all(payload['players'][0]['name'] == 'Host'
                   for _, event, payload in publisher.events if event == 'roomUpdate')
        room = registry.get('r1')
        assert list(room.players) == ['host']
        assert publisher.members['r1'] == {'host'}
