from wordleplus.services.projection import sanitize_room

PLAYER_KEYS = {'name', 'ready', 'guesses', 'done', 'wins', 'streak', 'disconnected'}


def test_duel_snapshot_shape(service, duel_room):
    snapshot = sanitize_room(duel_room)
    assert snapshot == {
        'id': duel_room.id,
        'mode': 'duel',
        'hostId': 'a',
        'players': {
            'a': {'name': 'Alice', 'ready': False, 'guesses': [], 'done': False,
                  'wins': 0, 'streak': 0, 'disconnected': False},
            'b': {'name': 'Bob', 'ready': False, 'guesses': [], 'done': False,
                  'wins': 0, 'streak': 0, 'disconnected': False},
        },
        'started': False,
        'winner': None,
        'duelReveal': None,
        'duelDeadline': None,
    }


def test_duel_secrets_never_leak_before_the_end(service, duel_room):
    service.set_secret('a', duel_room.id, 'crane')
    assert 'CRANE' not in str(sanitize_room(duel_room))

    service.set_secret('b', duel_room.id, 'plant')
    service.make_guess('b', duel_room.id, 'grape')
    snapshot = sanitize_room(duel_room)
    assert 'CRANE' not in str(snapshot)
    assert 'PLANT' not in str(snapshot)
    assert snapshot['started'] is True
    assert snapshot['duelDeadline'] == duel_room.state.deadline
    for player in snapshot['players'].values():
        assert set(player) == PLAYER_KEYS


def test_battle_and_shared_carry_their_sub_state(service):
    battle = service.create_room('h', 'Host', 'battle')
    shared = service.create_room('s', 'Sam', 'shared')

    battle_snapshot = sanitize_room(battle)
    assert battle_snapshot['mode'] == 'battle'
    assert set(battle_snapshot['battle']) == {'started', 'winner', 'hasSecret', 'secret', 'lastRevealedWord'}
    assert 'shared' not in battle_snapshot

    shared_snapshot = sanitize_room(shared)
    assert shared_snapshot['mode'] == 'shared'
    assert 'queue' not in shared_snapshot['shared']
    assert not any(word in str(shared_snapshot) for word in shared.state.queue)


def test_disconnected_flag_is_visible(service, duel_room):
    service.disconnect('b')
    assert sanitize_room(duel_room)['players']['b']['disconnected'] is True
