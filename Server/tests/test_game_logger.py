import json

import pytest

from wordleplus.utils.game_logger import GameLogger, game_logger


@pytest.fixture(autouse=True)
def restore_shared_logger():
    # GameLogger instances share the "wordleplus" logger and replace its handlers
    yield
    game_logger.logger = game_logger._setup_logger()


def test_secrets_are_masked(tmp_path):
    logger = GameLogger(str(tmp_path), 'INFO')
    masked = logger._sanitize_response_data({
        'roomId': 'ABC123', 'secret': 'CRANE', 'guess': 'PLANT',
        'pattern': ['correct'] * 5, 'ok': True,
    })
    assert masked == {
        'roomId': 'ABC123', 'secret': '***', 'guess': '***',
        'pattern': '<5 marks>', 'ok': True,
    }


def test_entries_are_json_lines(tmp_path):
    logger = GameLogger(str(tmp_path), 'INFO')
    logger.log_user_action('sid-1', 'setSecret', room_id='ABC123', payload={'secret': 'CRANE'})
    logger.log_game_event('ABC123', 'round_started', 'sid-1', round=1)
    for handler in logger.logger.handlers:
        handler.flush()

    lines = logger._log_file().read_text(encoding='utf-8').splitlines()
    entries = [json.loads(line.split(' | ', 2)[2]) for line in lines]
    assert [e['event_type'] for e in entries] == ['USER_ACTION', 'GAME_EVENT']
    assert entries[0]['details']['payload'] == {'secret': '***'}
    assert 'CRANE' not in ''.join(lines)

    stats = logger.get_log_stats()
    assert stats['user_actions'] == 1
    assert stats['game_events'] == 1
