"""
Dictionary Controller

HTTP endpoints for health checks and the word service used by clients and
by other game servers configured with DICTIONARY_URL.
"""

from flask import Blueprint, current_app, jsonify, request

from ..config.game_settings import load_word_list
from ..errors import StateError
from ..services.dictionary import LocalDictionary, normalize_word
from ..utils.game_logger import game_logger

dictionary_bp = Blueprint('dictionary', __name__)


@dictionary_bp.route('/health', methods=['GET'])
def health():
    return jsonify({'ok': True, 'rooms': current_app.game_service.room_count()})


@dictionary_bp.route('/api/validate', methods=['GET'])
def validate_word():
    """Check whether ``?word=`` is a playable 5-letter word."""
    word = normalize_word(request.args.get('word', ''))
    valid = current_app.game_service.dictionary.is_valid_word(word)
    return jsonify({'valid': valid})


@dictionary_bp.route('/api/random-word', methods=['GET'])
def random_word():
    """Pick one word from the dictionary."""
    try:
        word = current_app.game_service.dictionary.random_words(1)[0]
    except StateError as e:
        return jsonify({'error': e.message}), 503
    return jsonify({'word': word})


@dictionary_bp.route('/api/reload-words', methods=['POST'])
def reload_words():
    """
    Re-read the word list from disk.

    Only the local dictionary can be reloaded. WORDLIST_PATH is used when
    set, otherwise the bundled list.
    """
    dictionary = current_app.game_service.dictionary
    if not isinstance(dictionary, LocalDictionary):
        return jsonify({'ok': False, 'error': 'Dictionary is remote'}), 400

    path = current_app.config.get('WORDLIST_PATH')
    game_logger.log_user_action(None, 'reload_words', payload={'path': path})

    try:
        count = dictionary.reload(load_word_list(path))
    except (FileNotFoundError, ValueError) as e:
        game_logger.log_error(None, e, 'reload_words')
        return jsonify({'ok': False, 'error': str(e)}), 400

    game_logger.log_server_response(None, 'reload_words', True, {'ok': True, 'count': count})
    return jsonify({'ok': True, 'count': count})
