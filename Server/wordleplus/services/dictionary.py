"""
Dictionary Service

Word validation and random secret generation. Two interchangeable backends
expose the same ``is_valid_word`` / ``random_words`` pair:

- LocalDictionary: the bundled (or configured) word list held in memory
- RemoteDictionary: an HTTP dictionary service, failing closed on any error
"""

import random
from typing import Iterable, List, Optional

import requests

from ..config.game_settings import WORD_LENGTH, WORD_LIST, load_word_list
from ..errors import StateError, ValidationError
from ..utils.game_logger import game_logger


def normalize_word(word) -> str:
    """Strip and uppercase a client-supplied word. Non-strings become ''."""
    if not isinstance(word, str):
        return ""
    return word.strip().upper()


def has_word_shape(word: str) -> bool:
    return len(word) == WORD_LENGTH and word.isascii() and word.isalpha()


class LocalDictionary:
    """In-memory dictionary backed by a word list."""

    def __init__(self, words: Iterable[str], rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()
        self.reload(words)

    def reload(self, words: Iterable[str]) -> int:
        normalized = [normalize_word(w) for w in words]
        self.words: List[str] = list(dict.fromkeys(w for w in normalized if has_word_shape(w)))
        self._word_set = set(self.words)
        return len(self.words)

    def __len__(self) -> int:
        return len(self.words)

    def is_valid_word(self, word) -> bool:
        word = normalize_word(word)
        return has_word_shape(word) and word in self._word_set

    def random_words(self, count: int) -> List[str]:
        if not self.words:
            raise StateError("No secret available")
        return [self._rng.choice(self.words) for _ in range(count)]


class RemoteDictionary:
    """
    Client for an external dictionary service.

    Expects ``GET /api/validate?word=W`` -> ``{"valid": bool}`` and
    ``GET /api/random-word`` -> ``{"word": W}``. Lookups are bounded by
    ``timeout``; a timeout or any other failure reads as "invalid word".
    """

    def __init__(self, base_url: str, timeout: float = 2.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def is_valid_word(self, word) -> bool:
        word = normalize_word(word)
        if not has_word_shape(word):
            return False
        try:
            response = self.session.get(
                f"{self.base_url}/api/validate",
                params={'word': word},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json().get('valid') is True
        except (requests.RequestException, ValueError, AttributeError) as e:
            game_logger.logger.warning(f"Dictionary lookup failed for validation: {e}")
            return False

    def random_words(self, count: int) -> List[str]:
        words = []
        for _ in range(count):
            try:
                response = self.session.get(f"{self.base_url}/api/random-word", timeout=self.timeout)
                response.raise_for_status()
                word = normalize_word(response.json().get('word'))
            except (requests.RequestException, ValueError, AttributeError) as e:
                game_logger.logger.warning(f"Dictionary lookup failed for random word: {e}")
                raise StateError("No secret available")
            if not has_word_shape(word):
                raise StateError("No secret available")
            words.append(word)
        return words


def require_valid_word(dictionary, word, label: str = "Guess") -> str:
    """
    Normalize a word and check it against the dictionary.

    Returns:
        str: The uppercase word

    Raises:
        ValidationError: With a message describing the first failed check
    """
    if not isinstance(word, str) or not word.strip():
        raise ValidationError(f"{label} must be a valid string")

    normalized = normalize_word(word)
    if len(normalized) != WORD_LENGTH:
        raise ValidationError(f"{label} must be exactly {WORD_LENGTH} letters")
    if not has_word_shape(normalized):
        raise ValidationError(f"{label} must contain only letters")
    if not dictionary.is_valid_word(normalized):
        raise ValidationError("Invalid word")
    return normalized


def build_dictionary(config):
    """Pick the remote dictionary when configured, otherwise the local word list."""
    url = getattr(config, 'DICTIONARY_URL', None)
    if url:
        return RemoteDictionary(url, timeout=getattr(config, 'DICTIONARY_TIMEOUT_SECONDS', 2.0))
    path = getattr(config, 'WORDLIST_PATH', None)
    return LocalDictionary(load_word_list(path) if path else WORD_LIST)
