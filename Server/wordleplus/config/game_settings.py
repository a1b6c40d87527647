"""
Game Configuration Constants Module

This module defines the game constants shared by every room mode and loads
the bundled dictionary used for word validation and secret generation.
"""

import json
import os
from typing import List, Final, Optional

WORD_LENGTH: Final[int] = 5
"""Length of every secret and guess."""

MAX_GUESSES: Final[int] = 6
"""
Per-round guess cap. Applies to each player's own list in duel and battle
rooms and to the single shared list in shared rooms.
"""

MAX_NAME_LENGTH: Final[int] = 24
"""Display names are trimmed to this many characters."""

DEFAULT_WORDLIST_PATH: Final[str] = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), 'wordles.json'
)


def load_word_list(path: Optional[str] = None) -> List[str]:
    """
    Load a word list from a JSON array or a newline separated text file.

    Entries are stripped and uppercased; anything that is not a 5-letter
    alphabetic word is rejected, and duplicates are dropped while keeping
    the original order.

    Returns:
        List[str]: Uppercase 5-letter words

    Raises:
        FileNotFoundError: If the word list file is not found
        ValueError: If the file is malformed or contains invalid words
    """
    path = path or DEFAULT_WORDLIST_PATH

    try:
        with open(path, 'r', encoding='utf-8') as f:
            if path.endswith('.json'):
                raw_words = json.load(f)
            else:
                raw_words = f.read().splitlines()
    except FileNotFoundError:
        raise FileNotFoundError(f"Word list file not found: {path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}")

    if not isinstance(raw_words, list):
        raise ValueError("Word list must be an array of words")

    words: List[str] = []
    seen = set()
    for entry in raw_words:
        if not isinstance(entry, str) or not entry.strip():
            continue
        word = entry.strip().upper()
        if len(word) != WORD_LENGTH:
            raise ValueError(f"Word '{word}' is not {WORD_LENGTH} characters long")
        if not word.isalpha() or not word.isascii():
            raise ValueError(f"Word '{word}' contains non-alphabetic characters")
        if word not in seen:
            seen.add(word)
            words.append(word)

    if not words:
        raise ValueError("Word list cannot be empty")

    return words


# Curated word database loaded from the bundled JSON file
WORD_LIST: Final[List[str]] = load_word_list()
