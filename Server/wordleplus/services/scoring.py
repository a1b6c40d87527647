"""
Guess Scoring

Implements the Wordle letter evaluation used by every room mode.
"""

from collections import Counter
from typing import List, Optional, Tuple

from ..models.game import LetterStatus


def score_guess(secret: str, guess: str) -> Tuple[LetterStatus, ...]:
    """
    Score a guess against a secret.

    Two passes over a letter-frequency table seeded from the secret: exact
    position matches first, then present letters while any of that letter
    remain unclaimed. A letter repeated in the guess is never marked
    correct or present more times than it occurs in the secret.

    Args:
        secret: Target word
        guess: Submitted word of the same length

    Returns:
        Tuple of LetterStatus, one per position
    """
    secret = secret.upper()
    guess = guess.upper()
    if len(secret) != len(guess):
        raise ValueError("Secret and guess must have the same length")

    remaining = Counter(secret)
    result: List[Optional[LetterStatus]] = [None] * len(guess)

    # First pass: exact position matches
    for i, letter in enumerate(guess):
        if letter == secret[i]:
            result[i] = LetterStatus.CORRECT
            remaining[letter] -= 1

    # Second pass: present letters, otherwise absent
    for i, letter in enumerate(guess):
        if result[i] is not None:
            continue
        if remaining[letter] > 0:
            result[i] = LetterStatus.PRESENT
            remaining[letter] -= 1
        else:
            result[i] = LetterStatus.ABSENT

    return tuple(result)
