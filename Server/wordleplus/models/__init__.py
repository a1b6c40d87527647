"""
Data Models Package

Contains all data models used by the room engine.
"""

from .player import Player
from .game import (
    DRAW, LetterStatus, GameMode, GuessRecord,
    DuelState, BattleState, SharedState, Room,
)

__all__ = [
    'Player', 'DRAW', 'LetterStatus', 'GameMode', 'GuessRecord',
    'DuelState', 'BattleState', 'SharedState', 'Room',
]
