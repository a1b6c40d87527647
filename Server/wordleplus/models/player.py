"""
Player Data Models

Contains the per-connection player record.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Player:
    """
    A participant in a room.

    The connection id is the key under which the room stores the record,
    so it is not repeated here; a resume moves the same record to a new key.
    ``secret``, ``ready`` and ``rematch_requested`` are only used in duel rooms.
    """
    name: str
    secret: Optional[str] = None
    ready: bool = False
    guesses: List[Any] = field(default_factory=list)
    done: bool = False
    wins: int = 0
    streak: int = 0
    disconnected: bool = False
    rematch_requested: bool = False

    def clear_round(self) -> None:
        self.guesses = []
        self.done = False

    def record_win(self) -> None:
        self.wins += 1
        self.streak += 1

    def public_view(self) -> Dict[str, Any]:
        """Fields every room member may see."""
        return {
            'name': self.name,
            'ready': self.ready,
            'guesses': [record.to_dict() for record in self.guesses],
            'done': self.done,
            'wins': self.wins,
            'streak': self.streak,
            'disconnected': self.disconnected,
        }
