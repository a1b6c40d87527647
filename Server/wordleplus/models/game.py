"""
Game Data Models

Contains the room record and the per-mode round state structures.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .player import Player
from ..config.game_settings import MAX_GUESSES

DRAW = "draw"


class LetterStatus(Enum):
    """Per-letter tri-state scoring result."""
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"


class GameMode(str, Enum):
    """Room mode tag. Each value has exactly one engine."""
    DUEL = "duel"
    BATTLE = "battle"
    SHARED = "shared"

    @classmethod
    def parse(cls, value: Any) -> "GameMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown mode '{value}'")


@dataclass(frozen=True)
class GuessRecord:
    """One scored guess. ``author`` is only set on the shared board."""
    guess: str
    pattern: Tuple[LetterStatus, ...]
    author: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'guess': self.guess,
            'pattern': [status.value for status in self.pattern],
        }
        if self.author is not None:
            data['by'] = self.author
        return data


@dataclass
class DuelState:
    """Head-to-head round state. ``reveal`` is only filled once the round ends."""
    started: bool = False
    winner: Optional[str] = None  # player id, DRAW, or None while undecided
    reveal: Optional[Dict[str, Optional[str]]] = None
    deadline: Optional[int] = None  # epoch milliseconds
    round_closed: bool = False


@dataclass
class BattleState:
    """Host-moderated battle royale state. One secret shared by all non-host players."""
    secret: Optional[str] = None
    started: bool = False
    winner: Optional[str] = None
    last_revealed_word: Optional[str] = None
    round_closed: bool = False


@dataclass
class SharedState:
    """Turn-based shared board state."""
    secret: Optional[str] = None
    started: bool = False
    turn: Optional[str] = None
    guesses: List[GuessRecord] = field(default_factory=list)
    winner: Optional[str] = None  # player id, DRAW, or None
    last_revealed_word: Optional[str] = None
    queue: List[str] = field(default_factory=list)
    max_guesses: int = MAX_GUESSES
    round_closed: bool = False


ModeState = Union[DuelState, BattleState, SharedState]


@dataclass
class Room:
    """
    Server-side record of one session.

    ``players`` is keyed by connection id and keeps join order. ``round_task``
    is the cancellable deadline timer owned by the room (duel only);
    ``purge_tasks`` holds the pending resume-window expiries per player.
    """
    id: str
    mode: GameMode
    host_id: str
    state: ModeState
    players: Dict[str, Player] = field(default_factory=dict)
    round_number: int = 0
    round_task: Any = None
    purge_tasks: Dict[str, Any] = field(default_factory=dict)

    def active_player_ids(self) -> List[str]:
        return [pid for pid, player in self.players.items() if not player.disconnected]

    def non_host_ids(self) -> List[str]:
        return [pid for pid in self.players if pid != self.host_id]

    def opponent_of(self, player_id: str) -> Optional[str]:
        for pid in self.players:
            if pid != player_id:
                return pid
        return None

    def rekey_player(self, old_id: str, new_id: str) -> None:
        """Move a player record to a new id, keeping its place in join order."""
        self.players = {
            (new_id if pid == old_id else pid): player
            for pid, player in self.players.items()
        }
        if self.host_id == old_id:
            self.host_id = new_id
        if old_id in self.purge_tasks:
            self.purge_tasks[new_id] = self.purge_tasks.pop(old_id)

    def cancel_round_task(self) -> None:
        if self.round_task is not None:
            self.round_task.cancel()
            self.round_task = None
