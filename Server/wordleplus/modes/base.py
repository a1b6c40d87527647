"""
Mode Engine Interface

Every room mode implements ModeEngine. Engines hold no state of their own:
everything lives on the Room, and collaborators (clock, timer arming) arrive
through an EngineContext supplied by the GameService. Engines never call the
dictionary: any words they need are drawn by the service before it takes the
room lock and passed in.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..errors import AuthorizationError, CapacityError
from ..models.game import DRAW, GameMode, LetterStatus, ModeState, Room


@dataclass
class EngineContext:
    """Collaborators and settings handed to engines on each call."""
    now_ms: Callable[[], int]
    arm_round_timer: Callable[[Room, float], Any]
    duel_round_seconds: float = 300


class ModeEngine(ABC):
    """Closed state machine over one mode's sub-state."""

    mode: GameMode
    seats: Optional[int] = None  # max player records, None for unbounded

    @abstractmethod
    def init_state(self, ctx: EngineContext, words: Optional[List[str]] = None) -> ModeState:
        """Fresh sub-state for a newly created room."""

    @abstractmethod
    def handle_guess(self, room: Room, player_id: str, word: str, ctx: EngineContext) -> Tuple[LetterStatus, ...]:
        """Score a validated, normalized guess and advance the round."""

    @abstractmethod
    def reset_round(self, room: Room) -> None:
        """Return the room to its pre-round state. Cancels any round timer."""

    @abstractmethod
    def sanitize(self, room: Room) -> Dict[str, Any]:
        """Mode-specific part of the broadcast projection."""

    @abstractmethod
    def rekey(self, room: Room, old_id: str, new_id: str) -> None:
        """Rewrite every sub-state reference to ``old_id``."""

    def check_join(self, room: Room) -> None:
        if self.seats is not None and len(room.players) >= self.seats:
            raise CapacityError("Room is full")

    def handle_timeout(self, room: Room, ctx: EngineContext) -> bool:
        return False

    def on_disconnect(self, room: Room, player_id: str) -> None:
        pass

    def on_resume(self, room: Room, player_id: str, ctx: EngineContext) -> bool:
        """Called once a player is connected again. Returns True if a round started."""
        return False

    def on_player_removed(self, room: Room, player_id: str) -> None:
        pass

    def next_host(self, room: Room) -> str:
        active = room.active_player_ids()
        return active[0] if active else next(iter(room.players))


def require_host(room: Room, player_id: str, message: str) -> None:
    if player_id != room.host_id:
        raise AuthorizationError(message)


def apply_round_result(room: Room, winner: Optional[str], participants: Iterable[str]) -> None:
    """
    Update wins and streaks once per closed round.

    A winner gains a win and extends its streak while every other
    participant's streak resets. A draw resets all participants' streaks.
    No winner (abandoned or unsolved battle) changes nothing.
    """
    if winner is None:
        return
    for pid in participants:
        player = room.players.get(pid)
        if player is None:
            continue
        if pid == winner and winner != DRAW:
            player.record_win()
        else:
            player.streak = 0


def swap_id(value: Optional[str], old_id: str, new_id: str) -> Optional[str]:
    return new_id if value == old_id else value
