"""
Shared Engine

Two players alternate guesses on one board against a server-picked secret.

Idle -> Active (alternating turns) -> Ended (solved or board full)
"""

from typing import Any, Dict, List, Optional, Tuple

from .base import EngineContext, ModeEngine, apply_round_result, require_host, swap_id
from ..errors import StateError
from ..models.game import DRAW, GameMode, GuessRecord, LetterStatus, Room, SharedState
from ..services.scoring import score_guess
from ..utils.game_logger import game_logger


class SharedEngine(ModeEngine):
    mode = GameMode.SHARED
    seats = 2

    def init_state(self, ctx: EngineContext, words: Optional[List[str]] = None) -> SharedState:
        # an empty queue is refilled on the first start
        return SharedState(queue=list(words or []))

    def start_round(self, room: Room, player_id: str, ctx: EngineContext,
                    refill: Optional[List[str]] = None) -> None:
        require_host(room, player_id, "Only host can start the round")
        state: SharedState = room.state
        if state.started:
            raise StateError("Round already in progress")

        active = room.active_player_ids()
        if len(active) != 2:
            raise StateError("Need exactly two players to start")

        if not state.queue:
            if not refill:
                raise StateError("No secret available")
            state.queue = list(refill)
        secret = state.queue.pop(0)

        room.round_number += 1
        state.secret = secret
        state.started = True
        state.round_closed = False
        state.winner = None
        state.guesses = []
        state.last_revealed_word = None
        state.turn = room.host_id if room.host_id in active else active[0]

        game_logger.log_game_event(
            room.id, 'shared_round_started', player_id,
            queue_length=len(state.queue), picked=f"{secret[0]}***{secret[-1]}",
        )

    def _other_active(self, room: Room, player_id: str) -> Optional[str]:
        other = room.opponent_of(player_id)
        if other is not None and not room.players[other].disconnected:
            return other
        return None

    def handle_guess(self, room: Room, player_id: str, word: str, ctx: EngineContext) -> Tuple[LetterStatus, ...]:
        state: SharedState = room.state
        if not state.started:
            raise StateError("Game not started")
        if state.turn != player_id:
            raise StateError("Not your turn")

        pattern = score_guess(state.secret, word)
        state.guesses.append(GuessRecord(word, pattern, author=player_id))

        if word == state.secret:
            self.end_round(room, player_id)
        elif len(state.guesses) >= state.max_guesses:
            self.end_round(room, DRAW)
        else:
            state.turn = self._other_active(room, player_id) or player_id
        return pattern

    def end_round(self, room: Room, winner: str) -> bool:
        state: SharedState = room.state
        if state.round_closed or not state.started:
            return False

        state.round_closed = True
        state.started = False
        state.winner = winner
        state.last_revealed_word = state.secret
        state.secret = None
        state.turn = None

        # a full board without a match changes no stats
        if winner != DRAW:
            apply_round_result(room, winner, list(room.players))
        return True

    def play_again(self, room: Room, player_id: str) -> bool:
        """Clear the finished board so the host can start the next round."""
        state: SharedState = room.state
        if state.started:
            raise StateError("Round still in progress")
        self.reset_round(room)
        return True

    def reset_round(self, room: Room) -> None:
        state: SharedState = room.state
        state.secret = None
        state.started = False
        state.turn = None
        state.guesses = []
        state.winner = None
        state.last_revealed_word = None
        state.round_closed = False
        room.cancel_round_task()

    def on_disconnect(self, room: Room, player_id: str) -> None:
        state: SharedState = room.state
        if state.started and state.turn == player_id:
            remaining = [pid for pid in room.active_player_ids() if pid != player_id]
            if remaining:
                state.turn = remaining[0]

    def on_player_removed(self, room: Room, player_id: str) -> None:
        state: SharedState = room.state
        if state.started:
            self.reset_round(room)

    def rekey(self, room: Room, old_id: str, new_id: str) -> None:
        state: SharedState = room.state
        state.turn = swap_id(state.turn, old_id, new_id)
        state.winner = swap_id(state.winner, old_id, new_id)
        state.guesses = [
            GuessRecord(record.guess, record.pattern, swap_id(record.author, old_id, new_id))
            for record in state.guesses
        ]

    def sanitize(self, room: Room) -> Dict[str, Any]:
        state: SharedState = room.state
        return {
            'shared': {
                'started': state.started,
                'turn': state.turn,
                'winner': state.winner,
                'hasSecret': bool(state.secret),
                'guesses': [record.to_dict() for record in state.guesses],
                'lastRevealedWord': state.last_revealed_word,
                'maxGuesses': state.max_guesses,
            }
        }
