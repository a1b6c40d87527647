"""
Battle Engine

Battle royale moderated by the host: the host sets one secret, every other
player races to solve it. First exact match wins the round.

Idle -> Armed (host word set) -> Active (host starts) -> Ended
"""

from typing import Any, Dict, List, Optional, Tuple

from .base import EngineContext, ModeEngine, apply_round_result, require_host, swap_id
from ..config.game_settings import MAX_GUESSES
from ..errors import AuthorizationError, StateError
from ..models.game import BattleState, GameMode, GuessRecord, LetterStatus, Room
from ..services.scoring import score_guess


class BattleEngine(ModeEngine):
    mode = GameMode.BATTLE

    def init_state(self, ctx: EngineContext, words: Optional[List[str]] = None) -> BattleState:
        return BattleState()

    def _clear_players(self, room: Room) -> None:
        for pid in room.non_host_ids():
            room.players[pid].clear_round()

    def _all_finished(self, room: Room) -> bool:
        return all(
            room.players[pid].done or room.players[pid].disconnected
            for pid in room.non_host_ids()
        )

    def set_host_word(self, room: Room, player_id: str, secret: str) -> None:
        require_host(room, player_id, "Only host can set word")
        state: BattleState = room.state
        if state.started:
            raise StateError("Battle in progress")

        state.secret = secret
        state.winner = None
        state.round_closed = False
        self._clear_players(room)

    def start_battle(self, room: Room, player_id: str) -> None:
        require_host(room, player_id, "Only host can start")
        state: BattleState = room.state
        if state.started:
            raise StateError("Battle already in progress")
        if state.round_closed:
            raise StateError("Round is over, play again to reset")
        if not state.secret:
            raise StateError("Set a word first")
        if not [pid for pid in room.non_host_ids() if not room.players[pid].disconnected]:
            raise StateError("Need at least one player besides the host")

        room.round_number += 1
        state.started = True
        state.winner = None
        state.last_revealed_word = None

    def handle_guess(self, room: Room, player_id: str, word: str, ctx: EngineContext) -> Tuple[LetterStatus, ...]:
        if player_id == room.host_id:
            raise AuthorizationError("Host is spectating this round")
        state: BattleState = room.state
        if not state.started:
            raise StateError("Battle not started")

        player = room.players[player_id]
        if player.done:
            raise StateError("No guesses left")

        pattern = score_guess(state.secret, word)
        player.guesses.append(GuessRecord(word, pattern))

        if word == state.secret:
            self.end_round(room, player_id)
        elif len(player.guesses) >= MAX_GUESSES:
            player.done = True
            if self._all_finished(room):
                self.end_round(room, None)
        return pattern

    def end_round(self, room: Room, winner: Optional[str]) -> bool:
        """Close the round once: reveal the word, finish everyone, credit the winner."""
        state: BattleState = room.state
        if state.round_closed or not state.started:
            return False

        participants: List[str] = room.non_host_ids()
        state.round_closed = True
        state.started = False
        state.winner = winner
        state.last_revealed_word = state.secret
        for pid in participants:
            room.players[pid].done = True

        apply_round_result(room, winner, participants)
        return True

    def play_again(self, room: Room, player_id: str, keep_word: bool = False) -> None:
        require_host(room, player_id, "Only host can reset")
        self.reset_round(room, keep_word=keep_word)

    def reset_round(self, room: Room, keep_word: bool = False) -> None:
        state: BattleState = room.state
        for player in room.players.values():
            player.clear_round()
        state.started = False
        state.winner = None
        state.round_closed = False
        if not keep_word:
            state.secret = None
        room.cancel_round_task()

    def _end_if_exhausted(self, room: Room) -> None:
        state: BattleState = room.state
        if state.started and self._all_finished(room):
            self.end_round(room, None)

    def on_disconnect(self, room: Room, player_id: str) -> None:
        self._end_if_exhausted(room)

    def next_host(self, room: Room) -> str:
        # mid-round, hand the host seat to someone who has already finished
        if room.state.started:
            finished = [pid for pid in room.active_player_ids() if room.players[pid].done]
            if finished:
                return finished[0]
        return super().next_host(room)

    def on_player_removed(self, room: Room, player_id: str) -> None:
        if room.state.started:
            # the host only spectates, so a promoted guesser leaves the round
            room.players[room.host_id].clear_round()
        self._end_if_exhausted(room)

    def rekey(self, room: Room, old_id: str, new_id: str) -> None:
        state: BattleState = room.state
        state.winner = swap_id(state.winner, old_id, new_id)

    def sanitize(self, room: Room) -> Dict[str, Any]:
        state: BattleState = room.state
        return {
            'battle': {
                'started': state.started,
                'winner': state.winner,
                'hasSecret': bool(state.secret),
                'secret': None,
                'lastRevealedWord': state.last_revealed_word if not state.started else None,
            }
        }
