"""
Duel Engine

Head-to-head mode: each of two players picks a secret for the other, then
both race to solve the opponent's word before the round deadline.

Lobby -> Active (both secrets set) -> Ended (settled or timed out) -> Lobby (mutual rematch)
"""

from typing import Any, Dict, List, Optional, Tuple, Union

from .base import EngineContext, ModeEngine, apply_round_result, swap_id
from ..config.game_settings import MAX_GUESSES
from ..errors import StateError
from ..models.game import DRAW, DuelState, GameMode, GuessRecord, LetterStatus, Room
from ..models.player import Player
from ..services.scoring import score_guess


def steps_to_solve(player: Player, target: Optional[str]) -> Optional[int]:
    """1-based index of the first guess equal to ``target``, or None."""
    if not target:
        return None
    for index, record in enumerate(player.guesses):
        if record.guess == target:
            return index + 1
    return None


def duel_outcome(steps_a: Optional[int], steps_b: Optional[int]) -> Union[int, str]:
    """
    Winner of a settled duel from each side's guesses-to-solve.

    Returns 0 or 1 for the winning side, or DRAW.
    """
    if steps_a is None and steps_b is None:
        return DRAW
    if steps_b is None:
        return 0
    if steps_a is None:
        return 1
    if steps_a < steps_b:
        return 0
    if steps_b < steps_a:
        return 1
    return DRAW


def _side_settled(steps: Optional[int], other: Player) -> bool:
    # the other player can no longer match a solve in ``steps`` guesses
    return steps is not None and (other.done or len(other.guesses) >= steps)


class DuelEngine(ModeEngine):
    mode = GameMode.DUEL
    seats = 2

    def init_state(self, ctx: EngineContext, words: Optional[List[str]] = None) -> DuelState:
        return DuelState()

    def _pair(self, room: Room) -> List[str]:
        return list(room.players)[:2]

    def _steps(self, room: Room) -> Tuple[Optional[int], Optional[int]]:
        a, b = self._pair(room)
        player_a, player_b = room.players[a], room.players[b]
        return steps_to_solve(player_a, player_b.secret), steps_to_solve(player_b, player_a.secret)

    def set_secret(self, room: Room, player_id: str, secret: str, ctx: EngineContext) -> bool:
        """Store a player's secret. Returns True when this starts the round."""
        state: DuelState = room.state
        if state.started:
            raise StateError("Round already in progress")
        if state.round_closed:
            raise StateError("Round is over, request a rematch first")

        player = room.players[player_id]
        player.secret = secret
        player.ready = True

        if self._both_ready(room):
            self._start_round(room, ctx)
            return True
        return False

    def _both_ready(self, room: Room) -> bool:
        players = list(room.players.values())
        return len(players) == 2 and all(
            p.ready and p.secret and not p.disconnected for p in players
        )

    def _start_round(self, room: Room, ctx: EngineContext) -> None:
        room.cancel_round_task()
        room.round_number += 1
        for player in room.players.values():
            player.clear_round()
            player.rematch_requested = False

        room.state = DuelState(
            started=True,
            deadline=ctx.now_ms() + int(ctx.duel_round_seconds * 1000),
        )
        room.round_task = ctx.arm_round_timer(room, ctx.duel_round_seconds)

    def handle_guess(self, room: Room, player_id: str, word: str, ctx: EngineContext) -> Tuple[LetterStatus, ...]:
        state: DuelState = room.state
        if not state.started:
            raise StateError("Game not started")

        player = room.players[player_id]
        if player.done:
            raise StateError("You already finished")

        opponent = room.players.get(room.opponent_of(player_id))
        if opponent is None or not opponent.secret:
            raise StateError("Waiting for opponent")

        pattern = score_guess(opponent.secret, word)
        player.guesses.append(GuessRecord(word, pattern))
        if word == opponent.secret or len(player.guesses) >= MAX_GUESSES:
            player.done = True

        if self._is_settled(room):
            self.close_round(room)
        return pattern

    def _is_settled(self, room: Room) -> bool:
        a, b = self._pair(room)
        player_a, player_b = room.players[a], room.players[b]
        if player_a.done and player_b.done:
            return True
        steps_a, steps_b = self._steps(room)
        return _side_settled(steps_a, player_b) or _side_settled(steps_b, player_a)

    def close_round(self, room: Room) -> bool:
        """
        End the round exactly once: decide the winner, reveal both secrets,
        cancel the deadline and apply stats. Later calls are no-ops.
        """
        state: DuelState = room.state
        if state.round_closed or not state.started:
            return False

        ids = self._pair(room)
        outcome = duel_outcome(*self._steps(room))
        winner = outcome if outcome == DRAW else ids[outcome]

        state.round_closed = True
        state.started = False
        state.winner = winner
        state.reveal = {pid: room.players[pid].secret for pid in ids}
        state.deadline = None
        room.cancel_round_task()

        apply_round_result(room, winner, ids)
        return True

    def handle_timeout(self, room: Room, ctx: EngineContext) -> bool:
        state: DuelState = room.state
        if not state.started or state.round_closed:
            return False
        for player in room.players.values():
            player.done = True
        return self.close_round(room)

    def request_rematch(self, room: Room, player_id: str) -> bool:
        """Flag a rematch request. Returns True when both agreed and the room reset."""
        state: DuelState = room.state
        if state.started:
            raise StateError("Round still in progress")
        if not state.round_closed:
            raise StateError("No finished round to replay")

        room.players[player_id].rematch_requested = True
        players = list(room.players.values())
        if len(players) == 2 and all(p.rematch_requested for p in players):
            self.reset_round(room)
            return True
        return False

    def reset_round(self, room: Room) -> None:
        for player in room.players.values():
            player.clear_round()
            player.ready = False
            player.secret = None
            player.rematch_requested = False
        room.state = DuelState()
        room.cancel_round_task()

    def on_resume(self, room: Room, player_id: str, ctx: EngineContext) -> bool:
        # both secrets may have been set while one side was away
        state: DuelState = room.state
        if state.started or state.round_closed or not self._both_ready(room):
            return False
        self._start_round(room, ctx)
        return True

    def on_player_removed(self, room: Room, player_id: str) -> None:
        state: DuelState = room.state
        if state.started or state.round_closed:
            self.reset_round(room)

    def rekey(self, room: Room, old_id: str, new_id: str) -> None:
        state: DuelState = room.state
        state.winner = swap_id(state.winner, old_id, new_id)
        if state.reveal is not None:
            state.reveal = {swap_id(pid, old_id, new_id): secret for pid, secret in state.reveal.items()}

    def sanitize(self, room: Room) -> Dict[str, Any]:
        state: DuelState = room.state
        return {
            'started': state.started,
            'winner': state.winner,
            'duelReveal': dict(state.reveal) if state.round_closed and state.reveal else None,
            'duelDeadline': state.deadline,
        }
