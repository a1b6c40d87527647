"""
Game Service

Coordinates every room operation: binds connection ids to players, dispatches
to the room's mode engine, and owns the round deadline and resume-window
timers.
"""

import threading
import time
from typing import Callable, List, Optional, Tuple

from .dictionary import require_valid_word
from .projection import sanitize_room
from .room_registry import RoomRegistry
from ..config.app_config import Config
from ..config.game_settings import MAX_NAME_LENGTH
from ..errors import AuthorizationError, NotFoundError, StateError, ValidationError
from ..models.game import GameMode, LetterStatus, Room
from ..models.player import Player
from ..modes import EngineContext, ModeEngine, engine_for
from ..utils.game_logger import game_logger


class GameService:
    """
    Core game service managing every live room.

    This class handles:
    - Room creation, joining, leaving and resume after reconnect
    - Word validation before any state is touched
    - Dispatch of guesses and host actions to the mode engines
    - Round deadlines and resume-window expiry

    All room mutations run under ``self.lock`` so each event is applied as
    one indivisible step, whichever thread delivered it.
    """

    def __init__(self,
                 registry: RoomRegistry,
                 dictionary,
                 scheduler,
                 config=Config,
                 clock: Optional[Callable[[], float]] = None,
                 broadcaster: Optional[Callable[[str, dict], None]] = None):
        self.registry = registry
        self.dictionary = dictionary
        self.scheduler = scheduler
        self.resume_grace_seconds = config.RESUME_GRACE_SECONDS
        self.lock = threading.RLock()
        self._clock = clock or time.time
        # receives (room_id, roomState payload)
        self.broadcaster = broadcaster
        self.shared_queue_size = config.SHARED_QUEUE_SIZE
        self.shared_queue_refill = config.SHARED_QUEUE_REFILL
        self.ctx = EngineContext(
            now_ms=self._now_ms,
            arm_round_timer=self._arm_round_timer,
            duel_round_seconds=config.DUEL_ROUND_SECONDS,
        )

    # ------------------------------------------------------------------
    # helpers

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _arm_round_timer(self, room: Room, seconds: float):
        return self.scheduler.schedule(seconds, self.fire_round_timeout, room.id, room.round_number)

    @staticmethod
    def _clean_name(name) -> str:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Name is required")
        return name.strip()[:MAX_NAME_LENGTH]

    @staticmethod
    def _engine(room: Room) -> ModeEngine:
        return engine_for(room.mode)

    @staticmethod
    def _require_player(room: Room, connection_id: str) -> Player:
        player = room.players.get(connection_id)
        if player is None:
            raise AuthorizationError("Not in room")
        return player

    @staticmethod
    def _require_mode(room: Room, mode: GameMode) -> None:
        if room.mode is not mode:
            raise StateError("Wrong mode")

    def _log_round_end(self, room: Room, connection_id: Optional[str], reason: str) -> None:
        game_logger.log_game_event(
            room.id, 'round_ended', connection_id,
            mode=room.mode.value, round=room.round_number,
            winner=room.state.winner, reason=reason,
        )

    def _draw_words(self, count: int) -> List[str]:
        """Random secrets for a shared queue. Call without holding the lock."""
        try:
            return self.dictionary.random_words(count)
        except StateError as e:
            game_logger.log_error(None, e, 'draw_shared_secrets')
            return []

    def _log_round_start(self, room: Room, connection_id: str) -> None:
        game_logger.log_game_event(
            room.id, 'round_started', connection_id,
            mode=room.mode.value, round=room.round_number, deadline=room.state.deadline,
        )

    def room_count(self) -> int:
        with self.lock:
            return len(self.registry)

    def publish(self, room: Room) -> None:
        """Send the current roomState to every member, unless the room is gone."""
        if self.broadcaster is None:
            return
        with self.lock:
            if self.registry.find_room(room.id) is not room:
                return
            payload = sanitize_room(room)
        self.broadcaster(room.id, payload)

    # ------------------------------------------------------------------
    # membership

    def create_room(self, connection_id: str, name, mode=None) -> Room:
        name = self._clean_name(name)
        try:
            game_mode = GameMode.parse(mode or GameMode.DUEL.value)
        except ValueError:
            raise ValidationError("Invalid mode")

        words = self._draw_words(self.shared_queue_size) if game_mode is GameMode.SHARED else None
        with self.lock:
            state = engine_for(game_mode).init_state(self.ctx, words)
            room = self.registry.create_room(game_mode, connection_id, name, state)

        game_logger.log_game_event(room.id, 'room_created', connection_id, mode=game_mode.value)
        return room

    def join_room(self, connection_id: str, name, room_id) -> Room:
        name = self._clean_name(name)
        with self.lock:
            room = self.registry.get_room(room_id)
            if connection_id in room.players:
                # duplicate delivery of the same join
                return room
            self._engine(room).check_join(room)
            room.players[connection_id] = Player(name=name)

        game_logger.log_game_event(room.id, 'player_joined', connection_id, players=len(room.players))
        return room

    def resume(self, connection_id: str, room_id, old_id) -> Room:
        """
        Move the record stored under ``old_id`` to ``connection_id``.

        The caller's claim to ``old_id`` is trusted. Every field of the record
        is kept, and every mode-state reference to the old id is rewritten in
        the same step.
        """
        if not isinstance(old_id, str) or not old_id:
            raise ValidationError("Previous connection id is required")

        with self.lock:
            room = self.registry.get_room(room_id)

            if old_id == connection_id:
                player = room.players.get(connection_id)
                if player is None:
                    raise NotFoundError("Player not found")
            elif old_id not in room.players:
                if connection_id in room.players:
                    # already resumed by an earlier delivery
                    return room
                raise NotFoundError("Player not found")
            elif connection_id in room.players:
                raise StateError("Already in room")
            else:
                player = room.players[old_id]
                room.rekey_player(old_id, connection_id)
                self._engine(room).rekey(room, old_id, connection_id)

            player.disconnected = False
            self._cancel_purge(room, connection_id)
            started = self._engine(room).on_resume(room, connection_id, self.ctx)

        game_logger.log_game_event(room.id, 'player_resumed', connection_id, previous_id=old_id)
        if started:
            self._log_round_start(room, connection_id)
        return room

    def leave_room(self, connection_id: str, room_id) -> Optional[Room]:
        """Remove the caller right away. Returns the room, or None if it was deleted."""
        with self.lock:
            room = self.registry.get_room(room_id)
            self._require_player(room, connection_id)
            return room if self._remove_player(room, connection_id) else None

    def disconnect(self, connection_id: str) -> List[Room]:
        """
        Handle a closed connection in every room that holds it.

        Within a resume window the player is only marked disconnected; with
        no window the record is removed at once. Returns the rooms that still
        exist and changed. Repeated calls for the same id change nothing.
        """
        changed: List[Room] = []
        with self.lock:
            for room in self.registry.rooms_with_player(connection_id):
                player = room.players[connection_id]
                if player.disconnected:
                    continue

                if self.resume_grace_seconds <= 0:
                    if self._remove_player(room, connection_id):
                        changed.append(room)
                    continue

                player.disconnected = True
                self._engine(room).on_disconnect(room, connection_id)
                room.purge_tasks[connection_id] = self.scheduler.schedule(
                    self.resume_grace_seconds, self.expire_player, room.id, connection_id
                )
                game_logger.log_game_event(
                    room.id, 'player_disconnected', connection_id,
                    grace_seconds=self.resume_grace_seconds,
                )
                changed.append(room)
        return changed

    def expire_player(self, room_id: str, player_id: str) -> None:
        """Resume window elapsed: drop the record if it is still disconnected."""
        with self.lock:
            room = self.registry.find_room(room_id)
            if room is None:
                return
            player = room.players.get(player_id)
            if player is None or not player.disconnected:
                return
            room.purge_tasks.pop(player_id, None)
            still_open = self._remove_player(room, player_id)

        if still_open:
            self.publish(room)

    def _cancel_purge(self, room: Room, player_id: str) -> None:
        task = room.purge_tasks.pop(player_id, None)
        if task is not None:
            task.cancel()

    def _remove_player(self, room: Room, player_id: str) -> bool:
        """Delete one record and clean up after it. Returns False if the room went away."""
        self._cancel_purge(room, player_id)
        del room.players[player_id]

        if not room.players:
            self.registry.delete_room(room.id)
            game_logger.log_game_event(room.id, 'room_deleted', player_id)
            return False

        if room.host_id == player_id:
            room.host_id = self._engine(room).next_host(room)
            game_logger.log_game_event(room.id, 'host_changed', room.host_id, previous_host=player_id)

        self._engine(room).on_player_removed(room, player_id)
        game_logger.log_game_event(room.id, 'player_removed', player_id, players=len(room.players))
        return True

    # ------------------------------------------------------------------
    # gameplay

    def make_guess(self, connection_id: str, room_id, guess) -> Tuple[Room, Tuple[LetterStatus, ...]]:
        self.registry.get_room(room_id)
        word = require_valid_word(self.dictionary, guess)

        with self.lock:
            room = self.registry.get_room(room_id)
            self._require_player(room, connection_id)
            was_closed = room.state.round_closed
            pattern = self._engine(room).handle_guess(room, connection_id, word, self.ctx)
            ended = room.state.round_closed and not was_closed

        if ended:
            self._log_round_end(room, connection_id, 'guess')
        return room, pattern

    def set_secret(self, connection_id: str, room_id, secret) -> Room:
        """Duel: store the caller's secret. The round starts once both are set."""
        self.registry.get_room(room_id)
        word = require_valid_word(self.dictionary, secret, label="Secret")

        with self.lock:
            room = self.registry.get_room(room_id)
            self._require_mode(room, GameMode.DUEL)
            self._require_player(room, connection_id)
            started = self._engine(room).set_secret(room, connection_id, word, self.ctx)

        if started:
            self._log_round_start(room, connection_id)
        return room

    def duel_play_again(self, connection_id: str, room_id) -> Room:
        """
        Duel: register a rematch request. Shared: clear the finished board,
        which is how shared-mode clients ask for the next round.
        """
        with self.lock:
            room = self.registry.get_room(room_id)
            if room.mode is GameMode.SHARED:
                self._require_player(room, connection_id)
                reset = self._engine(room).play_again(room, connection_id)
            else:
                self._require_mode(room, GameMode.DUEL)
                self._require_player(room, connection_id)
                reset = self._engine(room).request_rematch(room, connection_id)

        if reset:
            game_logger.log_game_event(room.id, 'round_reset', connection_id, mode=room.mode.value)
        return room

    def set_host_word(self, connection_id: str, room_id, secret) -> Room:
        self.registry.get_room(room_id)
        word = require_valid_word(self.dictionary, secret, label="Secret")

        with self.lock:
            room = self.registry.get_room(room_id)
            self._require_mode(room, GameMode.BATTLE)
            self._require_player(room, connection_id)
            self._engine(room).set_host_word(room, connection_id, word)
        return room

    def start_battle(self, connection_id: str, room_id) -> Room:
        with self.lock:
            room = self.registry.get_room(room_id)
            self._require_mode(room, GameMode.BATTLE)
            self._require_player(room, connection_id)
            self._engine(room).start_battle(room, connection_id)

        game_logger.log_game_event(
            room.id, 'round_started', connection_id,
            mode=room.mode.value, round=room.round_number, players=len(room.non_host_ids()),
        )
        return room

    def play_again(self, connection_id: str, room_id, keep_word: bool = False) -> Room:
        with self.lock:
            room = self.registry.get_room(room_id)
            self._require_mode(room, GameMode.BATTLE)
            self._require_player(room, connection_id)
            self._engine(room).play_again(room, connection_id, keep_word=bool(keep_word))

        game_logger.log_game_event(room.id, 'round_reset', connection_id, keep_word=bool(keep_word))
        return room

    def start_shared(self, connection_id: str, room_id) -> Room:
        with self.lock:
            room = self.registry.get_room(room_id)
            self._require_mode(room, GameMode.SHARED)
            needs_refill = not room.state.queue

        # drawn outside the lock; the queue is checked again once it is held
        refill = self._draw_words(self.shared_queue_refill) if needs_refill else None

        with self.lock:
            room = self.registry.get_room(room_id)
            self._require_player(room, connection_id)
            self._engine(room).start_round(room, connection_id, self.ctx, refill=refill)
        return room

    # ------------------------------------------------------------------
    # timers

    def fire_round_timeout(self, room_id: str, round_number: int) -> bool:
        """Deadline callback. Ignored when the room is gone or the round moved on."""
        with self.lock:
            room = self.registry.find_room(room_id)
            if room is None or room.round_number != round_number:
                return False
            closed = self._engine(room).handle_timeout(room, self.ctx)

        if closed:
            self._log_round_end(room, None, 'timeout')
            self.publish(room)
        return closed
