"""
Room Registry

Owns the mapping of room code -> Room. One instance is created per
application and handed to the GameService.
"""

import random
import string
from typing import Dict, List, Optional

from ..errors import NotFoundError
from ..models.game import GameMode, ModeState, Room
from ..models.player import Player

CODE_ALPHABET = string.ascii_uppercase + string.digits


def normalize_room_id(room_id) -> str:
    if not isinstance(room_id, str):
        return ""
    return room_id.strip().upper()


class RoomRegistry:
    """In-memory room table. Not thread-safe on its own; GameService serializes access."""

    def __init__(self, code_length: int = 6, rng: Optional[random.Random] = None):
        self.code_length = code_length
        self._rng = rng or random.Random()
        self.rooms: Dict[str, Room] = {}

    def __len__(self) -> int:
        return len(self.rooms)

    def __contains__(self, room_id) -> bool:
        return normalize_room_id(room_id) in self.rooms

    def generate_code(self) -> str:
        """Random room code not currently in use."""
        while True:
            code = ''.join(self._rng.choice(CODE_ALPHABET) for _ in range(self.code_length))
            if code not in self.rooms:
                return code

    def create_room(self, mode: GameMode, host_id: str, host_name: str, state: ModeState) -> Room:
        room = Room(id=self.generate_code(), mode=mode, host_id=host_id, state=state)
        room.players[host_id] = Player(name=host_name)
        self.rooms[room.id] = room
        return room

    def find_room(self, room_id) -> Optional[Room]:
        return self.rooms.get(normalize_room_id(room_id))

    def get_room(self, room_id) -> Room:
        room = self.find_room(room_id)
        if room is None:
            raise NotFoundError("Room not found")
        return room

    def delete_room(self, room_id) -> bool:
        room = self.rooms.pop(normalize_room_id(room_id), None)
        if room is None:
            return False
        room.cancel_round_task()
        for task in room.purge_tasks.values():
            task.cancel()
        room.purge_tasks.clear()
        return True

    def rooms_with_player(self, player_id: str) -> List[Room]:
        return [room for room in self.rooms.values() if player_id in room.players]
