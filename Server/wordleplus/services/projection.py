"""
Room Projection

Builds the ``roomState`` payload broadcast to every member of a room.
Secrets never appear here until the mode's round has ended.
"""

from typing import Any, Dict

from ..models.game import Room
from ..modes import engine_for


def sanitize_room(room: Room) -> Dict[str, Any]:
    """Public snapshot of a room: ids, per-player progress, and the mode's public sub-state."""
    snapshot = {
        'id': room.id,
        'mode': room.mode.value,
        'hostId': room.host_id,
        'players': {pid: player.public_view() for pid, player in room.players.items()},
    }
    snapshot.update(engine_for(room.mode).sanitize(room))
    return snapshot
