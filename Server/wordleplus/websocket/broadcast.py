"""
Room Broadcaster

Pushes the sanitized room snapshot to every socket in a room.
"""


class RoomBroadcaster:
    """Callable handed to the GameService as its broadcaster."""

    event = 'roomState'

    def __init__(self, socketio):
        self.socketio = socketio

    def __call__(self, room_id: str, payload: dict) -> None:
        self.socketio.emit(self.event, payload, to=room_id)
