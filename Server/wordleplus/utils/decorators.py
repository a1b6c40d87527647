"""
Socket Event Decorators

Wraps socket.io event handlers so every event is logged and answered with an
acknowledgment, whatever happens inside the handler.
"""

from functools import wraps
from flask import request

from ..errors import GameError, ValidationError
from .game_logger import game_logger


def socket_ack(action):
    """
    Turn a handler's return value or GameError into the event's ack payload.

    The handler receives the payload dict. A GameError becomes
    ``{"error": message}``; anything unexpected is logged and answered with
    a generic error so the connection stays usable.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(data=None, *args):
            connection_id = request.sid
            room_id = data.get('roomId') if isinstance(data, dict) else None
            game_logger.log_user_action(
                connection_id, action, room_id=room_id,
                payload=data if isinstance(data, dict) else None,
            )

            try:
                if not isinstance(data, dict):
                    raise ValidationError("Invalid payload")
                response = f(data)
            except GameError as e:
                response = e.to_ack()
            except Exception as e:
                game_logger.log_error(connection_id, e, action, room_id)
                response = {'error': 'Internal server error'}

            game_logger.log_server_response(
                connection_id, action, 'error' not in response, response, room_id
            )
            return response

        return decorated_function
    return decorator
