"""
WebSocket Event Handlers

Handles every socket.io event of the game protocol. Each event is answered
through its acknowledgment callback, and every successful mutation is
followed by a ``roomState`` broadcast to the room.
"""

from flask import request
from flask_socketio import join_room, leave_room

from ..services.room_registry import normalize_room_id
from ..utils.decorators import socket_ack
from ..utils.game_logger import game_logger


def register_websocket_handlers(socketio, game_service):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect(auth=None):
        game_logger.log_user_action(request.sid, 'connect')

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        """Mark the connection's players disconnected and tell their rooms."""
        connection_id = request.sid
        try:
            for room in game_service.disconnect(connection_id):
                game_service.publish(room)
        except Exception as e:
            game_logger.log_error(connection_id, e, 'disconnect')

    @socketio.on('createRoom')
    @socket_ack('createRoom')
    def handle_create_room(data):
        room = game_service.create_room(request.sid, data.get('name'), data.get('mode'))
        join_room(room.id)
        game_service.publish(room)
        return {'roomId': room.id}

    @socketio.on('joinRoom')
    @socket_ack('joinRoom')
    def handle_join_room(data):
        room = game_service.join_room(request.sid, data.get('name'), data.get('roomId'))
        join_room(room.id)
        game_service.publish(room)
        return {'ok': True}

    @socketio.on('resume')
    @socket_ack('resume')
    def handle_resume(data):
        room = game_service.resume(request.sid, data.get('roomId'), data.get('oldId'))
        join_room(room.id)
        game_service.publish(room)
        return {'ok': True}

    @socketio.on('leaveRoom')
    @socket_ack('leaveRoom')
    def handle_leave_room(data):
        room_id = normalize_room_id(data.get('roomId'))
        room = game_service.leave_room(request.sid, room_id)
        leave_room(room_id)
        if room is not None:
            game_service.publish(room)
        return {'ok': True}

    @socketio.on('setSecret')
    @socket_ack('setSecret')
    def handle_set_secret(data):
        room = game_service.set_secret(request.sid, data.get('roomId'), data.get('secret'))
        game_service.publish(room)
        return {'ok': True}

    @socketio.on('makeGuess')
    @socket_ack('makeGuess')
    def handle_make_guess(data):
        room, pattern = game_service.make_guess(request.sid, data.get('roomId'), data.get('guess'))
        game_service.publish(room)
        return {'ok': True, 'pattern': [status.value for status in pattern]}

    @socketio.on('duelPlayAgain')
    @socket_ack('duelPlayAgain')
    def handle_duel_play_again(data):
        room = game_service.duel_play_again(request.sid, data.get('roomId'))
        game_service.publish(room)
        return {'ok': True}

    @socketio.on('setHostWord')
    @socket_ack('setHostWord')
    def handle_set_host_word(data):
        room = game_service.set_host_word(request.sid, data.get('roomId'), data.get('secret'))
        game_service.publish(room)
        return {'ok': True}

    @socketio.on('startBattle')
    @socket_ack('startBattle')
    def handle_start_battle(data):
        room = game_service.start_battle(request.sid, data.get('roomId'))
        game_service.publish(room)
        return {'ok': True}

    @socketio.on('playAgain')
    @socket_ack('playAgain')
    def handle_play_again(data):
        room = game_service.play_again(request.sid, data.get('roomId'), data.get('keepWord', False))
        game_service.publish(room)
        return {'ok': True}

    @socketio.on('startShared')
    @socket_ack('startShared')
    def handle_start_shared(data):
        room = game_service.start_shared(request.sid, data.get('roomId'))
        game_service.publish(room)
        return {'ok': True}
