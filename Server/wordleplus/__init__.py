"""
WordlePlus Game Server Application Package

Real-time multiplayer Wordle server: duel, battle and shared rooms over
socket.io, plus a small HTTP word service.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config, dictionary=None, scheduler=None, clock=None):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use
        dictionary: Word dictionary override (defaults to build_dictionary(config_class))
        scheduler: Timer scheduler override (defaults to a socket.io background-task scheduler)
        clock: Wall clock override in seconds, used for duel deadlines

    Returns:
        Tuple of (Flask app, SocketIO) with the game service attached as app.game_service
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    origins = config_class.CORS_ORIGINS
    cors_origins = '*' if '*' in origins else origins
    CORS(app, origins=cors_origins)
    socketio = SocketIO(app, cors_allowed_origins=cors_origins, logger=False, engineio_logger=False)

    # Build services
    from .services.dictionary import build_dictionary
    from .services.game_service import GameService
    from .services.room_registry import RoomRegistry
    from .services.scheduler import TaskScheduler
    from .websocket.broadcast import RoomBroadcaster

    game_service = GameService(
        RoomRegistry(code_length=config_class.ROOM_CODE_LENGTH),
        dictionary if dictionary is not None else build_dictionary(config_class),
        scheduler if scheduler is not None else TaskScheduler(socketio),
        config=config_class,
        clock=clock,
        broadcaster=RoomBroadcaster(socketio),
    )

    # Register blueprints
    from .controllers.dictionary_controller import dictionary_bp
    app.register_blueprint(dictionary_bp)

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio, game_service)

    # Store instances for use in controllers and the entry point
    app.socketio = socketio
    app.game_service = game_service

    return app, socketio
