"""
WordlePlus Game Server - Main Entry Point

This is the main entry point for the game server.
It builds the Flask-SocketIO application and starts serving.
"""

import os

from wordleplus import create_app
from wordleplus.config import config
from wordleplus.utils.game_logger import game_logger


def main():
    """Main function to create the application and start the server."""
    config_class = config.get(os.getenv('FLASK_ENV', 'default'), config['default'])

    try:
        print("Creating Flask application...")
        app, socketio = create_app(config_class)
        dictionary = app.game_service.dictionary
        print("✓ Flask application created successfully")
        print(f"✓ Dictionary: {type(dictionary).__name__}"
              + (f" ({len(dictionary)} words)" if hasattr(dictionary, '__len__') else ""))

        game_logger.logger.info("WordlePlus Server Starting")

        print(f"\nStarting WordlePlus Game Server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print(f"Resume window: {config_class.RESUME_GRACE_SECONDS}s, duel round: {config_class.DUEL_ROUND_SECONDS}s")
        print("=" * 50)

        socketio.run(
            app, host=config_class.HOST, port=config_class.PORT,
            debug=config_class.DEBUG, allow_unsafe_werkzeug=True,
        )

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("WordlePlus Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
