"""
Game Logger Module for the WordlePlus Server

This module provides structured logging for client events, server
acknowledgments, and room/round events.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from ..config.app_config import Config

# Payload keys whose values must never reach the log files
_SECRET_KEYS = ('secret', 'guess', 'word', 'reveal', 'lastRevealedWord')


class GameLogger:
    """
    Centralized logging system for the game server.

    Features:
    - Client event tracking keyed by connection id
    - Acknowledgment logging with secrets masked
    - Room and round lifecycle events
    - JSON structured logs for easy parsing
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)

        # Setup main game logger
        self.logger = self._setup_logger()

    def _log_file(self) -> Path:
        return self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    def _setup_logger(self) -> logging.Logger:
        """Setup the main game logger with file handler."""
        logger = logging.getLogger('wordleplus')
        logger.setLevel(self.level)

        # Prevent duplicate handlers
        if logger.handlers:
            logger.handlers.clear()

        # File handler for detailed logs
        file_handler = logging.FileHandler(self._log_file(), encoding='utf-8')
        file_handler.setLevel(self.level)

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)

        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        return logger

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          connection_id: Optional[str],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': connection_id or 'system',
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_user_action(self,
                        connection_id: Optional[str],
                        action: str,
                        room_id: Optional[str] = None,
                        payload: Optional[Dict[str, Any]] = None,
                        **kwargs):
        """
        Log an inbound client event.

        Args:
            connection_id: Socket connection id of the caller
            action: Event name (e.g. 'createRoom', 'makeGuess')
            room_id: Room code if applicable
            payload: Event payload as received (secrets are masked)
            **kwargs: Additional details to log
        """
        details = {'room_id': room_id, **kwargs}
        if payload is not None:
            details['payload'] = self._sanitize_response_data(payload)
        self.logger.info(self._create_log_entry('USER_ACTION', action, connection_id, details))

    def log_server_response(self,
                            connection_id: Optional[str],
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            room_id: Optional[str] = None,
                            **kwargs):
        """
        Log the acknowledgment sent back for a client event.

        Args:
            connection_id: Socket connection id of the caller
            action: Event that was handled
            success: Whether the action succeeded
            response_data: Acknowledgment payload
            room_id: Room code if applicable
            **kwargs: Additional details to log
        """
        details = {
            'room_id': room_id,
            'success': success,
            'response_data': self._sanitize_response_data(response_data),
            **kwargs
        }

        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, connection_id, details)

        if success:
            self.logger.info(log_message)
        else:
            self.logger.warning(log_message)

    def log_game_event(self,
                       room_id: Optional[str],
                       event: str,
                       connection_id: Optional[str] = None,
                       **kwargs):
        """
        Log room and round events (round start/end, host change, room deletion).

        Args:
            room_id: Room code
            event: Type of event (e.g. 'round_started', 'round_ended', 'room_deleted')
            connection_id: Player the event concerns, if any
            **kwargs: Additional details
        """
        details = {'room_id': room_id, **kwargs}
        self.logger.info(self._create_log_entry('GAME_EVENT', event, connection_id, details))

    def log_error(self,
                  connection_id: Optional[str],
                  error: Exception,
                  action: str,
                  room_id: Optional[str] = None):
        """Log an unexpected exception raised while handling an event."""
        details = {
            'room_id': room_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
        }
        self.logger.error(self._create_log_entry('ERROR', action, connection_id, details))

    def _sanitize_response_data(self, data: Any) -> Any:
        """Mask words and secrets in logged payloads."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = {}
        for key, value in data.items():
            if key in _SECRET_KEYS and value is not None:
                sanitized[key] = '***'
            elif key == 'pattern' and isinstance(value, (list, tuple)):
                sanitized[key] = f"<{len(value)} marks>"
            else:
                sanitized[key] = value
        return sanitized

    def get_log_stats(self) -> Dict[str, Any]:
        """Get statistics about logged events (useful for monitoring)."""
        log_file = self._log_file()
        if not log_file.exists():
            return {'error': 'No log file found for today'}

        stats = {
            'log_file': str(log_file),
            'file_size_mb': round(log_file.stat().st_size / (1024 * 1024), 2),
            'total_entries': 0,
            'user_actions': 0,
            'server_responses': 0,
            'game_events': 0,
            'errors': 0
        }

        with open(log_file, 'r', encoding='utf-8') as f:
            for line in f:
                if not line.strip():
                    continue
                stats['total_entries'] += 1
                if 'USER_ACTION' in line:
                    stats['user_actions'] += 1
                elif 'SERVER_RESPONSE' in line:
                    stats['server_responses'] += 1
                elif 'GAME_EVENT' in line:
                    stats['game_events'] += 1
                elif '"ERROR"' in line:
                    stats['errors'] += 1

        return stats


# Global logger instance
game_logger = GameLogger(Config.LOG_DIR, Config.LOG_LEVEL)
