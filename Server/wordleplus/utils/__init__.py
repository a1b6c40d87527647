"""
Utilities Package

Contains the game logger and socket event decorators.
"""

from .decorators import socket_ack
from .game_logger import game_logger, GameLogger
