"""
Game Error Hierarchy

Every failure a client can cause is one of these. They are raised by the
services and mode engines and converted into ``{"error": message}``
acknowledgments by the WebSocket layer; a failed operation never leaves a
room half-mutated and is never broadcast.

Exception Hierarchy:
    GameError (base)
    ├── ValidationError     malformed or non-dictionary word, bad payload
    ├── StateError          operation invalid for the current phase
    ├── AuthorizationError  non-host invoking a host action, acting outside one's seat
    ├── NotFoundError       room or player absent
    └── CapacityError       room full for its mode
"""


class GameError(Exception):
    """Base class for recoverable, client-caused game errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_ack(self) -> dict:
        return {'error': self.message}


class ValidationError(GameError):
    pass


class StateError(GameError):
    pass


class AuthorizationError(GameError):
    pass


class NotFoundError(GameError):
    pass


class CapacityError(GameError):
    pass
