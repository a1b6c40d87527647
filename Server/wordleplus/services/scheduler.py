"""
Task Scheduler

Delayed callbacks for round deadlines and resume-window expiry, run as
Flask-SocketIO background tasks so they work under every async mode.
"""

from typing import Any, Callable

from ..utils.game_logger import game_logger


class ScheduledTask:
    """Handle for a pending callback. Cancelling after it fired is harmless."""

    def __init__(self, delay: float):
        self.delay = delay
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class TaskScheduler:
    """Runs ``callback(*args)`` after ``delay`` seconds unless cancelled first."""

    def __init__(self, socketio):
        self.socketio = socketio

    def schedule(self, delay: float, callback: Callable[..., Any], *args) -> ScheduledTask:
        task = ScheduledTask(delay)

        def _worker():
            self.socketio.sleep(delay)
            if task.cancelled:
                return
            task.fired = True
            try:
                callback(*args)
            except Exception as e:
                game_logger.log_error(None, e, 'scheduled_task')

        self.socketio.start_background_task(_worker)
        return task
