"""Errors raised when a timer cannot be started.

All of them are recoverable: the engine is left exactly as it was and the
caller shows the message to the user.
"""


class TimerError(ValueError):
    """Base class for rejected start requests."""

    message = "Could not start the timer."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class InvalidDuration(TimerError):
    message = "Please enter a valid duration in minutes."


class InvalidTime(TimerError):
    message = "Please enter a valid time in 24-hour format (HH:MM)"


class TimeInPast(TimerError):
    message = "End time must be in the future."
