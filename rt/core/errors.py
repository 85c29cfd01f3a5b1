"""Exception taxonomy for the rental timer core.

Only ValidationError is meant to reach the operator; the rest are logged and
absorbed by whoever triggered the side effect.
"""


class RentalTimerError(Exception):
    """Base class for every error raised by ``rt``."""


class ValidationError(RentalTimerError):
    """User input (rate, fixed duration) blocks the requested transition."""


class InvalidTransition(RentalTimerError):
    """Start while running, or stop while idle."""


class PersistenceWriteFailure(RentalTimerError):
    """A snapshot could not be written.  In-memory state stays authoritative."""

    def __init__(self, key, cause=None):
        self.key = key
        self.cause = cause
        super().__init__(f"Failed to persist '{key}': {cause}")


class AlertDispatchFailure(RentalTimerError):
    """A sound cue or expiry notification could not be delivered."""
