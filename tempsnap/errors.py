"""Top-level exception types."""


class TempSnapError(Exception):
    """Base exception for TempSnap failures."""


class SessionStateError(TempSnapError):
    """Raised when a capture session transition is not allowed in the current state."""
