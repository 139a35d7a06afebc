"""
Custom exceptions for the process tracker.

Components raise these; the command layer catches them, logs them and
surfaces them as notifications. None of them is fatal to the host.
"""


class TrackerError(Exception):
    """Base exception for all process tracker errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StorageIOError(TrackerError):
    """Raised when a storage backend file operation fails."""

    def __init__(self, operation: str, path: str | None = None, cause: Exception | None = None):
        details = {"operation": operation}
        if path:
            details["path"] = path
        if cause:
            details["cause"] = str(cause)
        message = f"Storage I/O error during {operation}"
        if path:
            message += f": {path}"
        if cause:
            message += f" ({cause})"
        super().__init__(message, details)
        self.operation = operation
        self.path = path
        self.cause = cause


class PersistenceWriteError(TrackerError):
    """Raised when a durable append or clear fails."""

    def __init__(self, operation: str, cause: Exception | None = None):
        details = {"operation": operation}
        message = f"Failed to persist entries during {operation}"
        if cause:
            details["cause"] = str(cause)
            message += f": {cause}"
        super().__init__(message, details)
        self.operation = operation
        self.cause = cause


class PersistenceReadError(TrackerError):
    """Raised when the durable entry sequence cannot be loaded."""

    def __init__(self, key: str, cause: Exception | None = None):
        details = {"key": key}
        if cause:
            details["cause"] = str(cause)
        super().__init__(f"Failed to load persisted entries: {key}", details)
        self.key = key
        self.cause = cause


class NoSinkAvailableError(TrackerError):
    """Raised when no export target can be resolved."""

    def __init__(self, reason: str):
        super().__init__(f"No export target available: {reason}", {"reason": reason})
        self.reason = reason


class SinkWriteError(TrackerError):
    """Raised when writing the export artifact fails."""

    def __init__(self, path: str, cause: Exception | None = None):
        details = {"path": path}
        if cause:
            details["cause"] = str(cause)
        super().__init__(f"Failed to write export: {path}", details)
        self.path = path
        self.cause = cause
