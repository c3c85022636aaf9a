"""
Custom exceptions for the laundry counter.

Exception Hierarchy:
    LaundryCounterError (base)
    ├── ConfigurationError     - Invalid or missing configuration (startup / factory)
    ├── UnknownItemError       - Predefined item name not in the catalog
    ├── InvalidItemNameError   - Custom item name empty after trimming
    ├── InvalidChannelError    - Submission channel outside the closed set
    ├── DatabaseNotReadyError  - Analytics database used before initialize()
    ├── RecordingError         - Submission could not be persisted
    └── WorkflowBusyError      - Action attempted while another one is pending

Usage:
    Image generation and webhook uploads report expected failures through
    result objects (see models.results). Exceptions are reserved for
    programming and configuration errors, and for the recorder, whose
    callers catch and log them.
"""

from typing import Optional, Dict, Any


class LaundryCounterError(Exception):
    """
    Base exception for all laundry counter errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(LaundryCounterError):
    """
    A service could not be built from the supplied configuration.

    Raised by the service factories, e.g. for an unknown upload backend.
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        details = {"setting": setting} if setting else None
        super().__init__(message, details)
        self.setting = setting


class UnknownItemError(LaundryCounterError, KeyError):
    """Predefined item name does not exist in the initialized counts."""

    def __init__(self, name: str):
        super().__init__(f"Unknown item: {name}", {"name": name})
        self.name = name

    # KeyError.__str__ would repr() the message
    def __str__(self) -> str:
        return self.message


class InvalidItemNameError(LaundryCounterError, ValueError):
    """Custom item name is empty once surrounding whitespace is removed."""

    def __init__(self, name: str):
        super().__init__("Item name must not be empty", {"name": name})
        self.name = name


class InvalidChannelError(LaundryCounterError, ValueError):
    """Submission channel is not one of the known delivery channels."""

    def __init__(self, channel: str, valid_channels: list):
        message = f"Invalid channel. Must be one of: {', '.join(valid_channels)}"
        super().__init__(message, {"channel": channel})
        self.channel = channel
        self.valid_channels = valid_channels


class DatabaseNotReadyError(LaundryCounterError):
    """Analytics database was used before initialize() or after close()."""

    def __init__(self, message: str = "Analytics database is not initialized"):
        super().__init__(message, {"resolution": "Call initialize() before use"})


class RecordingError(LaundryCounterError):
    """
    A submission could not be written to the analytics log.

    The orchestration layer catches this and logs it; recording never
    aborts a download or send.
    """

    def __init__(self, message: str, channel: Optional[str] = None):
        details = {"channel": channel} if channel else None
        super().__init__(message, details)
        self.channel = channel


class WorkflowBusyError(LaundryCounterError):
    """An action was requested while the workflow was not idle."""

    def __init__(self, state: str, action: str):
        message = f"Cannot {action} while {state}"
        super().__init__(message, {"state": state, "action": action})
        self.state = state
        self.action = action
