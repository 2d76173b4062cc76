"""
Custom exceptions for the in-memory database.
"""


class StoreError(Exception):
    """Base exception for all store-related errors."""
    pass


class CommandError(StoreError):
    """Exception raised when a command line cannot be executed."""

    def __init__(self, message: str, line: str = "") -> None:
        super().__init__(message)
        self.line = line


class UnknownCommandError(CommandError):
    """Exception raised for a command name outside the vocabulary."""
    pass


class InvalidArgumentsError(CommandError):
    """Exception raised when a command is missing required arguments."""
    pass
