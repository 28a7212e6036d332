"""Errors raised by the session logger."""


class LoggerError(Exception):
    """Base class for logger errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message: str = message


class DirectoryCreationError(LoggerError):
    """The log directory could not be created."""


class FileOpenError(LoggerError):
    """The log file could not be opened for append."""


class SourceLineReadError(LoggerError):
    """A stack frame's source line could not be read back from disk."""
