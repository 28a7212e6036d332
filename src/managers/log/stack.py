"""
Exception capture helpers

Turn a caught exception into an ExceptionRecord (identifier, message and
frames) and read back the source line each frame points at.
"""

import logging
import traceback
from dataclasses import dataclass, field
from itertools import islice
from pathlib import PurePath
from typing import List

from .errors import SourceLineReadError

logger = logging.getLogger(__name__)

SOURCE_UNAVAILABLE = "<source unavailable>"


@dataclass
class StackFrame:
    name: str
    file: str
    line: int


@dataclass
class ExceptionRecord:
    """A caught error together with the frames it travelled through."""

    identifier: str
    message: str
    frames: List[StackFrame] = field(default_factory=list)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ExceptionRecord":
        """Build a record from a Python exception.

        Frames keep the order of the traceback, outermost call first.
        """
        identifier = getattr(exc, "identifier", None)
        if not isinstance(identifier, str) or not identifier:
            exc_type = type(exc)
            if exc_type.__module__ == "builtins":
                identifier = exc_type.__qualname__
            else:
                identifier = f"{exc_type.__module__}.{exc_type.__qualname__}"

        frames = [
            StackFrame(name=summary.name, file=summary.filename, line=summary.lineno or 0)
            for summary in traceback.extract_tb(exc.__traceback__)
        ]
        return cls(identifier=identifier, message=str(exc), frames=frames)


def relative_source_path(file_path: str, marker: str) -> str:
    """Strip everything up to and including the last `marker` segment.

    Falls back to the path unchanged when the marker is missing or is the
    final segment.
    """
    if not marker:
        return file_path
    parts = PurePath(file_path).parts
    for idx in range(len(parts) - 1, -1, -1):
        if parts[idx] == marker:
            tail = parts[idx + 1:]
            if not tail:
                break
            return str(PurePath(*tail))
    return file_path


def read_source_line(file_path: str, line_number: int) -> str:
    """Read one line of a source file from disk, stripped of surrounding whitespace.

    Raises:
        SourceLineReadError: if the file cannot be read or has no such line.
    """
    if line_number < 1:
        raise SourceLineReadError(f"Invalid line number {line_number} for {file_path}")
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            text = next(islice(f, line_number - 1, None), None)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise SourceLineReadError(f"Could not read {file_path}: {e}") from e
    if text is None:
        raise SourceLineReadError(f"{file_path} has no line {line_number}")
    return text.strip()


def source_line_or_placeholder(file_path: str, line_number: int) -> str:
    try:
        return read_source_line(file_path, line_number)
    except SourceLineReadError as e:
        logger.debug("Source line unavailable: %s", e.message)
        return SOURCE_UNAVAILABLE
