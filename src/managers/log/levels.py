"""
Severity levels

Values line up with the standard logging module, so a Severity can be
handed to logging.Logger.log unchanged.
"""

from enum import IntEnum
from typing import Union


class Severity(IntEnum):
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    @property
    def label(self) -> str:
        """Display name used inside the [Level] tag of a log line."""
        return SEVERITY_NAMES[self]

    @classmethod
    def parse(cls, value: Union["Severity", int, str]) -> "Severity":
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unknown severity: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"Unknown severity: {value!r}") from None
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
        raise ValueError(f"Unknown severity: {value!r}")


SEVERITY_NAMES = {
    Severity.DEBUG: "Debug",
    Severity.INFO: "Info",
    Severity.WARNING: "Warning",
    Severity.ERROR: "Error",
}
