"""
Logger construction options
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from .levels import Severity


class LoggerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enable_console: bool = True
    enable_file: bool = False
    min_severity: Severity = Severity.INFO
    root_dir: Path = Path(".")
    # Frame paths are shown relative to the last path segment with this name
    source_marker: str = "src"
    logger_name: str = "session_logger"

    @field_validator("min_severity", mode="before")
    @classmethod
    def _parse_severity(cls, value: Any) -> Severity:
        return Severity.parse(value)
