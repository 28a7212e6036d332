"""
Shared fixtures for the session logger tests.
"""

import re
from pathlib import Path
from typing import List

import pytest

from src.managers.log import Logger, Severity

TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")
FILE_NAME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}\.log$")


@pytest.fixture
def make_logger(tmp_path, capsys):
    """Build loggers rooted in tmp_path and finish them all on teardown.

    Depends on capsys so these loggers are finished before capture ends.
    """
    created: List[Logger] = []

    def _make(
        enable_console: bool = True,
        enable_file: bool = False,
        min_severity=Severity.DEBUG,
        root_dir=None,
        **kwargs,
    ) -> Logger:
        logger = Logger(
            enable_console,
            enable_file,
            min_severity,
            tmp_path if root_dir is None else root_dir,
            **kwargs,
        )
        created.append(logger)
        return logger

    yield _make

    for logger in created:
        logger.finish()


def log_files(root_dir: Path) -> List[Path]:
    return sorted((root_dir / "output" / "logs").glob("*.log"))


def read_lines(path: Path) -> List[str]:
    return path.read_text(encoding="utf-8").splitlines()
