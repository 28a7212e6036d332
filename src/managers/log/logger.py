"""

Session Logger
Leveled logging to console and a timestamped file under <root>/output/logs,
with call-site attribution and exception/stack recording
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .config import LoggerConfig
from .errors import DirectoryCreationError, FileOpenError
from .levels import Severity
from .stack import (
    ExceptionRecord,
    relative_source_path,
    source_line_or_placeholder,
)

LOG_SUBDIR = Path("output") / "logs"
LOG_LINE_FORMAT = "%(level_tag)s\t%(asctime)s\t%(funcName)s:%(lineno)d\t%(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FILE_NAME_FORMAT = "%Y-%m-%d_%H-%M-%S.log"
EXCEPTION_MARKER = "== From catch! =="
FRAME_FORMAT = "Error in %s (%s) on line %d"

_log = logging.getLogger(__name__)


class LogLineFormatter(logging.Formatter):
    """
    Render records as tab separated `[Level] timestamp func:line message`.

    Records flagged with `raw_line` are written exactly as given.
    """

    def __init__(self):
        super().__init__(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        if getattr(record, "raw_line", False):
            return record.getMessage()
        record.level_tag = f"[{Severity(record.levelno).label}]"
        return super().format(record)


class ConsoleHandler(logging.StreamHandler):
    """
    StreamHandler writing to whatever sys.stdout currently is, rather than
    the value of sys.stdout at construction time.
    """

    def __init__(self, level=logging.NOTSET):
        logging.Handler.__init__(self, level)
        self._stream = None

    @property
    def stream(self):
        return self._stream if self._stream is not None else sys.stdout

    @stream.setter
    def stream(self, value):
        self._stream = value


class Logger:
    """
    Log manager

    Function:
    - Optional console output (stdout) and file output
    - File named from construction time, placed in <root_dir>/output/logs
    - Drop records below the minimum severity
    - Attribute each line to the code that called debug/info/warning/error
    - Record caught exceptions with the source line of every frame

    After finish() every logging call is a no-op.
    """

    def __init__(
        self,
        enable_console: bool,
        enable_file: bool,
        min_severity: Union[Severity, int, str],
        root_dir: Union[str, Path],
        *,
        logger_name: str = "session_logger",
        source_marker: str = "src",
    ):
        self.root_dir = Path(root_dir)
        self.logger_name = logger_name
        self.source_marker = source_marker
        self._min_severity = Severity.parse(min_severity)
        self._closed = False

        self.log_dir: Optional[Path] = None
        self.log_file: Optional[Path] = None
        self.console_handler: Optional[logging.Handler] = None
        self.file_handler: Optional[logging.FileHandler] = None

        self.logger = self._setup_logger(enable_console, enable_file)

    @classmethod
    def from_config(cls, config: LoggerConfig) -> "Logger":
        return cls(
            config.enable_console,
            config.enable_file,
            config.min_severity,
            config.root_dir,
            logger_name=config.logger_name,
            source_marker=config.source_marker,
        )

    def _create_log_dir(self) -> Path:
        log_dir = self.root_dir / LOG_SUBDIR
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreationError(
                f"Could not make log directory {log_dir}: {e}"
            ) from e
        return log_dir

    def _open_log_file(self, log_dir: Path) -> logging.FileHandler:
        # Two loggers created within the same second share this name
        log_file = log_dir / datetime.now().strftime(FILE_NAME_FORMAT)
        try:
            handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            raise FileOpenError(f"Could not open log file {log_file}: {e}") from e
        self.log_file = log_file
        return handler

    def _setup_logger(self, enable_console: bool, enable_file: bool) -> logging.Logger:
        # Not registered with logging.getLogger, so nothing outlives this instance
        logger = logging.Logger(self.logger_name, logging.DEBUG)
        logger.propagate = False

        formatter = LogLineFormatter()

        try:
            if enable_console:
                console_handler = ConsoleHandler()
                console_handler.setFormatter(formatter)
                logger.addHandler(console_handler)
                self.console_handler = console_handler

            if enable_file:
                self.log_dir = self._create_log_dir()
                file_handler = self._open_log_file(self.log_dir)
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)
                self.file_handler = file_handler
        except Exception:
            for handler in logger.handlers[:]:
                logger.removeHandler(handler)
            raise

        if not logger.handlers:
            # keeps logging.lastResort from printing when every sink is off
            logger.addHandler(logging.NullHandler())

        return logger

    @property
    def min_severity(self) -> Severity:
        return self._min_severity

    @property
    def console_enabled(self) -> bool:
        return self.console_handler is not None

    @property
    def file_enabled(self) -> bool:
        return self.file_handler is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def write_line(self, text: str):
        """Write `text` verbatim to every enabled sink, ignoring the threshold."""
        if self._closed:
            return
        self.logger.log(Severity.ERROR, text, extra={"raw_line": True})

    def write_log(self, severity: Severity, fmt: str, *args, stacklevel: int = 1):
        """
        Format and emit one log line.

        `stacklevel` counts frames above this call: 1 attributes the line to
        the direct caller, 2 to the caller's caller.
        """
        severity = Severity.parse(severity)
        if self._closed or severity < self._min_severity:
            return

        message = fmt % args

        self.logger.log(severity, message, stacklevel=stacklevel + 1)

    def debug(self, fmt: str, *args):
        self.write_log(Severity.DEBUG, fmt, *args, stacklevel=2)

    def info(self, fmt: str, *args):
        self.write_log(Severity.INFO, fmt, *args, stacklevel=2)

    def warning(self, fmt: str, *args):
        self.write_log(Severity.WARNING, fmt, *args, stacklevel=2)

    def error(self, fmt: str, *args):
        self.write_log(Severity.ERROR, fmt, *args, stacklevel=2)

    def exception(self, err: Union[BaseException, ExceptionRecord]):
        """
        Log a caught error and its traceback.

        Every frame gets a blank line, an `Error in ...` line and the text of
        the offending source line, or a placeholder when it cannot be read.
        """
        if isinstance(err, ExceptionRecord):
            record = err
        elif isinstance(err, BaseException):
            record = ExceptionRecord.from_exception(err)
        else:
            raise TypeError(
                f"exception() expects an exception or ExceptionRecord, got {type(err).__name__}"
            )

        if self._closed:
            return

        self.write_log(Severity.ERROR, EXCEPTION_MARKER, stacklevel=2)
        self.write_log(
            Severity.ERROR, "%s %s", record.identifier, record.message, stacklevel=2
        )

        for frame in record.frames:
            file_name = relative_source_path(frame.file, self.source_marker)
            self.write_line("")
            self.write_line(FRAME_FORMAT % (frame.name, file_name, frame.line))
            self.write_line(source_line_or_placeholder(frame.file, frame.line))

    def _release_handler(self, handler: logging.Handler):
        try:
            handler.flush()
        except Exception:
            _log.warning("Could not flush log sink %r", handler, exc_info=True)
        try:
            handler.close()
        except Exception:
            _log.warning("Could not close log sink %r", handler, exc_info=True)
        self.logger.removeHandler(handler)

    def finish(self):
        """Flush and close the sinks. Safe to call more than once."""
        if self._closed:
            return
        # file sink first, a failing console must not keep it open
        handlers = sorted(self.logger.handlers, key=lambda h: h is not self.file_handler)
        for handler in handlers:
            self._release_handler(handler)
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()

    def __str__(self) -> str:
        return f"Logger(name={self.logger_name}, file={self.log_file})"

    def __repr__(self) -> str:
        return (
            f"Logger("
            f"name='{self.logger_name}', "
            f"root_dir='{self.root_dir}', "
            f"log_file='{self.log_file}', "
            f"min_severity={self._min_severity.label}, "
            f"console_output={self.console_enabled})"
        )
