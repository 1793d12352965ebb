"""
Logging setup for Portfolio Mirror

One call to setup_logging() at startup configures the root logger:
colored console lines in development, JSON lines when LOG_JSON=true, and
two size-rotated files under LOG_DIR (everything, and errors only).
Modules log through logging.getLogger(__name__) and attach request_id,
client_id, ticker or data_source via ``extra=`` so the JSON output can be
filtered on them.
"""

import json
import logging
import logging.handlers
import os
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = 'portfolio_mirror.log'
ERROR_LOG_FILE_NAME = 'errors.log'
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Record attributes copied into JSON output when a caller passed them via extra=
EXTRA_FIELDS = ('request_id', 'client_id', 'ticker', 'data_source', 'duration_ms', 'path', 'status_code')

FILE_FORMAT = '[%(asctime)s] %(levelname)-8s - %(name)s.%(funcName)s:%(lineno)d - %(message)s'

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ('urllib3', 'sqlalchemy.engine', 'yfinance', 'peewee')


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the known extra fields lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }
        payload.update({
            name: getattr(record, name) for name in EXTRA_FIELDS if hasattr(record, name)
        })
        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ColoredFormatter(logging.Formatter):
    """Human-readable console lines, level name colored by severity."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m',
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        line = (
            f"{color}[{self.formatTime(record, '%Y-%m-%d %H:%M:%S')}] "
            f"{record.levelname:8s}{self.COLORS['RESET']} - "
            f"{record.module}.{record.funcName}:{record.lineno} - {record.getMessage()}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8',
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_dir: Optional[str] = None,
    json_logs: Optional[bool] = None,
    console_output: bool = True,
    file_output: bool = True
) -> None:
    """
    Configure the root logger, replacing any handlers already on it.

    Args:
        log_level: Level name; defaults to LOG_LEVEL, unknown names mean INFO
        log_dir: Directory for the rotating files; defaults to LOG_DIR or ./logs
        json_logs: JSON output; defaults to LOG_JSON
        console_output: Log to stdout
        file_output: Write portfolio_mirror.log and errors.log
    """
    level_name = (log_level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    level = getattr(logging, level_name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    if json_logs is None:
        json_logs = os.getenv('LOG_JSON', 'false').lower() == 'true'
    log_dir = log_dir or os.getenv('LOG_DIR', 'logs')

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if console_output:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(level)
        console.setFormatter(JSONFormatter() if json_logs else ColoredFormatter())
        root.addHandler(console)

    if file_output:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        file_formatter = JSONFormatter() if json_logs else logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
        root.addHandler(_rotating_handler(directory / LOG_FILE_NAME, level, file_formatter))
        root.addHandler(_rotating_handler(directory / ERROR_LOG_FILE_NAME, logging.ERROR, file_formatter))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging initialized - level {logging.getLevelName(level)}, "
        f"files {'in ' + log_dir if file_output else 'disabled'}, json {json_logs}"
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class PerformanceLogger:
    """
    Times a block and logs how long it took.

    Completion is logged at DEBUG, or WARNING past SLOW_THRESHOLD_MS; a
    block that raises is logged at ERROR with the traceback and the
    exception propagates.

        with PerformanceLogger(logger, "portfolio mirror", client_id=client_id):
            ...
    """

    SLOW_THRESHOLD_MS = 1000

    def __init__(self, logger: logging.Logger, operation: str, **extra):
        self.logger = logger
        self.operation = operation
        self.extra = extra
        self.start_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(f"Starting: {self.operation}", extra=self.extra)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed_ms = (time.perf_counter() - self.start_time) * 1000
        self.extra['duration_ms'] = round(elapsed_ms, 2)

        if exc_type is not None:
            self.logger.error(
                f"Failed: {self.operation} after {elapsed_ms:.2f}ms - {exc_val}",
                extra=self.extra,
                exc_info=(exc_type, exc_val, exc_tb)
            )
        elif elapsed_ms > self.SLOW_THRESHOLD_MS:
            self.logger.warning(f"Slow operation: {self.operation} took {elapsed_ms:.2f}ms", extra=self.extra)
        else:
            self.logger.debug(f"Completed: {self.operation} in {elapsed_ms:.2f}ms", extra=self.extra)
