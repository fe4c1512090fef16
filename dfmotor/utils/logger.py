"""
Logging setup for the motor board driver.

Console output for humans, JSON lines for the log files. Records emitted by
the driver for a failed transfer carry ``board_address`` and ``register``
attributes; the JSON formatter turns them into a ``board`` block so bus
errors can be filtered per board and register.

Log directory and console level come from the ``logging`` section of the
settings file (see setup_logging_from_settings).
"""

import logging
import logging.handlers
import json
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, Optional, Union

from dfmotor.utils.settings import load_settings

DEFAULT_LOG_DIR = Path.home() / '.dfmotor' / 'logs'
MAIN_LOG = 'dfmotor.log'
ERROR_LOG = 'errors.log'

Level = Union[int, str]


def resolve_level(level: Level) -> int:
    """Accept a logging level as int or name ('debug', 'INFO', ...)."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


class StructuredFormatter(logging.Formatter):
    """JSON formatter with board/register context"""

    def format(self, record):
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        address = getattr(record, 'board_address', None)
        if address is not None:
            register = getattr(record, 'register', None)
            log_data['board'] = {
                'address': f"0x{address:02X}",
                'register': None if register is None else f"0x{register:02X}",
            }

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }

        if hasattr(record, 'extra_data'):
            log_data['extra'] = record.extra_data

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(
    log_dir: Optional[Path] = None,
    console_level: Level = logging.INFO,
    file_level: Level = logging.DEBUG
) -> Path:
    """
    Install console and rotating file handlers on the root logger.

    Args:
        log_dir: Directory for log files (default: ~/.dfmotor/logs)
        console_level: Console level, int or name
        file_level: Level for dfmotor.log, int or name

    Creates:
        - dfmotor.log: everything at file_level, JSON (10MB, 5 backups)
        - errors.log: bus and validation failures at ERROR, JSON (5MB, 3 backups)
    """
    log_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(resolve_level(console_level))
    console.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    ))
    root.addHandler(console)

    for filename, level, max_bytes, backups in (
        (MAIN_LOG, resolve_level(file_level), 10 * 1024 * 1024, 5),
        (ERROR_LOG, logging.ERROR, 5 * 1024 * 1024, 3),
    ):
        handler = logging.handlers.RotatingFileHandler(
            log_dir / filename,
            maxBytes=max_bytes,
            backupCount=backups,
            encoding='utf-8'
        )
        handler.setLevel(level)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)

    logging.getLogger("dfmotor.logging").info(f"Logging initialized - log_dir={log_dir}")
    return log_dir


def setup_logging_from_settings(settings: Optional[Dict[str, Any]] = None) -> Path:
    """
    Configure logging from the ``logging`` settings section.

    An empty ``log_dir`` means the default directory.
    """
    section = (settings or load_settings()).get('logging', {})
    return setup_logging(
        log_dir=section.get('log_dir') or None,
        console_level=section.get('console_level', logging.INFO),
    )


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (usually __name__)."""
    return logging.getLogger(name)
