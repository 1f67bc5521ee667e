"""
Logger for tree-saw

This module configures logging with a colorized console handler and an
optional rotating log file. Console output goes to stderr because stdout
carries the results.
"""

import os
import sys
import logging
import logging.handlers
import platform
from datetime import datetime

import psutil

# ANSI color codes for terminal output
COLORS = {
    'BLUE': '\033[94m',
    'GREEN': '\033[92m',
    'WARNING': '\033[93m',
    'FAIL': '\033[91m',
    'ENDC': '\033[0m',
    'BOLD': '\033[1m',
}

# Log levels with custom colors
LOG_COLORS = {
    'DEBUG': COLORS['BLUE'],
    'INFO': COLORS['GREEN'],
    'WARNING': COLORS['WARNING'],
    'ERROR': COLORS['FAIL'],
    'CRITICAL': COLORS['BOLD'] + COLORS['FAIL']
}


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name and error messages."""

    def __init__(self, fmt=None, use_color=True):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record):
        if not self.use_color:
            return super().format(record)

        # Work on a copy so file handlers see the plain record
        record = logging.makeLogRecord(record.__dict__)
        levelname = record.levelname
        if levelname in LOG_COLORS:
            record.levelname = f"{LOG_COLORS[levelname]}{levelname}{COLORS['ENDC']}"

        if record.levelno >= logging.ERROR:
            record.msg = f"{COLORS['FAIL']}{record.msg}{COLORS['ENDC']}"
        elif record.levelno == logging.WARNING:
            record.msg = f"{COLORS['WARNING']}{record.msg}{COLORS['ENDC']}"

        return super().format(record)


def setup_logger(name='treesaw', log_dir=None, level=logging.DEBUG,
                 console_level=logging.WARNING, log_file_level=logging.DEBUG,
                 max_log_size=10*1024*1024, backup_count=5,
                 timestamp=True, verbose=False, stream=None):
    """
    Set up a logger with a console handler and an optional file handler.

    Args:
        name: Logger name
        log_dir: Directory to store log files, or None for console only
        level: Overall logging level
        console_level: Console output logging level
        log_file_level: Log file logging level
        max_log_size: Maximum size of each log file in bytes (default: 10MB)
        backup_count: Number of backup log files to keep
        timestamp: Whether to include timestamp in console output
        verbose: Whether to log platform and memory information
        stream: Console stream (default: sys.stderr)

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear any existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    log_file = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        timestamp_str = datetime.now().strftime('%Y-%m-%d_%H-%M-%S')
        log_file = os.path.join(log_dir, f"{name}_{timestamp_str}.log")
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_log_size, backupCount=backup_count
        )
        file_handler.setLevel(log_file_level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        ))
        logger.addHandler(file_handler)

    stream = stream if stream is not None else sys.stderr
    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(console_level)

    if timestamp:
        console_format = '%(asctime)s - %(levelname)s - %(message)s'
    else:
        console_format = '%(levelname)s - %(message)s'

    use_color = hasattr(stream, 'isatty') and stream.isatty()
    console_handler.setFormatter(ColoredFormatter(console_format, use_color=use_color))
    logger.addHandler(console_handler)

    if log_file:
        logger.debug(f"Logging initialized. Log file: {log_file}")

    if verbose:
        logger.info(f"System: {platform.system()} {platform.release()} ({platform.version()})")
        logger.info(f"Python: {platform.python_version()}")
        memory = psutil.virtual_memory()
        logger.info(f"Memory: {memory.total / (1024**3):.2f}GB total, "
                    f"{memory.available / (1024**3):.2f}GB available "
                    f"({memory.percent}% used)")

    return logger
