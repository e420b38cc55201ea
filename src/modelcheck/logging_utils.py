"""
Logging configuration for modelcheck.

Records go to stderr (stdout carries the report) and optionally to a rotating
log file. ``verbose`` turns on DEBUG for the modelcheck loggers only; other
libraries stay at INFO, and SQLAlchemy at WARNING.
"""

import logging
import logging.handlers
import sys

PACKAGE_LOGGER = 'modelcheck'

LOG_FORMAT = '[%(asctime)s] %(levelname)s [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(log_file=None, verbose=False):
    """
    Configure logging for a modelcheck run.

    Args:
        log_file: Path to log file (None = stderr only)
        verbose: Enable DEBUG level logging of modelcheck itself

    Raises:
        OSError: the log file cannot be opened. Nothing is configured then.
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        ))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=logging.INFO, handlers=handlers, force=True)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.NOTSET)
    # SQLAlchemy engine logging is too chatty at INFO
    logging.getLogger('sqlalchemy').setLevel(logging.WARNING)
