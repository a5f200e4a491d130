"""
Logging setup for Quiz Whiz.

All application loggers live under ``quizwhiz_app``; they go to the console
and, when a log directory is configured, to a rotating ``quizwhiz.log``.
"""

import json
import logging
import logging.handlers
import os

LOGGER_NAME = 'quizwhiz_app'
LOG_FILE_NAME = 'quizwhiz.log'
TEXT_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class JsonFormatter(logging.Formatter):
    """One JSON object per line; messages are escaped properly and Vietnamese text is kept readable."""

    def format(self, record):
        entry = {
            'time': self.formatTime(record, DATE_FORMAT),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info:
            entry['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(log_level='INFO', log_dir=None, json_format=False,
                  max_bytes=10 * 1024 * 1024, backup_count=5):
    """
    Configure the ``quizwhiz_app`` logger and return it.

    ``log_dir=None`` means ``<project>/logs``; an empty string keeps logging on
    the console only. Calling it again replaces the previous handlers.
    """
    if log_dir is None:
        base_dir = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
        log_dir = os.path.join(base_dir, 'logs')

    level = getattr(logging, str(log_level).upper(), logging.INFO)
    formatter = JsonFormatter() if json_format else logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE_NAME),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8',
        ))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug(f"Logging initialized: level={logging.getLevelName(level)}, dir={log_dir or '<console>'}")
    return logger
