"""
key_rotator.logger
------------------
One JSON object per line on stdout, UTC timestamps. Components take a
named logger from get_logger("KeyRotator.<Component>").
"""

import logging, json, sys, time, os

LOG_LEVEL_ENV = "KEY_ROTATOR_LOG_LEVEL"


class JsonFormatter(logging.Formatter):
    """Serializes the record, so quotes or newlines in messages stay valid JSON."""

    converter = time.gmtime

    def __init__(self):
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%SZ")

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def get_logger(name="key_rotator", level=None, to_file=None):
    """
    Structured logger shared by all key rotator components.

    Without an explicit `level`, KEY_ROTATOR_LOG_LEVEL decides (INFO by default).
    Handlers are attached once per logger name.
    """
    logger = logging.getLogger(name)
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    logger.setLevel(level)

    if not logger.handlers:
        formatter = JsonFormatter()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
