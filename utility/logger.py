# logger.py
import logging
import os
from logging.handlers import TimedRotatingFileHandler

# --------------------------------------------------------------------
# CONFIGURE THESE AS YOU WISH
# --------------------------------------------------------------------
LOG_DIR = "_logs"          # Directory where logfiles will go
BASE_LOG_NAME = "mdb_bot"  # Base log name => _logs/mdb_bot.log, etc.
LOG_LEVEL_CONSOLE = logging.INFO
LOG_LEVEL_FILE = logging.DEBUG
BACKUP_COUNT = 90          # Keep up to x old log files
# Rotate the file at midnight; add a new file each day
ROTATE_WHEN = "midnight"
ROTATE_INTERVAL = 1

# Every module asks for this name so they all share the same handlers.
LOGGER_NAME = "MdbBot"

def get_logger():
    """Return a logger configured to log to console and a rotating file."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Already configured by an earlier import
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setLevel(LOG_LEVEL_CONSOLE)
    console_handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(console_handler)

    os.makedirs(LOG_DIR, exist_ok=True)
    file_handler = TimedRotatingFileHandler(
        filename=os.path.join(LOG_DIR, f"{BASE_LOG_NAME}.log"),
        when=ROTATE_WHEN,
        interval=ROTATE_INTERVAL,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
        delay=True,
    )
    file_handler.setLevel(LOG_LEVEL_FILE)
    file_handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(file_handler)

    return logger
