# carepulse/core/logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "logs/app.log")

# Ensure logs directory exists
os.makedirs(os.path.dirname(LOG_FILE) or ".", exist_ok=True)

formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(LOG_LEVEL)
console_handler.setFormatter(formatter)

file_handler = RotatingFileHandler(
    filename=LOG_FILE,
    maxBytes=5 * 1024 * 1024,  # 5MB
    backupCount=3,
    encoding="utf-8",
)
file_handler.setLevel(LOG_LEVEL)
file_handler.setFormatter(formatter)

logger = logging.getLogger("carepulse")
logger.setLevel(LOG_LEVEL)
logger.addHandler(console_handler)
logger.addHandler(file_handler)
logger.propagate = False


def get_module_logger(name: str) -> logging.Logger:
    """Child of the carepulse logger, so it shares the handlers above."""
    if not name.startswith("carepulse"):
        name = f"carepulse.{name}"
    return logging.getLogger(name)
