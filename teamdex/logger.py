# teamdex/logger.py
# Tiny wrapper so call sites stay one-liners: log_action("CACHE MISS: pikachu")

import logging
import os

_logger = logging.getLogger("teamdex")
_configured = False


def configure_logging(log_file=None, level=logging.INFO):
    """Attach console + optional file handlers once per process."""
    global _configured
    if _configured:
        return _logger
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    _logger.addHandler(console)

    if log_file:
        try:
            os.makedirs(os.path.dirname(str(log_file)) or ".", exist_ok=True)
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(fmt)
            _logger.addHandler(fh)
        except OSError as e:
            _logger.warning(f"could not open log file {log_file}: {e}")

    _logger.setLevel(level)
    _configured = True
    return _logger


def log_action(message: str, level: int = logging.INFO):
    _logger.log(level, message)
