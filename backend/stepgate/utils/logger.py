"""
Logging Setup — console plus an append-only server.log under LOG_DIR.
"""
import logging
import os

from stepgate.config import get_settings

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_configured = False


def setup_logging() -> None:
    """Attach console and file handlers to the 'stepgate' logger (idempotent)."""
    global _configured
    if _configured:
        return
    settings = get_settings()
    root = logging.getLogger("stepgate")
    root.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    root.propagate = False

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(console)

    try:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(settings.LOG_DIR, "server.log"))
        file_handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(file_handler)
    except OSError as e:
        root.warning("File logging disabled: %s", e)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Module logger under the 'stepgate' namespace, e.g. get_logger('verification')."""
    return logging.getLogger(f"stepgate.{name}")
