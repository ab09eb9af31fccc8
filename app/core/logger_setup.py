import logging

from app.core.config import settings

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Configure the root logger once for the whole process.

    Handlers already attached by a previous call are replaced so reloads
    do not duplicate lines.
    """
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())

    if root.hasHandlers():
        root.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(console_handler)
    return root
