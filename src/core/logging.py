import logging
from logging import Logger

from .config import settings


def setup_logging() -> None:
    """
    Configure root logging based on settings.logging.

    - Sets root level according to settings.logging.level
    - Applies a consistent format from settings.logging.format
    - Avoids reconfiguration if handlers already exist (idempotent)
    """
    level_name = (settings.logging.level or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format=settings.logging.format,
    )

    # Engine echo goes through its own handler; keep the root copy quiet
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(noisy).setLevel(max(level, logging.INFO))


__all__ = ["setup_logging", "Logger"]
