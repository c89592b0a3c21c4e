import logging

from doctrack.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the root logger.

    Safe to call more than once; an existing handler is reused.
    """
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())
    if not any(getattr(h, "_doctrack", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._doctrack = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    # Uvicorn/SQLAlchemy keep their own levels.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
