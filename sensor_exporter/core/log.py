import logging
from logging.handlers import RotatingFileHandler

from .config import settings


_configured = False


def configure_logging() -> None:
    """Install root handlers once; later calls are no-ops."""
    global _configured
    if _configured:
        return
    _configured = True

    logger = logging.getLogger()
    logger.setLevel(settings.log_level.upper())

    fmt = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s - %(message)s"
    )

    # Console
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # Rotating file (avoid filling SD card)
    if settings.log_file:
        fh = RotatingFileHandler(
            settings.log_file,
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backups,
        )
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    # Scrapers hit /metrics every few seconds
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
