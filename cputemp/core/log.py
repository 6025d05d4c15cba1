import logging
from logging.handlers import RotatingFileHandler

from .config import Settings, settings as default_settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
_MARKER = "_cputemp_handler"


def configure_logging(settings: Settings = default_settings) -> None:
    logger = logging.getLogger()
    logger.setLevel(settings.log_level.upper())

    # Re-running must not stack handlers
    for h in list(logger.handlers):
        if getattr(h, _MARKER, False):
            logger.removeHandler(h)
            h.close()

    fmt = logging.Formatter(_FORMAT)

    # Console
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    setattr(ch, _MARKER, True)
    logger.addHandler(ch)

    # Rotating file, only when asked for
    if settings.log_file:
        fh = RotatingFileHandler(
            settings.log_file,
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backup_count,
        )
        fh.setFormatter(fmt)
        setattr(fh, _MARKER, True)
        logger.addHandler(fh)
