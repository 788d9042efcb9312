"""Logging setup shared by gateway modules."""

import logging
import os
import re
import sys
from typing import Iterable, Optional


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Values of these fields never reach log output.
SENSITIVE_FIELDS = ("private_key", "privateKey", "signature", "authorization", "secret")

MASK = '***MASKED***'


def _field_pattern(fields: Iterable[str]) -> "re.Pattern[str]":
    names = "|".join(re.escape(field) for field in fields)
    return re.compile(rf'((?:{names})["\']?\s*[:=]\s*["\']?)([^"\'}}\s,]+)', re.IGNORECASE)


class SensitiveDataFilter(logging.Filter):
    """
    Masks owner private keys and request signatures in log records.

    The message is rendered with its args first, so values interpolated from
    args are masked too.
    """

    def __init__(self, fields: Iterable[str] = SENSITIVE_FIELDS):
        super().__init__()
        self.pattern = _field_pattern(fields)

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            return True

        record.msg = self.mask(message)
        record.args = None
        return True

    def mask(self, text: str) -> str:
        return self.pattern.sub(rf'\1{MASK}', text)


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the logger of a component (e.g. 'gateway').

    Installs one stdout handler with SensitiveDataFilter; module loggers under
    the component's package inherit it. Calling again only changes the level.

    Args:
        component_name: Top-level logger name
        log_level: DEBUG, INFO, WARNING or ERROR. Defaults to LOG_LEVEL env var or INFO
    """
    level_name = (log_level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(component_name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        handler.addFilter(SensitiveDataFilter())
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass __name__."""
    return logging.getLogger(name)
