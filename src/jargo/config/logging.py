"""
Centralized logging configuration.

bootstrap_logging() is called from every entry point so that logging is
configured the same way from the CLI and from tests.
"""

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Optional

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
DEFAULT_FORMAT = '%(levelname)s: %(name)s: %(message)s'


def _find_logging_config() -> Optional[Path]:
    """Return ./logging.ini if present."""
    config_path = Path('logging.ini')
    if config_path.exists():
        return config_path
    return None


def _get_log_level() -> str:
    """Read LOG_LEVEL, falling back to INFO on missing or invalid values."""
    log_level = os.environ.get('LOG_LEVEL', 'INFO').strip().upper()
    if log_level not in LOG_LEVELS:
        print(f"Warning: Invalid LOG_LEVEL '{log_level}', using INFO", file=sys.stderr)
        return 'INFO'
    return log_level


def bootstrap_logging(name: Optional[str] = None) -> None:
    """
    Bootstrap logging for the application.

    Loads ./logging.ini with logging.config.fileConfig() when present, otherwise
    falls back to basicConfig on stderr. LOG_LEVEL overrides the level of the
    root logger, its stream handlers and the 'jargo' logger either way.

    Args:
        name: Optional logger name to report the configuration under
    """
    level = getattr(logging, _get_log_level())
    config_path = _find_logging_config()

    if config_path is not None:
        try:
            logging.config.fileConfig(str(config_path), disable_existing_loggers=False)
        except (OSError, KeyError, ValueError) as e:
            print(f"Warning: Failed to load logging config from {config_path}: {e}", file=sys.stderr)
            config_path = None

    if config_path is None:
        logging.basicConfig(level=level, format=DEFAULT_FORMAT, stream=sys.stderr)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setLevel(level)
    logging.getLogger('jargo').setLevel(level)

    source = config_path or 'defaults'
    logging.getLogger(name or __name__).debug(f"Logging configured from {source}")
