"""
Configuration for jargo: settings and logging.
"""

from .settings import Settings
from .logging import bootstrap_logging

__all__ = ['Settings', 'bootstrap_logging']
