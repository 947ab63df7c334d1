"""
Tool settings.

Settings come from three layers, later layers winning:
defaults, ~/.jargo/settings.yaml, environment variables.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, Mapping

import yaml

logger = logging.getLogger(__name__)

BACKENDS = ("native", "gradle")

# setting name -> environment variable
ENV_VARS = {
    'home': 'JARGO_HOME',
    'cache_dir': 'JARGO_CACHE_DIR',
    'backend': 'JARGO_BACKEND',
    'java_home': 'JAVA_HOME',
    'gradle_wrapper_dir': 'JARGO_GRADLE_WRAPPER',
    'http_timeout': 'JARGO_HTTP_TIMEOUT',
    'verify_checksums': 'JARGO_VERIFY_CHECKSUMS',
}

_TRUE = ('1', 'true', 'yes', 'on')
_FALSE = ('0', 'false', 'no', 'off')


@dataclass
class Settings:
    """Runtime configuration for jargo itself (not for the project being built)."""

    home: Path = field(default_factory=lambda: Path.home() / ".jargo")
    cache_dir: Optional[Path] = None  # defaults to {home}/repository
    backend: str = "native"
    java_home: Optional[Path] = None
    gradle_wrapper_dir: Optional[Path] = None  # defaults to {home}/gradle-wrapper
    http_timeout: float = 30.0
    verify_checksums: bool = True

    def __post_init__(self):
        self.home = Path(self.home).expanduser()
        self.cache_dir = Path(self.cache_dir).expanduser() if self.cache_dir else self.home / "repository"
        if self.gradle_wrapper_dir:
            self.gradle_wrapper_dir = Path(self.gradle_wrapper_dir).expanduser()
        else:
            self.gradle_wrapper_dir = self.home / "gradle-wrapper"
        if self.java_home:
            self.java_home = Path(self.java_home).expanduser()

        if self.backend not in BACKENDS:
            raise ValueError(f"Invalid setting 'backend': '{self.backend}'. Available: {list(BACKENDS)}")
        self.http_timeout = _to_float('http_timeout', self.http_timeout)
        self.verify_checksums = _to_bool('verify_checksums', self.verify_checksums)

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None,
             settings_file: Optional[Path] = None) -> 'Settings':
        """Load settings from the settings file and environment.

        Args:
            environ: Environment mapping (defaults to os.environ)
            settings_file: Explicit settings file; defaults to {home}/settings.yaml
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        home = environ.get(ENV_VARS['home'])
        if home:
            values['home'] = home
        if settings_file is None:
            settings_file = Path(values.get('home', Path.home() / ".jargo")).expanduser() / "settings.yaml"
        values.update(cls._load_settings_file(settings_file))

        for name, env_var in ENV_VARS.items():
            value = environ.get(env_var)
            if value:
                values[name] = value

        logger.debug(f"Loaded settings: {values}")
        return cls(**values)

    @staticmethod
    def _load_settings_file(path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")

        unknown = set(data) - set(ENV_VARS)
        if unknown:
            raise ValueError(f"Unknown settings in {path}: {sorted(unknown)}. Available: {sorted(ENV_VARS)}")
        logger.debug(f"Loaded settings file {path}")
        return data


def _to_float(name: str, value) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid setting '{name}': {value!r} is not a number")
    if result <= 0:
        raise ValueError(f"Invalid setting '{name}': must be positive")
    return result


def _to_bool(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"Invalid setting '{name}': {value!r} is not a boolean")
