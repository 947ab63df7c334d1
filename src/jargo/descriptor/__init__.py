"""
Build descriptor: models and loader.
"""

from .models import (
    BuildDescriptor,
    Capability,
    Coordinate,
    Dependency,
    DependencyScope,
    PackagingParams,
)
from .loading import dump_descriptor, load_descriptor, parse_descriptor

__all__ = [
    'BuildDescriptor',
    'Capability',
    'Coordinate',
    'Dependency',
    'DependencyScope',
    'PackagingParams',
    'dump_descriptor',
    'load_descriptor',
    'parse_descriptor',
]
