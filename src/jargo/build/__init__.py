"""
Build stages for jargo: resolution, compilation, packaging and their pipeline.
"""

from .pipeline import BuildResult, run_build

__all__ = ['BuildResult', 'run_build']
