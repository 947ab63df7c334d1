"""
Task decorators for error reporting.
"""
import functools
import sys

from invoke.exceptions import Exit

from jargo.exceptions import JargoException


def reports_errors(func):
    """Turn jargo errors into a printed message with guidance and exit code 1."""
    @functools.wraps(func)
    def wrapper(ctx, *args, **kwargs):
        try:
            return func(ctx, *args, **kwargs)
        except JargoException as e:
            print(f"❌ {e}", file=sys.stderr)
            if e.guidance:
                print(e.guidance, file=sys.stderr)
            raise Exit(code=1)
        except ValueError as e:
            # invalid settings or options
            print(f"❌ {e}", file=sys.stderr)
            raise Exit(code=1)
    return wrapper
