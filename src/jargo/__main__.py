"""
Command-line entry point: `jargo <task>` or `python -m jargo <task>`.
"""

from invoke import Program

from jargo import __version__, namespace
from jargo.config.logging import bootstrap_logging

program = Program(namespace=namespace, version=__version__, name="jargo", binary="jargo")


def main():
    bootstrap_logging()
    program.run()


if __name__ == "__main__":
    main()
