"""Entry point for running chartforge as a module.

This allows the CLI to be invoked with ``python -m chartforge``.
"""

from .cli import cli

if __name__ == "__main__":  # pragma: no cover
    cli()
