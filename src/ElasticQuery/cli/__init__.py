"""CLI package for ElasticQuery.

Contains the click interface, the command runner and the command
implementations.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from ElasticQuery.cli.runner import CommandRunner
from ElasticQuery.cli.ui import cli


def main() -> None:
    """Run ElasticQuery CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
