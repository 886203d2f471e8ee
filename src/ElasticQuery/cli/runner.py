"""Runs one CLI action: logging setup, execution, output and failure handling."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import click

from ElasticQuery.cli.commands import CompileCommand, MappingCommand, ParseCommand
from ElasticQuery.config import AppConfig
from ElasticQuery.utils.log import configure_logging, log


class Command(Protocol):
    def execute(self) -> str:
        """Run the command and return the text to print."""
        raise NotImplementedError


class CommandRunner:
    """Builds commands from CLI arguments and runs them under the configured logging."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run_compile(self, action: str, *, request_path: Path, schema_path: Path) -> None:
        self._run(action, CompileCommand(self.config, request_path, schema_path))

    def run_parse(self, action: str, *, request_path: Path, response_path: Path) -> None:
        self._run(action, ParseCommand(self.config, request_path, response_path))

    def run_mapping(self, action: str, *, schema_path: Path) -> None:
        self._run(action, MappingCommand(self.config, schema_path))

    def _run(self, action: str, command: Command) -> None:
        """Print the command output on stdout.

        Any failure is logged on stderr and turned into ``click.Abort`` so the
        process exits with status 1 and no traceback.
        """
        runtime = self.config.runtime
        configure_logging(level=runtime.level, action=action, log_to_file=runtime.to_file, log_dir=runtime.dir)
        try:
            output = command.execute()
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("%s failed: %s", action, e)
            raise click.Abort from e
        click.echo(output)
