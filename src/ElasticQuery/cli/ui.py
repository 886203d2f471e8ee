"""click front end of `elastic-query`.

Each command only collects its arguments; the work happens in
`CommandRunner` and the command classes.
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from ElasticQuery.cli.runner import CommandRunner
from ElasticQuery.config.app import DEFAULT_CONFIG_PATH, load_config_with_defaults

_FILE = click.Path(path_type=Path, dir_okay=False, exists=True)


@click.group(help="ElasticQuery: compile search requests and parse Elasticsearch responses.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    envvar="ELASTICQUERY_CONFIG",
    help="YAML config layered over config/default.yml.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """Load `.env`, then the config, and hand a runner to the subcommands."""
    load_dotenv()

    ctx.obj = CommandRunner(load_config_with_defaults(config_path))


@cli.command("compile")
@click.argument("request_path", type=_FILE)
@click.option("--schema", "schema_path", type=_FILE, required=True, help="Index schema file (YAML/JSON).")
@click.pass_context
def compile_cmd(ctx: click.Context, request_path: Path, schema_path: Path) -> None:
    """Print the wire query compiled from REQUEST_PATH."""
    ctx.obj.run_compile(ctx.command.name, request_path=request_path, schema_path=schema_path)


@cli.command("parse")
@click.argument("request_path", type=_FILE)
@click.argument("response_path", type=_FILE)
@click.pass_context
def parse_cmd(ctx: click.Context, request_path: Path, response_path: Path) -> None:
    """Print the result set parsed from RESPONSE_PATH for REQUEST_PATH."""
    ctx.obj.run_parse(
        ctx.command.name,
        request_path=request_path,
        response_path=response_path,
    )


@cli.command("mapping")
@click.argument("schema_path", type=_FILE)
@click.pass_context
def mapping_cmd(ctx: click.Context, schema_path: Path) -> None:
    """Print the index mapping params for SCHEMA_PATH."""
    ctx.obj.run_mapping(ctx.command.name, schema_path=schema_path)
