"""CLI entrypoint for medtrace."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import DEFAULT_CONFIG, find_config, load_config
from .errors import ConfigError, ScenarioError


@click.group()
@click.version_option(__version__, prog_name="medtrace")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to medtrace.yml (defaults to auto-detected medtrace.yml, else built-in defaults)",
)
@click.option("--verbose", is_flag=True, help="Log ledger operations to stderr")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """medtrace - provenance ledger for medicine custody chains."""
    ctx.ensure_object(dict)
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if config_path is None:
        config_path = find_config(Path.cwd())

    config = DEFAULT_CONFIG
    if config_path is not None:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            raise click.ClickException(str(e)) from e
    ctx.obj["config"] = config


@cli.command()
@click.pass_context
def roles(ctx: click.Context) -> None:
    """Show the custody role sequence and item colors."""
    from .commands.roles_cmd import run_roles

    sys.exit(run_roles(ctx.obj["config"]))


@cli.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["table", "json", "dot", "md"]),
    default="table",
    show_default=True,
    help="Output format",
)
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write output to a file instead of stdout",
)
@click.option("--strict", is_flag=True, help="Exit 1 if any step was rejected")
@click.pass_context
def replay(ctx: click.Context, script: Path, fmt: str, out: Path | None, strict: bool) -> None:
    """Replay a YAML scenario against a fresh ledger.

    Examples:

        medtrace replay scenario.yml

        medtrace replay scenario.yml --format dot --out graph.dot
    """
    from .commands.replay_cmd import run_replay

    try:
        exit_code = run_replay(script, config=ctx.obj["config"], fmt=fmt, out=out, strict=strict)
    except ScenarioError as e:
        raise click.ClickException(str(e)) from e
    sys.exit(exit_code)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
