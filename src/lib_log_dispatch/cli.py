"""Click command line interface.

Purpose
-------
Offer a small operator surface: print the package banner, list the bundled
writer kinds, and run a demo that emits one line per severity through the
console writer so thresholds, prefixes and colours can be checked on a real
terminal.

Contents
--------
* :func:`cli` - root group with ``--use-dotenv`` and ``--version``.
* ``info`` / ``writers`` / ``demo`` subcommands.
* :func:`main` - test-friendly runner returning an exit code.
"""

from __future__ import annotations

import os
from typing import Sequence

import click

from . import __init__conf__
from . import config as dotenv_config
from .adapters import create_default_registry
from .domain import ConfigurationError, LoggerConfiguration, Severity
from .lib_log_dispatch import summary_info
from .logger import Logger

_LEVEL_CHOICES = [level.tag for level in Severity]


@click.group(invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=None,
    help=f"Load a nearby .env before running (default follows ${dotenv_config.DOTENV_ENV_VAR}).",
)
@click.option("--version", "-V", is_flag=True, help="Print the installed version and exit.")
@click.pass_context
def cli(ctx: click.Context, use_dotenv: bool | None, version: bool) -> None:
    """Leveled multi-writer log dispatcher."""

    if dotenv_config.should_use_dotenv(explicit=use_dotenv, env_value=os.getenv(dotenv_config.DOTENV_ENV_VAR)):
        dotenv_config.enable_dotenv()
    if version:
        click.echo(__init__conf__.version)
        ctx.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info")
def cli_info() -> None:
    """Print the package metadata banner."""

    click.echo(summary_info(), nl=False)


@cli.command("writers")
def cli_writers() -> None:
    """List the writer kinds available by name."""

    for name in create_default_registry().names():
        click.echo(name)


@cli.command("demo")
@click.option("--level", "level", type=click.Choice(_LEVEL_CHOICES, case_sensitive=False), default=None, help="Threshold (default: $LOG_LEVEL or debug).")
@click.option("--prefix", default=None, help="Prefix wrapped in brackets (default: $LOG_PREFIX).")
@click.option("--async/--sync", "asynchronous", default=False, help="Dispatch through the background queue.")
@click.option("--call-site/--no-call-site", default=False, help="Annotate lines with [file:line].")
@click.option("--no-color", is_flag=True, help="Disable colours.")
def cli_demo(level: str | None, prefix: str | None, asynchronous: bool, call_site: bool, no_color: bool) -> None:
    """Emit one line per severity through the console writer."""

    try:
        configuration = LoggerConfiguration.from_mapping(
            {
                "level": level or os.getenv("LOG_LEVEL") or Severity.DEBUG.tag,
                "prefix": prefix if prefix is not None else os.getenv("LOG_PREFIX", "demo"),
            }
        )
    except ConfigurationError as exc:
        raise click.BadParameter(str(exc), param_hint="--level / LOG_LEVEL") from exc

    logger = Logger(configuration, attach_console=False, annotate_call_site=call_site)
    logger.set_writer("console", '{"no_color": true}' if no_color else "")
    logger.enable_async(asynchronous)
    try:
        for severity in Severity:
            logger.log(severity, "%s message (threshold %s)", severity.tag, configuration.threshold.tag)
        logger.flush()
    finally:
        logger.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Click group in a test-friendly manner.

    Parameters
    ----------
    argv:
        Optional sequence of argument strings (defaults to ``sys.argv[1:]``).

    Returns
    -------
    int
        Zero on success, the Click exit code otherwise.
    """

    args = list(argv) if argv is not None else None
    try:
        result = cli.main(args=args, prog_name=__init__conf__.shell_command, standalone_mode=False)
    except click.ClickException as error:
        error.show()
        return error.exit_code
    except click.exceptions.Exit as exit_:
        return exit_.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    return result if isinstance(result, int) else 0


__all__ = ["cli", "main"]
