"""CLI module for mp4batch."""

import logging
from pathlib import Path

import click

from mp4batch.cli.exit_codes import ExitCode
from mp4batch.cli.output import error_exit

logger = logging.getLogger(__name__)


def _configure_logging(
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from CLI options.

    Args:
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    from mp4batch.config import ConfigError, configure_logging_from_cli

    try:
        config = configure_logging_from_cli(
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    except (ConfigError, ValueError) as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR)

    logger.info(
        "mp4batch starting: log_level=%s, log_file=%s, log_format=%s",
        config.level,
        str(config.file).replace(str(Path.home()), "~") if config.file else "stderr",
        config.format,
    )


@click.group()
@click.version_option(package_name="mp4batch")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """mp4batch - Resolve batch encode specifications for VapourSynth scripts."""
    ctx.ensure_object(dict)
    _configure_logging(log_level, log_file, log_json)


# Defer import to avoid circular dependency
def _register_commands():
    from mp4batch.cli.profiles import profiles_group
    from mp4batch.cli.resolve import resolve_command

    main.add_command(resolve_command)
    main.add_command(profiles_group)


_register_commands()
