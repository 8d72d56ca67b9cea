"""CLI command for resolving output specifications against input files."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from mp4batch.cli.exit_codes import ExitCode
from mp4batch.cli.output import error_exit
from mp4batch.config import (
    ConfigError,
    FormatProfile,
    ProfileError,
    ProfileNotFoundError,
    get_config,
    list_profiles,
    load_profile,
)
from mp4batch.discovery import DiscoveryError, discover_input_files
from mp4batch.formats import FormatError, resolve
from mp4batch.formats.formatters import (
    ResolutionResults,
    format_error_human,
    format_human,
    format_json,
)
from mp4batch.logging import input_context

logger = logging.getLogger(__name__)


def load_profile_or_exit(profile_name: str, json_output: bool) -> FormatProfile:
    """Load a format profile, exiting with a suitable code on failure."""
    try:
        return load_profile(profile_name)
    except ProfileNotFoundError as e:
        _show_available_profiles_and_exit(str(e), json_output)
    except ProfileError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR, json_output)


def _show_available_profiles_and_exit(error_msg: str, json_output: bool) -> NoReturn:
    if json_output:
        error_exit(error_msg, ExitCode.PROFILE_NOT_FOUND, json_output)

    click.echo(f"Error: {error_msg}", err=True)
    available = list_profiles()
    if available:
        click.echo("\nAvailable profiles:", err=True)
        for name in available:
            click.echo(f"  - {name}", err=True)
    sys.exit(ExitCode.PROFILE_NOT_FOUND)


def resolve_files(
    files: list[Path], specification: str | None
) -> tuple[ResolutionResults, int]:
    """Resolve the specification against each file.

    A file stops at its first specification error; the remaining files are
    still resolved.

    Returns:
        Tuple of (results in file order, number of files that failed).
    """
    results: ResolutionResults = {}
    failed = 0
    for source_file in files:
        with input_context(source_file):
            try:
                results[source_file] = resolve(specification, source_file)
            except FormatError as e:
                logger.error(
                    "Failed to resolve outputs for %s: %s",
                    source_file,
                    e,
                    extra={
                        "segment_index": e.segment_index,
                        "error_type": type(e).__name__,
                    },
                )
                results[source_file] = e
                failed += 1
    return results, failed


@click.command("resolve")
@click.argument("input_path", type=click.Path(path_type=Path))
@click.option(
    "--formats",
    "-f",
    default=None,
    help="Output specification, e.g. 'enc=aom,q=18;enc=x264,ext=mp4'.",
)
@click.option(
    "--profile",
    "-p",
    default=None,
    help="Use the specification stored in a named format profile.",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format.",
)
def resolve_command(
    input_path: Path,
    formats: str | None,
    profile: str | None,
    json_output: bool,
) -> None:
    """Show the outputs each input would be encoded to.

    INPUT_PATH is a .vpy script or a directory searched recursively for
    them. Scripts that are themselves encode outputs are skipped.

    Without --formats or --profile the configured default specification is
    used, and without one of those a single x264 output.

    Examples:

        mp4batch resolve movie.vpy -f 'enc=aom,q=18,p=anime,at=1-e|ac3'

        mp4batch resolve /media/queue --profile archive --json
    """
    if formats is not None and profile is not None:
        error_exit(
            "--formats and --profile cannot be used together.",
            ExitCode.INVALID_ARGUMENTS,
            json_output,
        )

    try:
        config = get_config(formats=formats)
    except ConfigError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR, json_output)

    specification = config.encode.formats
    if profile is not None:
        specification = load_profile_or_exit(profile, json_output).formats

    try:
        files = discover_input_files(input_path.expanduser())
    except DiscoveryError as e:
        error_exit(str(e), ExitCode.TARGET_NOT_FOUND, json_output)
    if not files:
        error_exit(
            f"No .vpy files found in {input_path}",
            ExitCode.TARGET_NOT_FOUND,
            json_output,
        )

    logger.info(
        "Resolving %d file(s) with specification %r", len(files), specification
    )
    results, failed = resolve_files(files, specification)

    output_dir = config.encode.output_dir
    if json_output:
        click.echo(format_json(results, output_dir))
    else:
        blocks = []
        for source_file, result in results.items():
            if isinstance(result, FormatError):
                blocks.append(format_error_human(source_file, result))
            else:
                blocks.append(format_human(source_file, result, output_dir))
        click.echo("\n\n".join(blocks))

    if failed:
        if not json_output:
            click.echo(
                f"\n{failed} of {len(files)} file(s) failed to resolve.", err=True
            )
        sys.exit(ExitCode.PARSE_ERROR)
