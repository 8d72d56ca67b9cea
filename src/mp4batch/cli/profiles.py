"""CLI commands for format profile management."""

import json
from pathlib import Path

import click

from mp4batch.cli.exit_codes import ExitCode
from mp4batch.cli.resolve import load_profile_or_exit
from mp4batch.config import (
    FormatProfile,
    ProfileError,
    get_profiles_directory,
    list_profiles,
    load_profile,
)
from mp4batch.formats import FormatError, resolve
from mp4batch.formats.formatters import format_error_human, format_human

# Stand-in input used to show how a profile resolves; track aliases are not
# checked against the filesystem for it
_PREVIEW_INPUT = "example.vpy"


@click.group("profiles")
def profiles_group() -> None:
    """Manage named output specification profiles."""
    pass


@profiles_group.command("list")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format.",
)
def list_profiles_cmd(json_output: bool) -> None:
    """List available format profiles.

    Profiles are stored in ~/.mp4batch/profiles/ as YAML files.
    """
    profile_names = list_profiles()

    if json_output:
        data = []
        for name in profile_names:
            try:
                data.append(_profile_to_dict(name, load_profile(name)))
            except ProfileError as e:
                data.append({"name": name, "error": str(e)})
        click.echo(json.dumps(data, indent=2))
        return

    if not profile_names:
        profiles_dir = get_profiles_directory()
        click.echo(f"No profiles found in {profiles_dir}")
        click.echo("\nTo create a profile, add a YAML file to the profiles directory.")
        click.echo("Example: ~/.mp4batch/profiles/archive.yaml")
        return

    click.echo(f"{'NAME':<15} {'DESCRIPTION':<40} {'FORMATS':<30}")
    click.echo("-" * 85)
    for name in profile_names:
        try:
            profile = load_profile(name)
            desc = profile.description or "-"
            formats = profile.formats
        except ProfileError as e:
            desc = f"(error: {e})"
            formats = "-"
        click.echo(f"{name:<15} {desc[:40]:<40} {formats[:30]:<30}")


@profiles_group.command("show")
@click.argument("profile_name")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format.",
)
def show_profile(profile_name: str, json_output: bool) -> None:
    """Show a profile and the outputs its specification resolves to.

    PROFILE_NAME is the name of the profile (without .yaml extension).
    """
    profile = load_profile_or_exit(profile_name, json_output)

    if json_output:
        click.echo(json.dumps(_profile_to_dict(profile_name, profile), indent=2))
        return

    click.echo(f"Profile: {profile.name}")
    click.echo(f"Location: {_profile_path(profile_name)}")
    if profile.description:
        click.echo(f"Description: {profile.description}")
    click.echo(f"Formats: {profile.formats}")
    click.echo("")

    preview = Path(_PREVIEW_INPUT)
    try:
        outputs = resolve(profile.formats, preview, exists=lambda _: True)
    except FormatError as e:
        click.echo(format_error_human(preview, e))
        raise SystemExit(ExitCode.PARSE_ERROR) from None
    click.echo(format_human(preview, outputs))


def _profile_path(profile_name: str) -> Path:
    # The YAML name: key may differ from the file it was loaded from
    return get_profiles_directory() / f"{profile_name}.yaml"


def _profile_to_dict(profile_name: str, profile: FormatProfile) -> dict:
    data: dict = {
        "name": profile.name,
        "description": profile.description,
        "formats": profile.formats,
        "location": str(_profile_path(profile_name)),
    }
    try:
        outputs = resolve(profile.formats, Path(_PREVIEW_INPUT), exists=lambda _: True)
    except FormatError as e:
        data["valid"] = False
        data["error"] = e.format_error()
    else:
        data["valid"] = True
        data["outputs"] = [o.to_dict() for o in outputs]
    return data
