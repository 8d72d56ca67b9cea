"""Format profile management.

Profiles store named specification strings (the value normally passed with
--formats) as YAML files in the profiles directory, so a recurring set of
outputs can be applied with --profile NAME. A profile file looks like:

    description: Archive AV1 plus an mp4 for the TV
    formats: enc=aom,q=18,p=anime;enc=x264,ext=mp4,compat=1
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml

from mp4batch.config.loader import get_data_dir
from mp4batch.config.models import FormatProfile

logger = logging.getLogger(__name__)

_PROFILE_NAME = re.compile(r"^[a-zA-Z0-9_-]+$")


class ProfileError(Exception):
    """Error loading or validating a profile."""

    pass


class ProfileNotFoundError(ProfileError):
    """Profile does not exist."""

    pass


def get_profiles_directory() -> Path:
    """Get the profiles directory path.

    Returns:
        Path to <data dir>/profiles/ (~/.mp4batch/profiles/ by default).
    """
    return get_data_dir() / "profiles"


def list_profiles() -> list[str]:
    """List available profile names, sorted.

    Returns:
        List of profile names (without .yaml extension).
    """
    profiles_dir = get_profiles_directory()
    if not profiles_dir.exists():
        return []

    return sorted(
        p.stem
        for p in profiles_dir.glob("*.yaml")
        if p.is_file() and not p.name.startswith(".")
    )


def load_profile(name: str) -> FormatProfile:
    """Load a profile by name.

    Args:
        name: Profile name (without .yaml extension).

    Returns:
        Loaded FormatProfile.

    Raises:
        ProfileNotFoundError: If profile doesn't exist.
        ProfileError: If profile is invalid.
    """
    if not _PROFILE_NAME.match(name):
        raise ProfileError(f"Profile name must be alphanumeric (with - or _): {name}")

    profile_path = get_profiles_directory() / f"{name}.yaml"
    if not profile_path.exists():
        raise ProfileNotFoundError(f"Profile not found: {name}")

    try:
        with open(profile_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ProfileError(f"Invalid YAML in profile {name}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ProfileError(f"Cannot read profile {name}: {e}") from e

    profile = _validate_and_construct(name, data)
    logger.debug("Loaded profile %s from %s", name, profile_path)
    return profile


def _validate_and_construct(name: str, data: object) -> FormatProfile:
    """Validate parsed YAML and build a FormatProfile."""
    if not isinstance(data, dict):
        raise ProfileError(f"Profile {name} must be a mapping")

    unknown = set(data) - {"name", "description", "formats"}
    if unknown:
        raise ProfileError(
            f"Unknown field(s) in profile {name}: {', '.join(sorted(unknown))}"
        )

    formats = data.get("formats")
    if not isinstance(formats, str) or not formats.strip():
        raise ProfileError(f"Profile {name} must define a non-empty 'formats' string")

    description = data.get("description")
    if description is not None and not isinstance(description, str):
        raise ProfileError(f"Profile {name}: 'description' must be a string")

    return FormatProfile(
        name=str(data.get("name", name)),
        formats=formats,
        description=description,
    )
