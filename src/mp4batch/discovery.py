"""Input discovery for batch encoding.

Inputs are VapourSynth scripts (``.vpy``). A directory is searched
recursively; scripts whose names mark them as encode outputs are skipped.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from mp4batch.formats.models import VideoEncoderName

logger = logging.getLogger(__name__)

INPUT_EXTENSION = ".vpy"

# Stem markers written by output_suffix; "<stem>.x264-q18" or "<stem>.copy"
_ENCODED_MARKERS: tuple[str, ...] = tuple(
    f".{e.value}-q" for e in VideoEncoderName if e is not VideoEncoderName.COPY
)
_COPY_MARKER = f".{VideoEncoderName.COPY.value}"

_DIGIT_RUN = re.compile(r"(\d+)")


class DiscoveryError(Exception):
    """Input path cannot be used for discovery."""


def is_input_file(path: Path) -> bool:
    """Check whether a path names a VapourSynth script."""
    return path.suffix == INPUT_EXTENSION


def is_processed_file(path: Path) -> bool:
    """Check whether a file's name marks it as an encode output.

    Args:
        path: File to check.

    Returns:
        True if the stem carries an encoder/quantizer tag such as
        ``.aom-q16`` or ends with ``.copy``.
    """
    stem = path.stem
    return any(marker in stem for marker in _ENCODED_MARKERS) or stem.endswith(
        _COPY_MARKER
    )


def natural_sort_key(path: Path) -> list[tuple[int, int | str]]:
    """Sort key ordering digit runs numerically ("ep2" before "ep10")."""
    key: list[tuple[int, int | str]] = []
    for part in _DIGIT_RUN.split(str(path)):
        if not part:
            continue
        if part.isdigit():
            key.append((0, int(part)))
        else:
            key.append((1, part.casefold()))
    return key


def discover_input_files(input_path: Path) -> list[Path]:
    """Discover the scripts to encode under a path.

    Args:
        input_path: A single ``.vpy`` file, or a directory to search
            recursively.

    Returns:
        Input files in natural order. A file argument is returned as-is,
        even if its name looks like an encode output.

    Raises:
        DiscoveryError: If a file argument is not a ``.vpy`` script, or the
            path is neither a file nor a directory.
    """
    if input_path.is_file():
        if not is_input_file(input_path):
            raise DiscoveryError(f"Input file must be a .vpy script: {input_path}")
        return [input_path]

    if input_path.is_dir():
        files = [
            p
            for p in input_path.rglob(f"*{INPUT_EXTENSION}")
            if p.is_file() and not is_processed_file(p)
        ]
        files.sort(key=natural_sort_key)
        logger.debug("Discovered %d input file(s) under %s", len(files), input_path)
        return files

    raise DiscoveryError(f"Input path is neither a file nor a directory: {input_path}")
