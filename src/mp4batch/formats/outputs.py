"""Multi-output specification resolution.

A full specification string is one or more ``;``-separated segments, each
describing one output. Segments are parsed and resolved independently and
in order. The first failing segment aborts the whole specification.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from mp4batch.formats.errors import FormatError
from mp4batch.formats.models import OutputJobConfig
from mp4batch.formats.parser import parse_filters
from mp4batch.formats.resolver import resolve_output

logger = logging.getLogger(__name__)

SEGMENT_SEPARATOR = ";"


def resolve(
    specification: str | None,
    source_file: Path,
    *,
    exists: Callable[[Path], bool] = Path.exists,
) -> list[OutputJobConfig]:
    """Resolve a specification string into output job configurations.

    Args:
        specification: Full specification string, or None.
        source_file: File the specification applies to.
        exists: Existence check for external track files.

    Returns:
        One configuration per non-blank segment, in segment order. A missing
        or blank specification yields the single default configuration.

    Raises:
        FormatError: For the first segment that fails to parse or resolve.
            The error's segment_index identifies the segment.
    """
    if specification is None or not specification.strip():
        logger.debug("No specification for %s, using default output", source_file)
        return [OutputJobConfig()]

    outputs: list[OutputJobConfig] = []
    for index, segment in enumerate(specification.split(SEGMENT_SEPARATOR)):
        if not segment.strip():
            continue
        try:
            tokens = parse_filters(segment, source_file, exists=exists)
            outputs.append(resolve_output(tokens))
        except FormatError as e:
            e.locate(segment)
            e.segment_index = index
            raise

    encoders = [o.video.encoder.value for o in outputs]
    logger.debug(
        "Resolved %d output(s) for %s: %s",
        len(outputs),
        source_file,
        ", ".join(encoders),
        extra={"output_count": len(outputs), "encoders": encoders},
    )
    return outputs

